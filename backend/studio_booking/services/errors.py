# backend/studio_booking/services/errors.py
"""
Booking error taxonomy.

All errors are local, synchronous outcomes of a single request.
Each carries the HTTP status and machine code the API layer reports.
"""

from typing import Optional

from .slots.conflict import ConflictResult


class BookingError(ValueError):
    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class BookingValidationError(BookingError):
    """Malformed input detected past the request schema."""


class NotFoundError(BookingError):
    status_code = 404
    code = "NOT_FOUND"


class OutsideWorkingHoursError(BookingError):
    """Requested window is not covered by bookable schedule rules."""
    status_code = 422
    code = "OUTSIDE_WORKING_HOURS"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "Requested time is outside working hours, please choose another time")


class TimeConflictError(BookingError):
    """Requested window overlaps an existing appointment. Retryable."""
    status_code = 409
    code = "TIME_CONFLICT"

    def __init__(self, conflict: ConflictResult):
        super().__init__(
            f"Time conflicts with {conflict.client_name}'s appointment "
            f"{conflict.start_time.isoformat()} – {conflict.end_time.isoformat()}"
        )
        self.conflict = conflict

    def to_dict(self) -> dict:
        return {**super().to_dict(), "conflicting": self.conflict.to_dict()}


class TokenExpiredError(BookingError):
    status_code = 410
    code = "TOKEN_EXPIRED"
