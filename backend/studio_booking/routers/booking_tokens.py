# backend/studio_booking/routers/booking_tokens.py
# API.md:
# - GET /booking-token/{token} = public prefill (404 unknown, 410 expired)
# - POST /admin/tokens = issue a token

import secrets

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import BookingTokens as DBBookingTokens
from ..schemas.booking_tokens import (
    BookingTokenCreate,
    BookingTokenPrefill,
    BookingTokenRead,
)
from ..services.errors import NotFoundError, TokenExpiredError
from ..services.slots.timeutils import as_utc, to_db_utc, utc_now

router = APIRouter(tags=["booking-tokens"])


@router.get("/booking-token/{token}", response_model=BookingTokenPrefill)
def get_booking_token(token: str, db: Session = Depends(get_db)):
    obj = db.query(DBBookingTokens).filter(DBBookingTokens.token == token).first()
    if not obj:
        raise NotFoundError("Token not found")
    if obj.expires_at is not None and as_utc(obj.expires_at) < utc_now():
        raise TokenExpiredError("Token expired")
    return obj


@router.post("/admin/tokens", response_model=BookingTokenRead, status_code=status.HTTP_201_CREATED)
def create_booking_token(data: BookingTokenCreate, db: Session = Depends(get_db)):
    values = data.model_dump()
    if values["expires_at"] is not None:
        values["expires_at"] = to_db_utc(values["expires_at"])

    obj = DBBookingTokens(token=secrets.token_urlsafe(16), **values)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
