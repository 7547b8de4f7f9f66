import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .database import init_db
from .redis_client import redis_client
from .routers import (
    appointments,
    booking_tokens,
    schedule_rules,
    slots,
    staff,
    staff_settings,
    time_blocks,
)
from .services.errors import BookingError

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Studio Booking API", lifespan=lifespan)

app.include_router(slots.router)
app.include_router(appointments.router)
app.include_router(schedule_rules.router)
app.include_router(staff_settings.router)
app.include_router(time_blocks.router)
app.include_router(staff.router)
app.include_router(booking_tokens.router)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    logger.debug(f"{request.method} {request.url.path} → {exc.status_code} {exc.code}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
def health():
    redis_ok = None
    if redis_client is not None:
        try:
            redis_ok = redis_client.ping()
        except Exception:
            logger.exception("Redis ping failed")
            redis_ok = False
    return {"status": "ok", "redis": redis_ok}
