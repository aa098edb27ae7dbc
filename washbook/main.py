import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api.routes import slots, bookings, blocked_periods, booking_settings, misc
from .config import get_settings
from .core.logging import configure_logging

settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title="Washbook Booking API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(slots.router, prefix="/api/v1")
app.include_router(bookings.router, prefix="/api/v1")
app.include_router(blocked_periods.router, prefix="/api/v1")
app.include_router(booking_settings.router, prefix="/api/v1")
app.include_router(misc.router, prefix="/api/v1")

logger.info("Booking API configured", extra={"env": settings.env})
