from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field

from ..models.booking import BookingStatus, PaymentStatus


class BookingCustomer(BaseModel):
    customer_name: str | None = Field(default=None, max_length=255)
    customer_phone: str | None = Field(default=None, max_length=32)
    customer_email: str | None = Field(default=None, max_length=255)


class BookingCreate(BookingCustomer):
    location_id: int
    service_offering_id: int
    scheduled_start: datetime
    driver_id: int | None = None
    plate_number: str | None = Field(default=None, max_length=16)
    payment_provider: str | None = None
    notes: str | None = None


class BookingUpdate(BookingCustomer):
    scheduled_start: datetime | None = None
    service_offering_id: int | None = None
    plate_number: str | None = Field(default=None, max_length=16)
    notes: str | None = None


class BookingReschedule(BaseModel):
    scheduled_start: datetime


class BookingCancel(BaseModel):
    reason: str | None = None


class BookingComplete(BaseModel):
    wash_event_id: str | None = None


class Booking(BookingCustomer):
    id: int
    booking_code: str
    network_id: int
    location_id: int
    driver_id: int | None = None
    service_offering_id: int
    service_package_id: int | None = None
    vehicle_type: str | None = None
    plate_number: str | None = None
    scheduled_start: datetime
    scheduled_end: datetime
    status: BookingStatus
    payment_status: PaymentStatus
    payment_provider: str | None = None
    service_duration_minutes: int
    service_price: Decimal
    currency: str
    notes: str | None = None
    created_by_type: str | None = None
    created_by_id: str | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancellation_reason: str | None = None
    cancellation_fee_applied: Decimal | None = None
    wash_event_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class BookingPage(BaseModel):
    items: list[Booking]
    total: int
    page: int
    limit: int


class BookingListQuery(BaseModel):
    location_id: int | None = None
    status: BookingStatus | None = None
    date_from: date | None = None
    date_to: date | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
