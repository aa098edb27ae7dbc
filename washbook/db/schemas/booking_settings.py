from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field


class BookingSettingsUpdate(BaseModel):
    cancellation_deadline_hours: int | None = Field(default=None, ge=0)
    cancellation_fee_percent: Decimal | None = Field(default=None, ge=0, le=100)
    no_show_fee_percent: Decimal | None = Field(default=None, ge=0, le=100)
    reminder_enabled: bool | None = None
    reminder_hours_before: list[int] | None = None
    require_prepayment_online: bool | None = None
    allow_pay_on_site_cash: bool | None = None
    allow_pay_on_site_card: bool | None = None
    allow_online_card: bool | None = None
    allow_apple_pay: bool | None = None
    allow_google_pay: bool | None = None
    cancellation_policy_text: str | None = None
    confirmation_message: str | None = None


class BookingSettings(BaseModel):
    network_id: int
    cancellation_deadline_hours: int
    cancellation_fee_percent: Decimal
    no_show_fee_percent: Decimal
    reminder_enabled: bool
    reminder_hours_before: list[int]
    require_prepayment_online: bool
    allow_pay_on_site_cash: bool
    allow_pay_on_site_card: bool
    allow_online_card: bool
    allow_apple_pay: bool
    allow_google_pay: bool
    cancellation_policy_text: str | None = None
    confirmation_message: str | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
