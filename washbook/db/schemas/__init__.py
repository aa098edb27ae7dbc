from .slot import Slot, SlotList
from .booking import (
    Booking,
    BookingCancel,
    BookingComplete,
    BookingCreate,
    BookingListQuery,
    BookingPage,
    BookingReschedule,
    BookingUpdate,
)
from .blocked_period import BlockedPeriod, BlockedPeriodCreate, RecurringBlockCreate
from .booking_settings import BookingSettings, BookingSettingsUpdate
