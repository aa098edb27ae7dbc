from .network import Network
from .location import Location, OpeningHours, DayOfWeek
from .service_offering import ServicePackage, ServiceOffering
from .booking import Booking, BookingStatus, PaymentStatus
from .blocked_time_slot import BlockedTimeSlot
from .booking_settings import BookingSettings
from .audit_log import AuditLog, ActorType
