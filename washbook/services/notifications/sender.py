from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from ...config import Settings


@dataclass(slots=True)
class BookingSummary:
    booking_code: str
    customer_name: str
    location_name: str
    location_address: str | None
    scheduled_start: datetime
    scheduled_end: datetime
    service_name: str
    vehicle_type: str
    plate_number: str | None
    price: Decimal
    currency: str

    def as_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["scheduled_start"] = self.scheduled_start.isoformat()
        payload["scheduled_end"] = self.scheduled_end.isoformat()
        payload["price"] = str(self.price)
        return payload


class NotificationSender(ABC):
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @abstractmethod
    def send_booking_confirmation(self, recipient: str, summary: BookingSummary) -> bool:
        """Hand a confirmation to the delivery service; ``False`` when it was not accepted."""
        raise NotImplementedError


def get_notification_sender(settings: Settings) -> NotificationSender:
    if settings.notification_provider == "log":
        from .log import LogNotificationSender

        return LogNotificationSender(settings)
    if settings.notification_provider == "webhook":
        from .webhook import WebhookNotificationSender

        return WebhookNotificationSender(settings)
    raise ValueError(f"Unsupported notification provider {settings.notification_provider}")
