from __future__ import annotations

import logging

import httpx

from ...config import Settings
from .sender import BookingSummary, NotificationSender

logger = logging.getLogger(__name__)


class WebhookNotificationSender(NotificationSender):
    """Posts booking confirmations to the notification service as JSON."""

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        super().__init__(settings)
        self.transport = transport

    def send_booking_confirmation(self, recipient: str, summary: BookingSummary) -> bool:
        url = self.settings.notification_webhook_url
        if not url:
            logger.warning(
                "Notification webhook URL is not configured; skipping booking confirmation"
            )
            return False
        try:
            with httpx.Client(
                timeout=self.settings.notification_timeout_seconds,
                transport=self.transport,
            ) as client:
                response = client.post(
                    url,
                    json={
                        "type": "booking_confirmation",
                        "recipient": recipient,
                        "booking": summary.as_payload(),
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception(
                "Failed to send booking confirmation",
                extra={"booking_code": summary.booking_code},
            )
            return False
        return True
