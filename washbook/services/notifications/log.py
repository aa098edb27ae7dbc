import logging

from .sender import BookingSummary, NotificationSender

logger = logging.getLogger(__name__)


class LogNotificationSender(NotificationSender):
    def send_booking_confirmation(self, recipient: str, summary: BookingSummary) -> bool:
        logger.info(
            "Booking confirmation",
            extra={"recipient": recipient, "booking_code": summary.booking_code},
        )
        return True
