from .sender import BookingSummary, NotificationSender, get_notification_sender

__all__ = ["BookingSummary", "NotificationSender", "get_notification_sender"]
