from .notification_schemas import MarkAllReadResponse, NotificationResponse, UnreadCountResponse

__all__ = ["MarkAllReadResponse", "NotificationResponse", "UnreadCountResponse"]
