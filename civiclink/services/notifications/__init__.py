# Local application imports
from civiclink.services.notifications.dispatcher import (
    CommentPosted,
    IssueAssigned,
    IssueEvent,
    IssueStatusChanged,
    NotificationDispatcher,
)
from civiclink.services.notifications.notification_services import (
    list_notifications,
    mark_all_read,
    mark_read,
    unread_count,
)

__all__ = [
    "CommentPosted",
    "IssueAssigned",
    "IssueEvent",
    "IssueStatusChanged",
    "NotificationDispatcher",
    "list_notifications",
    "mark_all_read",
    "mark_read",
    "unread_count",
]
