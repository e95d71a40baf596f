from .notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationRead,
    PaginationRead,
    SendTestNotificationRequest,
    UnreadCountResponse,
)
from .preference import (
    CategoryUpdate,
    ForumSubscriptionRead,
    ForumSubscriptionUpdate,
    NotificationPreferenceRead,
    NotificationsEnabledUpdate,
)

__all__ = [
    "CategoryUpdate",
    "ForumSubscriptionRead",
    "ForumSubscriptionUpdate",
    "MarkAllReadResponse",
    "NotificationListResponse",
    "NotificationPreferenceRead",
    "NotificationRead",
    "NotificationsEnabledUpdate",
    "PaginationRead",
    "SendTestNotificationRequest",
    "UnreadCountResponse",
]
