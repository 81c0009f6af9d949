"""Client-side notification surface for Python consumers of the API."""

from .api import NotificationApiClient
from .realtime import (
    RealtimeAuthenticationError,
    RealtimeNotificationStream,
    build_channel_url,
)
from .surface import (
    ClientNotification,
    NotificationSource,
    NotificationSurface,
    NotificationSyncError,
)

__all__ = [
    "ClientNotification",
    "NotificationApiClient",
    "NotificationSource",
    "NotificationSurface",
    "NotificationSyncError",
    "RealtimeAuthenticationError",
    "RealtimeNotificationStream",
    "build_channel_url",
]
