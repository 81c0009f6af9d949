"""Public helpers for emitting domain notifications."""

from .events import (
    TaskNotificationHandlers,
    register_notification_handlers,
    task_assigned_message,
    task_status_message,
)

__all__ = [
    "TaskNotificationHandlers",
    "register_notification_handlers",
    "task_assigned_message",
    "task_status_message",
]
