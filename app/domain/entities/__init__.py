"""Domain entities exposed by the application."""

from .notification import Notification
from .task import (
    TASK_PRIORITIES,
    TASK_PRIORITY_HIGH,
    TASK_PRIORITY_LOW,
    TASK_PRIORITY_MEDIUM,
    TASK_STATUS_COMPLETED,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_PENDING,
    TASK_STATUSES,
    CommentThread,
    PlainTextComment,
    Task,
    TaskComment,
    TaskComments,
)
from .task_event import TaskAssigned, TaskStatusChanged
from .user import ROLE_ADMIN, ROLE_OPERATOR, ROLE_SUPERVISOR, USER_ROLES, User

__all__ = [
    "Notification",
    "Task",
    "TaskComment",
    "TaskComments",
    "PlainTextComment",
    "CommentThread",
    "TASK_PRIORITIES",
    "TASK_PRIORITY_LOW",
    "TASK_PRIORITY_MEDIUM",
    "TASK_PRIORITY_HIGH",
    "TASK_STATUSES",
    "TASK_STATUS_PENDING",
    "TASK_STATUS_IN_PROGRESS",
    "TASK_STATUS_COMPLETED",
    "TaskAssigned",
    "TaskStatusChanged",
    "User",
    "ROLE_ADMIN",
    "ROLE_SUPERVISOR",
    "ROLE_OPERATOR",
    "USER_ROLES",
]
