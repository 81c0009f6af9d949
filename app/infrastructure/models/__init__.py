"""ORM models used by the application infrastructure."""

from .user import UserModel
from .notification import NotificationModel
from .task import TaskModel, task_assignee_table

__all__ = [
    "UserModel",
    "NotificationModel",
    "TaskModel",
    "task_assignee_table",
]
