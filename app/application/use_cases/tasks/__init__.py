"""Use cases for managing tasks."""

from .assign_task import assign_task
from .create_task import create_task
from .list_tasks import list_tasks
from .update_task_status import update_task_status

__all__ = ["assign_task", "create_task", "list_tasks", "update_task_status"]
