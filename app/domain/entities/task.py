"""Domain entities describing tasks and their closing comments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

TASK_PRIORITY_LOW = "Low"
TASK_PRIORITY_MEDIUM = "Medium"
TASK_PRIORITY_HIGH = "High"
TASK_PRIORITIES = (TASK_PRIORITY_LOW, TASK_PRIORITY_MEDIUM, TASK_PRIORITY_HIGH)

TASK_STATUS_PENDING = "Pending"
TASK_STATUS_IN_PROGRESS = "In Progress"
TASK_STATUS_COMPLETED = "Completed"
TASK_STATUSES = (TASK_STATUS_PENDING, TASK_STATUS_IN_PROGRESS, TASK_STATUS_COMPLETED)


@dataclass(frozen=True)
class TaskComment:
    """Single entry of a comment thread."""

    text: str
    author_id: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class PlainTextComment:
    """Free text left on legacy tasks that predate comment threads."""

    text: str

    kind = "plain_text"


@dataclass(frozen=True)
class CommentThread:
    """Ordered comments left by the people working on a task."""

    entries: tuple[TaskComment, ...] = ()

    kind = "thread"

    def append(self, comment: TaskComment) -> "CommentThread":
        return CommentThread(entries=self.entries + (comment,))


TaskComments = Union[PlainTextComment, CommentThread]


@dataclass
class Task:
    """Unit of work created by a supervisor and assigned to operators."""

    id: str | None
    title: str
    description: str
    deadline: datetime
    priority: str
    created_by: str
    status: str = TASK_STATUS_PENDING
    assignee_ids: list[str] = field(default_factory=list)
    comments: TaskComments = field(default_factory=CommentThread)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_assigned_to(self, user_id: str) -> bool:
        return user_id in self.assignee_ids


__all__ = [
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
]
