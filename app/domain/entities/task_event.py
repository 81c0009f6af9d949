"""Domain events emitted by the task subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TaskAssigned:
    """A task was (re)assigned to one or more operators."""

    task_id: str
    title: str
    assignee_ids: tuple[str, ...]
    assigned_by: str | None = None


@dataclass(frozen=True)
class TaskStatusChanged:
    """An assignee or supervisor moved a task to a new status."""

    task_id: str
    title: str
    status: str
    changed_by: str
    created_by: str | None = None
    comment: str | None = None


__all__ = ["TaskAssigned", "TaskStatusChanged"]
