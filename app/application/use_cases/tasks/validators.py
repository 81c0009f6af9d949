"""Common validation helpers for task use cases."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from app.domain.entities import TASK_PRIORITIES, TASK_STATUSES, Task, User
from app.utils import ensure_app_timezone, normalize_identifier, now_in_app_timezone


def ensure_can_manage_tasks(actor: User) -> None:
    if not actor.can_manage_tasks():
        raise PermissionError("Only supervisors can manage tasks")


def ensure_required_text(value: str | None, field_name: str) -> str:
    normalized = (value or "").strip()
    if not normalized:
        raise ValueError(f"{field_name} is required")
    return normalized


def ensure_future_deadline(deadline: datetime | None) -> datetime:
    if deadline is None:
        raise ValueError("Deadline is required")
    localized = ensure_app_timezone(deadline)
    if localized <= now_in_app_timezone():
        raise ValueError("Deadline must be a future date")
    return localized


def ensure_priority(priority: str | None) -> str:
    for candidate in TASK_PRIORITIES:
        if (priority or "").strip().lower() == candidate.lower():
            return candidate
    raise ValueError(f"Priority must be one of: {', '.join(TASK_PRIORITIES)}")


def ensure_status(status: str | None) -> str:
    for candidate in TASK_STATUSES:
        if (status or "").strip().lower() == candidate.lower():
            return candidate
    raise ValueError(f"Status must be one of: {', '.join(TASK_STATUSES)}")


def normalize_assignees(assigned_to: str | Iterable[str] | None) -> list[str]:
    """Accept one identifier or a list of them; returns unique ids in order."""

    if assigned_to is None:
        raise ValueError("assigned_to is required")
    values = [assigned_to] if isinstance(assigned_to, str) else list(assigned_to)
    if not values:
        raise ValueError("assigned_to is required")
    return list(dict.fromkeys(normalize_identifier(value) for value in values))


def ensure_task_found(task: Task | None, task_id: str) -> Task:
    if task is None:
        raise LookupError(f"Task {task_id} not found")
    return task
