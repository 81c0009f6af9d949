"""Use case for creating tasks."""

from datetime import datetime

from sqlalchemy.orm import Session

from app.domain.entities import TASK_STATUS_PENDING, Task, User
from app.infrastructure.repositories import TaskRepository

from .validators import (
    ensure_can_manage_tasks,
    ensure_future_deadline,
    ensure_priority,
    ensure_required_text,
)


def create_task(
    session: Session,
    *,
    actor: User,
    title: str,
    description: str,
    deadline: datetime,
    priority: str,
) -> Task:
    """Create an unassigned task owned by ``actor``."""

    ensure_can_manage_tasks(actor)
    task = Task(
        id=None,
        title=ensure_required_text(title, "Title"),
        description=ensure_required_text(description, "Description"),
        deadline=ensure_future_deadline(deadline),
        priority=ensure_priority(priority),
        created_by=actor.id,
        status=TASK_STATUS_PENDING,
    )
    return TaskRepository(session).create(task)
