"""Use case for assigning tasks to operators."""

from collections.abc import Iterable

from sqlalchemy.orm import Session

from app.application.events import DomainEventBus
from app.domain.entities import Task, TaskAssigned, User
from app.infrastructure.repositories import TaskRepository

from .validators import ensure_can_manage_tasks, ensure_task_found, normalize_assignees


def assign_task(
    session: Session,
    events: DomainEventBus,
    *,
    actor: User,
    task_id: str,
    assigned_to: str | Iterable[str],
) -> Task:
    """Replace the assignees of a task and announce the assignment."""

    ensure_can_manage_tasks(actor)
    assignee_ids = normalize_assignees(assigned_to)

    repository = TaskRepository(session)
    task = ensure_task_found(repository.get(task_id), task_id)
    task.assignee_ids = assignee_ids
    saved = repository.update(task)

    events.publish(
        TaskAssigned(
            task_id=saved.id,
            title=saved.title,
            assignee_ids=tuple(assignee_ids),
            assigned_by=actor.id,
        )
    )
    return saved
