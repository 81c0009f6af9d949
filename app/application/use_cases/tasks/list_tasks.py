"""Use case for listing the tasks visible to a user."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import ROLE_SUPERVISOR, Task, User
from app.infrastructure.repositories import TaskRepository

from .validators import ensure_status


def list_tasks(
    session: Session, *, actor: User, status: str | None = None
) -> Sequence[Task]:
    """Supervisors see what they created, operators what they were given."""

    status_filter = ensure_status(status) if status else None
    repository = TaskRepository(session)
    if actor.is_admin():
        return repository.list(status=status_filter)
    if actor.has_role(ROLE_SUPERVISOR):
        return repository.list(created_by=actor.id, status=status_filter)
    return repository.list(assigned_to=actor.id, status=status_filter)
