"""Use case for moving a task through its statuses."""

from sqlalchemy.orm import Session

from app.application.events import DomainEventBus
from app.domain.entities import (
    CommentThread,
    PlainTextComment,
    Task,
    TaskComment,
    TaskComments,
    TaskStatusChanged,
    User,
)
from app.infrastructure.repositories import TaskRepository
from app.utils import now_in_app_timezone

from .validators import ensure_status, ensure_task_found


def update_task_status(
    session: Session,
    events: DomainEventBus,
    *,
    actor: User,
    task_id: str,
    status: str,
    comment: str | None = None,
) -> Task:
    """Set the status of a task, optionally leaving a closing comment.

    Assignees, the creator, supervisors and administrators may update a task.
    """

    new_status = ensure_status(status)
    repository = TaskRepository(session)
    task = ensure_task_found(repository.get(task_id), task_id)

    if not (
        task.is_assigned_to(actor.id)
        or task.created_by == actor.id
        or actor.can_manage_tasks()
    ):
        raise PermissionError("Not authorized")

    task.status = new_status
    text = (comment or "").strip()
    if text:
        task.comments = _append_comment(
            task.comments,
            TaskComment(text=text, author_id=actor.id, created_at=now_in_app_timezone()),
        )
    saved = repository.update(task)

    events.publish(
        TaskStatusChanged(
            task_id=saved.id,
            title=saved.title,
            status=saved.status,
            changed_by=actor.id,
            created_by=saved.created_by,
            comment=text or None,
        )
    )
    return saved


def _append_comment(comments: TaskComments, comment: TaskComment) -> CommentThread:
    if isinstance(comments, PlainTextComment):
        comments = CommentThread(entries=(TaskComment(text=comments.text),))
    return comments.append(comment)
