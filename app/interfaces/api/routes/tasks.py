"""Endpoints for creating, assigning and progressing tasks."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.events import DomainEventBus
from app.application.use_cases.tasks import (
    assign_task,
    create_task,
    list_tasks,
    update_task_status,
)
from app.domain.entities import PlainTextComment, Task, User
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import (
    get_current_active_user,
    get_event_bus,
    require_task_manager,
)
from app.interfaces.api.schemas import (
    CommentThreadRead,
    PlainTextCommentRead,
    TaskAssign,
    TaskCommentRead,
    TaskCreate,
    TaskRead,
    TaskStatusUpdate,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _task_to_schema(task: Task) -> TaskRead:
    if isinstance(task.comments, PlainTextComment):
        comments = PlainTextCommentRead(text=task.comments.text)
    else:
        comments = CommentThreadRead(
            entries=[
                TaskCommentRead(
                    author_id=entry.author_id, text=entry.text, timestamp=entry.created_at
                )
                for entry in task.comments.entries
            ]
        )
    return TaskRead(
        id=task.id,
        title=task.title,
        description=task.description,
        deadline=task.deadline,
        priority=task.priority,
        status=task.status,
        created_by=task.created_by,
        assignee_ids=task.assignee_ids,
        comments=comments,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, PermissionError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, LookupError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task_endpoint(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_task_manager),
) -> TaskRead:
    try:
        task = create_task(
            db,
            actor=current_user,
            title=payload.title,
            description=payload.description,
            deadline=payload.deadline,
            priority=payload.priority,
        )
    except (ValueError, PermissionError) as exc:
        raise _to_http_error(exc) from exc
    return _task_to_schema(task)


@router.get("", response_model=list[TaskRead])
def list_tasks_endpoint(
    status_filter: str | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[TaskRead]:
    """Return the tasks visible to the authenticated user, newest first."""

    try:
        tasks = list_tasks(db, actor=current_user, status=status_filter)
    except ValueError as exc:
        raise _to_http_error(exc) from exc
    return [_task_to_schema(task) for task in tasks]


@router.put("/{task_id}/assign", response_model=TaskRead)
def assign_task_endpoint(
    task_id: str,
    payload: TaskAssign,
    db: Session = Depends(get_db),
    events: DomainEventBus = Depends(get_event_bus),
    current_user: User = Depends(require_task_manager),
) -> TaskRead:
    """Assign the task and notify every assignee."""

    try:
        task = assign_task(
            db,
            events,
            actor=current_user,
            task_id=task_id,
            assigned_to=payload.assigned_to,
        )
    except (ValueError, LookupError, PermissionError) as exc:
        raise _to_http_error(exc) from exc
    return _task_to_schema(task)


@router.put("/{task_id}/status", response_model=TaskRead)
def update_task_status_endpoint(
    task_id: str,
    payload: TaskStatusUpdate,
    db: Session = Depends(get_db),
    events: DomainEventBus = Depends(get_event_bus),
    current_user: User = Depends(get_current_active_user),
) -> TaskRead:
    """Move the task to a new status, optionally with a closing comment."""

    try:
        task = update_task_status(
            db,
            events,
            actor=current_user,
            task_id=task_id,
            status=payload.status,
            comment=payload.comment,
        )
    except (ValueError, LookupError, PermissionError) as exc:
        raise _to_http_error(exc) from exc
    return _task_to_schema(task)
