"""Persistence helpers for task entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import (
    CommentThread,
    PlainTextComment,
    Task,
    TaskComment,
    TaskComments,
)
from app.infrastructure.models import TaskModel, UserModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    is_valid_identifier,
    new_identifier,
)


class TaskRepository:
    """Provide CRUD operations for :class:`Task` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, task_id: str) -> Task | None:
        model = self._get_model(task_id)
        return self._to_entity(model) if model else None

    def list(
        self,
        *,
        created_by: str | None = None,
        assigned_to: str | None = None,
        status: str | None = None,
    ) -> Sequence[Task]:
        query = self.session.query(TaskModel)
        if created_by is not None:
            query = query.filter(TaskModel.created_by == created_by)
        if assigned_to is not None:
            query = query.filter(TaskModel.assignees.any(UserModel.id == assigned_to))
        if status is not None:
            query = query.filter(TaskModel.status == status)
        query = query.order_by(TaskModel.created_at.desc(), TaskModel.id.desc())
        return [self._to_entity(model) for model in query.all()]

    def create(self, task: Task) -> Task:
        model = TaskModel(id=task.id or new_identifier())
        self._apply_entity_to_model(model, task)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, task: Task) -> Task:
        model = self._get_model(task.id)
        if model is None:
            msg = f"Task with id {task.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, task)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_model(self, task_id: str | None) -> TaskModel | None:
        if not is_valid_identifier(task_id):
            return None
        return self.session.get(TaskModel, task_id)

    def _apply_entity_to_model(self, model: TaskModel, task: Task) -> None:
        model.title = task.title
        model.description = task.description
        model.deadline = ensure_app_naive_datetime(task.deadline)
        model.priority = task.priority
        model.status = task.status
        model.created_by = task.created_by
        model.comments = serialize_task_comments(task.comments)

        assignee_ids = list(dict.fromkeys(task.assignee_ids))
        if {user.id for user in model.assignees} != set(assignee_ids):
            users = []
            if assignee_ids:
                users = (
                    self.session.query(UserModel)
                    .filter(UserModel.id.in_(assignee_ids))
                    .all()
                )
            missing = set(assignee_ids) - {user.id for user in users}
            if missing:
                raise ValueError(f"Unknown assignees: {', '.join(sorted(missing))}")
            model.assignees = users

    @staticmethod
    def _to_entity(model: TaskModel) -> Task:
        return Task(
            id=model.id,
            title=model.title,
            description=model.description,
            deadline=ensure_app_timezone(model.deadline),
            priority=model.priority,
            status=model.status,
            created_by=model.created_by,
            assignee_ids=sorted(user.id for user in model.assignees),
            comments=resolve_task_comments(model.comments),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


def resolve_task_comments(raw: Any) -> TaskComments:
    """Turn whatever shape is stored in the ``comments`` column into a variant.

    Old rows may hold a single string, a list of strings or a list of
    ``{"author", "text", "timestamp"}`` objects.
    """

    if raw is None:
        return CommentThread()
    if isinstance(raw, str):
        return PlainTextComment(raw) if raw.strip() else CommentThread()
    if not isinstance(raw, list):
        return CommentThread()

    entries: list[TaskComment] = []
    for item in raw:
        if isinstance(item, str):
            entries.append(TaskComment(text=item))
        elif isinstance(item, dict):
            text = item.get("text")
            if not isinstance(text, str):
                continue
            author = item.get("author") or item.get("user")
            entries.append(
                TaskComment(
                    text=text,
                    author_id=str(author) if author else None,
                    created_at=_parse_timestamp(item.get("timestamp")),
                )
            )
    return CommentThread(entries=tuple(entries))


def serialize_task_comments(comments: TaskComments) -> str | list[dict[str, Any]]:
    """Return the JSON value stored for ``comments``."""

    if isinstance(comments, PlainTextComment):
        return comments.text
    return [
        {
            "author": entry.author_id,
            "text": entry.text,
            "timestamp": entry.created_at.isoformat() if entry.created_at else None,
        }
        for entry in comments.entries
    ]


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return ensure_app_timezone(datetime.fromisoformat(value))
    except ValueError:
        return None


__all__ = ["TaskRepository", "resolve_task_comments", "serialize_task_comments"]
