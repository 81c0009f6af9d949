"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.infrastructure.models import NotificationModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    is_valid_identifier,
    now_in_app_timezone,
)


class NotificationRepository:
    """Durable notification store.

    Every operation is scoped to a single owner; there is no way to query or
    mutate notifications without naming the user they belong to.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(
        self, user_id: str, message: str, *, task_id: str | None = None
    ) -> Notification:
        """Persist a new unread notification for ``user_id`` and return it."""

        self._require_owner(user_id)
        if not isinstance(message, str) or not message.strip():
            raise ValueError("Notification message must not be empty")

        model = NotificationModel(
            user_id=user_id,
            message=message,
            task_id=task_id,
            read=False,
            created_at=ensure_app_naive_datetime(now_in_app_timezone()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_user(
        self, user_id: str, *, limit: int | None = None
    ) -> Sequence[Notification]:
        """Return notifications owned by ``user_id``, newest first."""

        self._require_owner(user_id)
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: str) -> int:
        self._require_owner(user_id)
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
            .count()
        )

    def mark_all_read(self, user_id: str) -> int:
        """Flag every unread notification of ``user_id`` as read.

        Returns the number of rows that changed, so a second call in a row
        reports zero.
        """

        self._require_owner(user_id)
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.read.is_(False),
            )
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return int(updated or 0)

    def clear_all(self, user_id: str) -> int:
        """Delete every notification owned by ``user_id``."""

        self._require_owner(user_id)
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return int(deleted or 0)

    @staticmethod
    def _require_owner(user_id: str) -> None:
        if not is_valid_identifier(user_id):
            raise ValueError(f"Invalid notification owner: {user_id!r}")

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            message=model.message,
            task_id=model.task_id,
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
