"""Write path for notifications: persist first, then push to live connections."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.infrastructure.repositories import NotificationRepository
from app.utils import is_valid_identifier

from .publisher import serialize_notification
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class Pusher(Protocol):
    def push(self, connection_id: str, message: dict[str, Any]) -> None: ...


class NotificationDispatcher:
    """Create notifications on behalf of business actions.

    The store is the source of truth: a notification that could not be
    persisted is never pushed, and a push that fails leaves the stored
    record for the client to fetch later. Nothing raised here reaches the
    action that triggered the notification.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        registry: ConnectionRegistry,
        publisher: Pusher,
    ) -> None:
        self._session_factory = session_factory
        self._registry = registry
        self._publisher = publisher

    def notify(
        self, user_id: str, message: str, task_id: str | None = None
    ) -> Notification | None:
        """Persist ``message`` for ``user_id`` and push it to their connections."""

        if not is_valid_identifier(user_id):
            logger.warning("Dropping notification for malformed user id %r", user_id)
            return None

        session = self._session_factory()
        try:
            notification = NotificationRepository(session).append(
                user_id, message, task_id=task_id
            )
        except ValueError as exc:
            logger.warning("Dropping notification for user %s: %s", user_id, exc)
            return None
        except SQLAlchemyError:
            logger.exception("Could not persist notification for user %s", user_id)
            return None
        finally:
            session.close()

        self.deliver(notification)
        return notification

    def deliver(self, notification: Notification) -> int:
        """Push an already stored ``notification``; returns the connections targeted."""

        connection_ids = self._registry.lookup(notification.user_id)
        if not connection_ids:
            return 0
        message = {"type": "notification", "data": serialize_notification(notification)}
        for connection_id in connection_ids:
            try:
                self._publisher.push(connection_id, message)
            except Exception:  # noqa: BLE001 - one bad connection must not stop the rest
                logger.debug("Could not schedule push to %s", connection_id, exc_info=True)
        return len(connection_ids)


__all__ = ["NotificationDispatcher", "Pusher"]
