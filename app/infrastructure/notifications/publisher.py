"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from anyio import from_thread
from pydantic import TypeAdapter

from app.domain.entities import Notification

from .manager import NotificationConnectionManager

logger = logging.getLogger(__name__)

_TIMESTAMP = TypeAdapter(datetime)


class NotificationPublisher:
    """Schedule pushes on the event loop without waiting for them."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task[Any]] = set()

    def push(self, connection_id: str, message: dict[str, Any]) -> None:
        """Schedule ``message`` to be written to ``connection_id``.

        Callable from the event loop or from an AnyIO worker thread (sync
        routes). Outside both, there is no loop to deliver on and the push is
        skipped; clients catch up through the notifications endpoint.
        """

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run_sync(self._spawn, connection_id, message)
            except RuntimeError:
                logger.debug(
                    "No event loop available, push to connection %s skipped",
                    connection_id,
                )
        else:
            self._spawn(connection_id, message)

    def _spawn(self, connection_id: str, message: dict[str, Any]) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._manager.send_to_connection(connection_id, message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for the pushes scheduled so far."""

        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the wire representation shared by pushes and the REST API.

    Timestamps are rendered by pydantic, the same way FastAPI renders response
    models, so clients parse both paths identically.
    """

    created_at = notification.created_at
    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "message": notification.message,
        "task_id": notification.task_id,
        "read": notification.read,
        "timestamp": _TIMESTAMP.dump_python(created_at, mode="json") if created_at else None,
    }


__all__ = ["NotificationPublisher", "serialize_notification"]
