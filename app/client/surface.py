"""Local notification list kept in sync with the server.

The surface is seeded by a fetch, grows with realtime pushes, and applies
mark-read / clear actions optimistically before the server confirms them.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Protocol

from pydantic import TypeAdapter

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)
_TIMESTAMP = TypeAdapter(datetime)


class NotificationSyncError(RuntimeError):
    """The server did not confirm an optimistic change."""


class NotificationSource(Protocol):
    async def list(self) -> list[dict[str, Any]]: ...

    async def mark_all_read(self) -> int: ...

    async def clear_all(self) -> int: ...


@dataclass(frozen=True)
class ClientNotification:
    id: Any
    message: str
    task_id: str | None = None
    read: bool = False
    timestamp: datetime | None = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "ClientNotification":
        timestamp = data.get("timestamp")
        if timestamp is not None:
            timestamp = _TIMESTAMP.validate_python(timestamp)
        return cls(
            id=data["id"],
            message=str(data.get("message", "")),
            task_id=data.get("task_id"),
            read=bool(data.get("read", False)),
            timestamp=timestamp,
        )

    @property
    def sort_key(self) -> datetime:
        if self.timestamp is None:
            return _EPOCH
        if self.timestamp.tzinfo is None:
            return self.timestamp.replace(tzinfo=timezone.utc)
        return self.timestamp


class NotificationSurface:
    """Most-recent-first notification list for one signed-in user.

    With ``rollback_on_failure`` (the default) a failed confirmation restores
    the list as it was before the optimistic change, keeping any pushes that
    arrived in between, and raises :class:`NotificationSyncError`. Without it
    the optimistic state is kept and only the error is raised.
    """

    def __init__(self, source: NotificationSource, *, rollback_on_failure: bool = True) -> None:
        self._source = source
        self._rollback_on_failure = rollback_on_failure
        self._items: list[ClientNotification] = []
        self.is_loading = False

    @property
    def notifications(self) -> list[ClientNotification]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._items if not item.read)

    async def refresh(self) -> bool:
        """Reload from the server; pushes received meanwhile are kept."""

        self.is_loading = True
        try:
            payloads = await self._source.list()
            fetched = [ClientNotification.from_payload(payload) for payload in payloads]
        except Exception:  # noqa: BLE001 - a failed fetch keeps the current list
            logger.warning("Failed to fetch notifications", exc_info=True)
            return False
        finally:
            self.is_loading = False

        fetched_ids = {item.id for item in fetched}
        pushed = [item for item in self._items if item.id not in fetched_ids]
        self._items = sorted(pushed + fetched, key=lambda item: item.sort_key, reverse=True)
        return True

    def receive(self, payload: Mapping[str, Any]) -> ClientNotification | None:
        """Prepend a pushed notification; duplicates of a known id are ignored."""

        notification = ClientNotification.from_payload(payload)
        if any(item.id == notification.id for item in self._items):
            return None
        self._items.insert(0, notification)
        return notification

    async def consume(self, stream: AsyncIterable[Mapping[str, Any]]) -> int:
        """Feed every push from ``stream`` into the list until it ends."""

        received = 0
        async for payload in stream:
            if self.receive(payload) is not None:
                received += 1
        return received

    async def mark_all_read(self) -> int:
        if self.unread_count == 0:
            return 0
        snapshot = list(self._items)
        self._items = [replace(item, read=True) for item in self._items]
        try:
            return await self._source.mark_all_read()
        except Exception as exc:
            self._on_failure(snapshot)
            raise NotificationSyncError("Failed to mark all notifications as read.") from exc

    async def clear_all(self) -> int:
        if not self._items:
            return 0
        snapshot = list(self._items)
        self._items = []
        try:
            return await self._source.clear_all()
        except Exception as exc:
            self._on_failure(snapshot)
            raise NotificationSyncError("Failed to clear notifications.") from exc

    def _on_failure(self, snapshot: list[ClientNotification]) -> None:
        if not self._rollback_on_failure:
            return
        known = {item.id for item in snapshot}
        arrived = [item for item in self._items if item.id not in known]
        self._items = arrived + snapshot


__all__ = [
    "ClientNotification",
    "NotificationSource",
    "NotificationSurface",
    "NotificationSyncError",
]
