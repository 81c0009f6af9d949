"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .registry import ConnectionRegistry

if TYPE_CHECKING:
    from .channel import RealtimeChannel

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Keep bound channels reachable by connection id and indexed by user."""

    def __init__(self, registry: ConnectionRegistry | None = None) -> None:
        self._registry = registry if registry is not None else ConnectionRegistry()
        self._channels: dict[str, "RealtimeChannel"] = {}

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    def bind(self, channel: "RealtimeChannel") -> None:
        """Make a freshly authenticated ``channel`` discoverable."""

        if channel.user_id is None:
            raise ValueError("Only authenticated channels can be bound")
        self._channels[channel.connection_id] = channel
        self._registry.register(channel.user_id, channel.connection_id)

    def release(self, channel: "RealtimeChannel") -> None:
        """Forget ``channel``; later pushes addressed to it are dropped."""

        if channel.user_id is not None:
            self._registry.deregister(channel.user_id, channel.connection_id)
        self._channels.pop(channel.connection_id, None)

    def get(self, connection_id: str) -> "RealtimeChannel | None":
        return self._channels.get(connection_id)

    async def send_to_connection(self, connection_id: str, message: dict[str, Any]) -> bool:
        """Send ``message`` over a single connection.

        Returns ``False`` when the connection is gone or the write fails; the
        error never reaches the caller.
        """

        channel = self._channels.get(connection_id)
        if channel is None or not channel.is_bound:
            return False
        try:
            await channel.send(message)
        except Exception as exc:  # noqa: BLE001 - the peer may vanish mid-write
            logger.debug("Push to connection %s failed: %s", connection_id, exc)
            return False
        return True

    async def send_to_user(self, user_id: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every live connection of ``user_id``."""

        delivered = 0
        for connection_id in self._registry.lookup(user_id):
            if await self.send_to_connection(connection_id, message):
                delivered += 1
        return delivered

    def connection_count(self) -> int:
        return self._registry.connection_count()


__all__ = ["NotificationConnectionManager"]
