"""In-memory index of live realtime connections per user."""

from __future__ import annotations

import threading
from collections.abc import Iterator


class ConnectionRegistry:
    """Map user identities to the connection identifiers currently bound to them.

    A user appears in the registry only while at least one of their
    connections is live; removing the last connection drops the key. The
    registry is read from worker threads (dispatch) and written from the event
    loop (connect/disconnect), so every access goes through a lock.
    """

    def __init__(self) -> None:
        self._connections: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def register(self, user_id: str, connection_id: str) -> None:
        """Add ``connection_id`` to the set of ``user_id``."""

        with self._lock:
            self._connections.setdefault(user_id, set()).add(connection_id)

    def deregister(self, user_id: str, connection_id: str) -> None:
        """Remove ``connection_id`` from ``user_id``; unknown pairs are ignored."""

        with self._lock:
            connections = self._connections.get(user_id)
            if connections is None:
                return
            connections.discard(connection_id)
            if not connections:
                del self._connections[user_id]

    def lookup(self, user_id: str) -> frozenset[str]:
        """Return a snapshot of the live connections of ``user_id``."""

        with self._lock:
            return frozenset(self._connections.get(user_id, ()))

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._connections

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._connections))

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def connection_count(self) -> int:
        with self._lock:
            return sum(len(connections) for connections in self._connections.values())


__all__ = ["ConnectionRegistry"]
