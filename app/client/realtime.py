"""Websocket client for the realtime notification channel."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import websockets
from websockets.exceptions import ConnectionClosed

logger = logging.getLogger(__name__)

CHANNEL_PATH = "/notifications/ws"
POLICY_VIOLATION = 1008


class RealtimeAuthenticationError(RuntimeError):
    """The server refused the credential presented in the handshake."""


def build_channel_url(base_url: str) -> str:
    """Turn the API base URL into the websocket URL of the channel."""

    parts = urlsplit(base_url)
    scheme = {"http": "ws", "https": "wss"}.get(parts.scheme, parts.scheme)
    path = parts.path.rstrip("/") + CHANNEL_PATH
    return urlunsplit((scheme, parts.netloc, path, "", ""))


class RealtimeNotificationStream:
    """Async iterator over the notifications pushed to one user.

    A dropped connection is re-opened with exponential backoff and the
    handshake is sent again on every new connection. Iteration only stops
    when the server rejects the credential (close code 1008), which raises
    :class:`RealtimeAuthenticationError`, or when ``max_retries`` consecutive
    attempts fail. Pushes missed while disconnected are recovered by fetching.
    """

    def __init__(
        self,
        url: str,
        token: str,
        *,
        connect: Callable[..., Any] = websockets.connect,
        reconnect: bool = True,
        initial_backoff: float = 1.0,
        max_backoff: float = 30.0,
        max_retries: int | None = None,
    ) -> None:
        self._url = url
        self._token = token
        self._connect = connect
        self._reconnect = reconnect
        self._initial_backoff = initial_backoff
        self._max_backoff = max_backoff
        self._max_retries = max_retries
        self.connection_id: str | None = None
        self.connections_opened = 0

    @property
    def is_bound(self) -> bool:
        return self.connection_id is not None

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        backoff = self._initial_backoff
        failures = 0
        while True:
            self.connection_id = None
            try:
                async with aclosing(self._session()) as session:
                    async for payload in session:
                        yield payload
            except ConnectionClosed as exc:
                code = exc.rcvd.code if exc.rcvd is not None else None
                if code == POLICY_VIOLATION:
                    raise RealtimeAuthenticationError(
                        "Realtime channel rejected the credential"
                    ) from exc
                logger.info("Realtime channel closed: %s", exc)
            except (OSError, asyncio.TimeoutError) as exc:
                logger.info("Realtime channel unreachable: %s", exc)

            if self.is_bound:
                backoff = self._initial_backoff
                failures = 0
            else:
                failures += 1

            if not self._reconnect:
                return
            if self._max_retries is not None and failures > self._max_retries:
                logger.warning(
                    "Giving up on the realtime channel after %s failed attempts", failures
                )
                return

            await asyncio.sleep(backoff)
            backoff = min(backoff * 2, self._max_backoff)

    async def _session(self) -> AsyncIterator[dict[str, Any]]:
        async with self._connect(self._url) as websocket:
            self.connections_opened += 1
            await websocket.send(json.dumps({"type": "authenticate", "token": self._token}))
            async for raw in websocket:
                message = _decode(raw)
                if message is None:
                    continue
                if message.get("type") == "connected":
                    self.connection_id = message.get("data", {}).get("connection_id")
                elif message.get("type") == "notification":
                    yield message.get("data", {})


def _decode(raw: str | bytes) -> dict[str, Any] | None:
    try:
        message = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return message if isinstance(message, dict) else None


__all__ = [
    "RealtimeAuthenticationError",
    "RealtimeNotificationStream",
    "build_channel_url",
]
