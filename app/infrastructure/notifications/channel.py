"""Authenticated realtime channel wrapping a single websocket."""

from __future__ import annotations

import asyncio
import enum
import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from fastapi import WebSocket, WebSocketDisconnect

from app.utils import new_identifier, now_in_app_timezone

if TYPE_CHECKING:
    from .manager import NotificationConnectionManager

logger = logging.getLogger(__name__)

POLICY_VIOLATION = 1008

TokenVerifier = Callable[[str], Awaitable[str]]


class ConnectionState(str, enum.Enum):
    """Lifecycle of a realtime connection."""

    CONNECTED = "connected"
    BOUND = "bound"
    CLOSED = "closed"


class HandshakeError(ValueError):
    """Raised when the first frame of a connection cannot authenticate it."""


class ChannelClosedError(RuntimeError):
    """Raised when sending on a channel that is not bound anymore."""


def parse_handshake(raw: str) -> str:
    """Extract the bearer token from the handshake frame.

    Accepts ``{"type": "authenticate", "token": "..."}``, a JSON string, or
    the raw token text.
    """

    text = raw.strip()
    if not text:
        raise HandshakeError("Empty handshake frame")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return text

    token: Any = None
    if isinstance(payload, str):
        token = payload
    elif isinstance(payload, dict):
        if payload.get("type", "authenticate") != "authenticate":
            raise HandshakeError(f"Unexpected handshake frame type {payload.get('type')!r}")
        token = payload.get("token")
    if not isinstance(token, str) or not token.strip():
        raise HandshakeError("Handshake frame carries no token")
    return token.strip()


class RealtimeChannel:
    """Per-connection state machine: ``CONNECTED -> BOUND -> CLOSED``.

    The channel only becomes discoverable through the connection registry once
    the handshake token has been verified. Closing is idempotent and releases
    the registry entry exactly once, whatever caused the disconnect.
    """

    def __init__(
        self,
        websocket: WebSocket,
        manager: "NotificationConnectionManager",
        verifier: TokenVerifier,
        *,
        handshake_timeout: float | None = None,
        connection_id: str | None = None,
    ) -> None:
        self._websocket = websocket
        self._manager = manager
        self._verifier = verifier
        self._handshake_timeout = handshake_timeout or None
        self.connection_id = connection_id or new_identifier()
        self.created_at = now_in_app_timezone()
        self.state = ConnectionState.CONNECTED
        self.user_id: str | None = None

    @property
    def is_bound(self) -> bool:
        return self.state is ConnectionState.BOUND

    async def run(self) -> None:
        """Accept the websocket and serve it until the peer goes away."""

        await self._websocket.accept()
        try:
            try:
                user_id = await self._authenticate()
            except (HandshakeError, asyncio.TimeoutError) as exc:
                logger.warning(
                    "Realtime handshake failed for connection %s: %s",
                    self.connection_id,
                    str(exc) or "timed out",
                )
                await self._reject()
                return

            self.bind(user_id)
            await self._websocket.send_json(
                {
                    "type": "connected",
                    "data": {"connection_id": self.connection_id, "user_id": user_id},
                }
            )
            await self._serve()
        except WebSocketDisconnect:
            pass
        finally:
            self.close()

    def bind(self, user_id: str) -> None:
        """Attach ``user_id`` to the channel and make it reachable for pushes."""

        if self.state is not ConnectionState.CONNECTED:
            raise HandshakeError(f"Cannot bind a channel in state {self.state.value}")
        self.user_id = user_id
        self.state = ConnectionState.BOUND
        self._manager.bind(self)
        logger.info("User %s bound to realtime connection %s", user_id, self.connection_id)

    def close(self) -> bool:
        """Move to ``CLOSED``; returns ``False`` when it was already closed."""

        if self.state is ConnectionState.CLOSED:
            return False
        was_bound = self.state is ConnectionState.BOUND
        self.state = ConnectionState.CLOSED
        if was_bound:
            self._manager.release(self)
            logger.info(
                "Realtime connection %s of user %s closed", self.connection_id, self.user_id
            )
        return True

    async def send(self, message: dict[str, Any]) -> None:
        if not self.is_bound:
            raise ChannelClosedError(f"Connection {self.connection_id} is not bound")
        await self._websocket.send_json(message)

    async def _authenticate(self) -> str:
        try:
            raw = await asyncio.wait_for(
                self._websocket.receive_text(), timeout=self._handshake_timeout
            )
        except KeyError as exc:
            raise HandshakeError("Handshake frame must be text") from exc

        token = parse_handshake(raw)
        try:
            return await self._verifier(token)
        except ValueError as exc:
            raise HandshakeError(str(exc)) from exc

    async def _serve(self) -> None:
        while True:
            try:
                message = await self._websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except (ValueError, KeyError):
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await self._websocket.send_json({"type": "pong"})

    async def _reject(self) -> None:
        self.close()
        try:
            await self._websocket.close(code=POLICY_VIOLATION)
        except RuntimeError:
            logger.debug("Connection %s already closed by peer", self.connection_id)


__all__ = [
    "ChannelClosedError",
    "ConnectionState",
    "HandshakeError",
    "POLICY_VIOLATION",
    "RealtimeChannel",
    "TokenVerifier",
    "parse_handshake",
]
