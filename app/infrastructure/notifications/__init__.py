"""Realtime notification helpers for the infrastructure layer."""

from .channel import (
    POLICY_VIOLATION,
    ChannelClosedError,
    ConnectionState,
    HandshakeError,
    RealtimeChannel,
    TokenVerifier,
    parse_handshake,
)
from .dispatcher import NotificationDispatcher
from .manager import NotificationConnectionManager
from .publisher import NotificationPublisher, serialize_notification
from .registry import ConnectionRegistry

__all__ = [
    "ConnectionRegistry",
    "ConnectionState",
    "ChannelClosedError",
    "HandshakeError",
    "NotificationConnectionManager",
    "NotificationDispatcher",
    "NotificationPublisher",
    "POLICY_VIOLATION",
    "RealtimeChannel",
    "TokenVerifier",
    "parse_handshake",
    "serialize_notification",
]
