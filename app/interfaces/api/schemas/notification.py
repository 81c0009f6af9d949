"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: str
    message: str
    task_id: str | None = None
    read: bool = False
    timestamp: datetime


class NotificationBulkResult(BaseModel):
    """Outcome of a bulk mark-read or clear operation."""

    message: str
    count: int = Field(..., ge=0, description="Number of notifications affected")


__all__ = ["NotificationBulkResult", "NotificationRead"]
