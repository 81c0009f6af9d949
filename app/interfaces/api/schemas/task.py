"""Pydantic models describing task payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    deadline: datetime
    priority: str = Field(..., description="Low, Medium or High")


class TaskAssign(BaseModel):
    assigned_to: str | list[str] = Field(
        ..., description="Identifier of the operator, or a list of identifiers"
    )


class TaskStatusUpdate(BaseModel):
    status: str = Field(..., description="Pending, In Progress or Completed")
    comment: str | None = Field(default=None, max_length=2000)


class TaskCommentRead(BaseModel):
    author_id: str | None = None
    text: str
    timestamp: datetime | None = None


class PlainTextCommentRead(BaseModel):
    kind: Literal["plain_text"] = "plain_text"
    text: str


class CommentThreadRead(BaseModel):
    kind: Literal["thread"] = "thread"
    entries: list[TaskCommentRead] = Field(default_factory=list)


class TaskRead(BaseModel):
    id: str
    title: str
    description: str
    deadline: datetime
    priority: str
    status: str
    created_by: str
    assignee_ids: list[str] = Field(default_factory=list)
    comments: Annotated[
        Union[PlainTextCommentRead, CommentThreadRead], Field(discriminator="kind")
    ]
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = [
    "CommentThreadRead",
    "PlainTextCommentRead",
    "TaskAssign",
    "TaskCommentRead",
    "TaskCreate",
    "TaskRead",
    "TaskStatusUpdate",
]
