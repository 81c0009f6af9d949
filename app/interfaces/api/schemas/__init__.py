from .auth import Token
from .notification import NotificationBulkResult, NotificationRead
from .task import (
    CommentThreadRead,
    PlainTextCommentRead,
    TaskAssign,
    TaskCommentRead,
    TaskCreate,
    TaskRead,
    TaskStatusUpdate,
)

__all__ = [
    "CommentThreadRead",
    "NotificationBulkResult",
    "NotificationRead",
    "PlainTextCommentRead",
    "TaskAssign",
    "TaskCommentRead",
    "TaskCreate",
    "TaskRead",
    "TaskStatusUpdate",
    "Token",
]
