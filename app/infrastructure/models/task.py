"""SQLAlchemy models for tasks and their assignees."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime

task_assignee_table = Table(
    "task_assignee",
    Base.metadata,
    Column("task_id", String(36), ForeignKey("task.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(36), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
)


class TaskModel(Base):
    """Database representation of a supervisor task."""

    __tablename__ = "task"

    id = Column(String(36), primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    deadline = Column(DateTime(), nullable=False)
    priority = Column(String(10), nullable=False)
    status = Column(String(20), nullable=False)
    created_by = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    # Legacy rows hold a string or a list of strings; new rows hold a list of objects.
    comments = Column(JSON, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True, onupdate=now_in_app_naive_datetime)

    assignees = relationship("UserModel", secondary=task_assignee_table, lazy="selectin")


__all__ = ["TaskModel", "task_assignee_table"]
