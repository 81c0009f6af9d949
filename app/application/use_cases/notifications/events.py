"""Subscribers that turn task events into user notifications."""

from __future__ import annotations

from typing import Protocol

from app.application.events import DomainEventBus
from app.domain.entities import Notification, TaskAssigned, TaskStatusChanged


class Notifier(Protocol):
    def notify(
        self, user_id: str, message: str, task_id: str | None = None
    ) -> Notification | None: ...


def task_assigned_message(title: str) -> str:
    return f'Task "{title}" has been assigned to you.'


def task_status_message(event: TaskStatusChanged) -> str:
    message = f'Task "{event.title}" is now {event.status}.'
    if event.comment:
        message = f"{message} Comment: {event.comment}"
    return message


class TaskNotificationHandlers:
    """Issue one independent notification per affected user."""

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier

    def on_task_assigned(self, event: TaskAssigned) -> None:
        message = task_assigned_message(event.title)
        for user_id in dict.fromkeys(event.assignee_ids):
            self._notifier.notify(user_id, message, event.task_id)

    def on_task_status_changed(self, event: TaskStatusChanged) -> None:
        if not event.created_by or event.created_by == event.changed_by:
            return
        self._notifier.notify(event.created_by, task_status_message(event), event.task_id)


def register_notification_handlers(
    bus: DomainEventBus, notifier: Notifier
) -> TaskNotificationHandlers:
    """Subscribe the notification side effects of task events to ``bus``."""

    handlers = TaskNotificationHandlers(notifier)
    bus.subscribe(TaskAssigned, handlers.on_task_assigned)
    bus.subscribe(TaskStatusChanged, handlers.on_task_status_changed)
    return handlers


__all__ = [
    "Notifier",
    "TaskNotificationHandlers",
    "register_notification_handlers",
    "task_assigned_message",
    "task_status_message",
]
