"""Tests for the notification write path."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy.exc import OperationalError

from app.infrastructure.database import SessionLocal
from app.infrastructure.notifications import ConnectionRegistry, NotificationDispatcher
from app.infrastructure.repositories import NotificationRepository


class RecordingPublisher:
    def __init__(self, failing: set[str] | None = None) -> None:
        self.pushes: list[tuple[str, dict]] = []
        self._failing = failing or set()

    def push(self, connection_id: str, message: dict) -> None:
        if connection_id in self._failing:
            raise RuntimeError("connection went away")
        self.pushes.append((connection_id, message))


class BrokenSession:
    def add(self, _model) -> None:
        pass

    def commit(self) -> None:
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    def close(self) -> None:
        pass


@pytest.fixture()
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def dispatcher(database, registry, publisher) -> NotificationDispatcher:
    return NotificationDispatcher(SessionLocal, registry, publisher)


def test_notify_without_connections_still_persists(dispatcher, publisher, session, operator):
    notification = dispatcher.notify(operator.id, "msg", None)

    stored = NotificationRepository(session).list_for_user(operator.id)
    assert [item.id for item in stored] == [notification.id]
    assert stored[0].read is False
    assert publisher.pushes == []


def test_notify_pushes_full_record_to_live_connection(
    dispatcher, registry, publisher, operator
):
    registry.register(operator.id, "conn-1")

    notification = dispatcher.notify(operator.id, "Task assigned", "task-ref")

    assert len(publisher.pushes) == 1
    connection_id, message = publisher.pushes[0]
    assert connection_id == "conn-1"
    assert message["type"] == "notification"
    assert message["data"] == {
        "id": notification.id,
        "user_id": operator.id,
        "message": "Task assigned",
        "task_id": "task-ref",
        "read": False,
        "timestamp": notification.created_at.isoformat(),
    }


def test_every_connection_of_the_user_gets_one_push(
    dispatcher, registry, publisher, make_user
):
    user = make_user()
    other = make_user()
    registry.register(user.id, "phone")
    registry.register(user.id, "laptop")
    registry.register(other.id, "elsewhere")

    dispatcher.notify(user.id, "hello")

    assert sorted(connection_id for connection_id, _ in publisher.pushes) == ["laptop", "phone"]


def test_failed_push_does_not_stop_other_connections(database, registry, operator, session):
    publisher = RecordingPublisher(failing={"broken"})
    dispatcher = NotificationDispatcher(SessionLocal, registry, publisher)
    registry.register(operator.id, "broken")
    registry.register(operator.id, "healthy")

    notification = dispatcher.notify(operator.id, "hello")

    assert notification is not None
    assert [connection_id for connection_id, _ in publisher.pushes] == ["healthy"]
    assert len(NotificationRepository(session).list_for_user(operator.id)) == 1


@pytest.mark.parametrize(
    "user_id",
    [None, "", "12", "not-a-uuid", 42, "6D8F0A1E-0000-4000-8000-000000000001"],
)
def test_malformed_recipient_is_logged_and_dropped(dispatcher, publisher, caplog, user_id):
    with caplog.at_level(logging.WARNING):
        assert dispatcher.notify(user_id, "hello") is None

    assert publisher.pushes == []
    assert "malformed user id" in caplog.text


def test_empty_message_is_dropped_without_raising(dispatcher, registry, publisher, operator, session):
    registry.register(operator.id, "conn-1")

    assert dispatcher.notify(operator.id, "  ") is None

    assert publisher.pushes == []
    assert NotificationRepository(session).list_for_user(operator.id) == []


def test_persistence_failure_skips_delivery(registry, publisher, caplog):
    user_id = "6f1c2b1e-8a7b-4c1e-9c55-1f0f2b8a9d01"
    registry.register(user_id, "conn-1")
    dispatcher = NotificationDispatcher(BrokenSession, registry, publisher)

    with caplog.at_level(logging.ERROR):
        assert dispatcher.notify(user_id, "hello") is None

    assert publisher.pushes == []
    assert "Could not persist notification" in caplog.text


def test_uppercase_recipient_is_dropped_as_malformed(
    dispatcher, registry, publisher, session, operator, caplog
):
    registry.register(operator.id, "live")

    with caplog.at_level(logging.WARNING):
        assert dispatcher.notify(operator.id.upper(), "hello") is None

    repository = NotificationRepository(session)
    assert repository.list_for_user(operator.id) == []
    assert publisher.pushes == []
    assert "malformed user id" in caplog.text
