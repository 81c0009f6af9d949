"""Tests for the notification store."""

from datetime import timedelta

import pytest

from app.infrastructure.models import NotificationModel
from app.infrastructure.repositories import NotificationRepository


def test_append_stores_unread_notification(session, operator):
    repository = NotificationRepository(session)

    notification = repository.append(operator.id, "Task assigned", task_id=None)

    assert notification.id is not None
    assert notification.user_id == operator.id
    assert notification.read is False
    assert notification.created_at is not None
    assert [item.id for item in repository.list_for_user(operator.id)] == [notification.id]


@pytest.mark.parametrize("message", ["", "   ", None])
def test_append_rejects_empty_message(session, operator, message):
    with pytest.raises(ValueError):
        NotificationRepository(session).append(operator.id, message)


def test_operations_require_a_well_formed_owner(session):
    repository = NotificationRepository(session)

    with pytest.raises(ValueError):
        repository.append("not-a-user", "hello")
    with pytest.raises(ValueError):
        repository.list_for_user("")
    with pytest.raises(ValueError):
        repository.mark_all_read(None)
    with pytest.raises(ValueError):
        repository.clear_all("*")


def test_list_for_unknown_user_is_empty(session, operator):
    assert NotificationRepository(session).list_for_user(operator.id) == []


def test_list_is_newest_first(session, operator):
    repository = NotificationRepository(session)
    created = [repository.append(operator.id, f"message {index}") for index in range(5)]

    # Rewrite timestamps out of insertion order to prove the sort key is the time.
    base = created[0].created_at.replace(tzinfo=None)
    offsets = [3, 1, 4, 0, 2]
    for notification, offset in zip(created, offsets):
        model = session.get(NotificationModel, notification.id)
        model.created_at = base + timedelta(minutes=offset)
    session.commit()

    listed = repository.list_for_user(operator.id)

    assert [item.message for item in listed] == [
        "message 2",
        "message 0",
        "message 4",
        "message 1",
        "message 3",
    ]
    timestamps = [item.created_at for item in listed]
    assert timestamps == sorted(timestamps, reverse=True)


def test_same_timestamp_falls_back_to_insertion_order(session, operator):
    repository = NotificationRepository(session)
    first = repository.append(operator.id, "first")
    second = repository.append(operator.id, "second")
    for notification in (first, second):
        session.get(NotificationModel, notification.id).created_at = first.created_at.replace(
            tzinfo=None
        )
    session.commit()

    assert [item.message for item in repository.list_for_user(operator.id)] == [
        "second",
        "first",
    ]


def test_mark_all_read_is_idempotent(session, operator):
    repository = NotificationRepository(session)
    repository.append(operator.id, "one")
    repository.append(operator.id, "two")

    assert repository.mark_all_read(operator.id) == 2
    assert repository.mark_all_read(operator.id) == 0
    assert all(item.read for item in repository.list_for_user(operator.id))
    assert repository.count_unread(operator.id) == 0


def test_mark_all_read_only_counts_unread(session, operator):
    repository = NotificationRepository(session)
    repository.append(operator.id, "old")
    repository.mark_all_read(operator.id)
    repository.append(operator.id, "new")

    assert repository.mark_all_read(operator.id) == 1


def test_clear_all_empties_the_list(session, operator):
    repository = NotificationRepository(session)
    repository.append(operator.id, "one")
    repository.append(operator.id, "two")

    assert repository.clear_all(operator.id) == 2
    assert repository.list_for_user(operator.id) == []
    assert repository.clear_all(operator.id) == 0


def test_bulk_operations_are_scoped_to_the_owner(session, make_user):
    owner = make_user()
    other = make_user()
    repository = NotificationRepository(session)
    repository.append(owner.id, "mine")
    repository.append(other.id, "theirs")

    assert repository.mark_all_read(owner.id) == 1
    assert repository.clear_all(owner.id) == 1

    remaining = repository.list_for_user(other.id)
    assert [(item.message, item.read) for item in remaining] == [("theirs", False)]
