"""Tests for the client-side notification surface."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.client import ClientNotification, NotificationSurface, NotificationSyncError


def _payload(identifier, message="m", *, read=False, minute=0):
    return {
        "id": identifier,
        "user_id": "u",
        "message": message,
        "task_id": None,
        "read": read,
        "timestamp": f"2024-05-01T12:{minute:02d}:00+00:00",
    }


class FakeSource:
    def __init__(self, items=None, *, fail=False):
        self.items = list(items or [])
        self.fail = fail
        self.calls: list[str] = []

    async def list(self):
        self.calls.append("list")
        if self.fail:
            raise ConnectionError("offline")
        return list(self.items)

    async def mark_all_read(self):
        self.calls.append("mark_all_read")
        if self.fail:
            raise ConnectionError("offline")
        return sum(1 for item in self.items if not item["read"])

    async def clear_all(self):
        self.calls.append("clear_all")
        if self.fail:
            raise ConnectionError("offline")
        return len(self.items)


async def _stream(*payloads):
    for payload in payloads:
        yield payload


@pytest.mark.asyncio
async def test_refresh_orders_newest_first():
    source = FakeSource([_payload(1, minute=1), _payload(3, minute=3), _payload(2, minute=2)])
    surface = NotificationSurface(source)

    assert await surface.refresh() is True

    assert [item.id for item in surface.notifications] == [3, 2, 1]
    assert surface.unread_count == 3
    assert surface.is_loading is False


@pytest.mark.asyncio
async def test_failed_refresh_keeps_the_current_list():
    surface = NotificationSurface(FakeSource(fail=True))
    surface.receive(_payload(1))

    assert await surface.refresh() is False

    assert [item.id for item in surface.notifications] == [1]
    assert surface.is_loading is False


@pytest.mark.asyncio
async def test_refresh_keeps_pushes_missing_from_the_fetch():
    surface = NotificationSurface(FakeSource([_payload(1, minute=1)]))
    surface.receive(_payload(2, minute=5))

    await surface.refresh()

    assert [item.id for item in surface.notifications] == [2, 1]


@pytest.mark.asyncio
async def test_consume_prepends_pushes_and_skips_duplicates():
    surface = NotificationSurface(FakeSource())

    received = await surface.consume(_stream(_payload(1), _payload(2), _payload(1)))

    assert received == 2
    assert [item.id for item in surface.notifications] == [2, 1]


@pytest.mark.asyncio
async def test_mark_all_read_is_optimistic():
    source = FakeSource([_payload(1), _payload(2)])
    surface = NotificationSurface(source)
    await surface.refresh()

    assert await surface.mark_all_read() == 2

    assert surface.unread_count == 0
    assert all(item.read for item in surface.notifications)


@pytest.mark.asyncio
async def test_nothing_to_do_makes_no_request():
    source = FakeSource([_payload(1, read=True)])
    surface = NotificationSurface(source)
    await surface.refresh()

    assert await surface.mark_all_read() == 0
    await surface.clear_all()
    assert await surface.clear_all() == 0

    assert source.calls == ["list", "clear_all"]


@pytest.mark.asyncio
async def test_failed_mark_read_rolls_back():
    source = FakeSource([_payload(1), _payload(2, read=True)])
    surface = NotificationSurface(source)
    await surface.refresh()
    source.fail = True

    with pytest.raises(NotificationSyncError):
        await surface.mark_all_read()

    assert {item.id: item.read for item in surface.notifications} == {1: False, 2: True}


@pytest.mark.asyncio
async def test_failed_clear_rolls_back():
    source = FakeSource([_payload(1), _payload(2, minute=1)])
    surface = NotificationSurface(source)
    await surface.refresh()
    source.fail = True

    with pytest.raises(NotificationSyncError):
        await surface.clear_all()

    assert [item.id for item in surface.notifications] == [2, 1]


@pytest.mark.asyncio
async def test_rollback_can_be_disabled():
    source = FakeSource([_payload(1)])
    surface = NotificationSurface(source, rollback_on_failure=False)
    await surface.refresh()
    source.fail = True

    with pytest.raises(NotificationSyncError):
        await surface.clear_all()

    assert surface.notifications == []


@pytest.fixture()
def served_payloads(client, session, operator, headers_for):
    """Notifications exactly as ``GET /notifications`` renders them."""

    from app.infrastructure.repositories import NotificationRepository

    repository = NotificationRepository(session)
    stored = [repository.append(operator.id, "first"), repository.append(operator.id, "second")]
    response = client.get("/notifications", headers=headers_for(operator))
    assert response.status_code == 200
    return stored, response.json()


@pytest.mark.asyncio
async def test_refresh_accepts_the_served_payloads(served_payloads):
    stored, payloads = served_payloads
    surface = NotificationSurface(FakeSource(payloads))

    assert await surface.refresh() is True

    assert [item.id for item in surface.notifications] == [stored[1].id, stored[0].id]
    assert all(item.timestamp.tzinfo is not None for item in surface.notifications)


@pytest.mark.asyncio
async def test_push_and_fetch_share_one_wire_shape(served_payloads):
    from app.infrastructure.notifications import serialize_notification

    stored, payloads = served_payloads
    pushed = serialize_notification(stored[1])
    surface = NotificationSurface(FakeSource(payloads))
    surface.receive(pushed)

    await surface.refresh()

    assert pushed == payloads[0]
    assert [item.id for item in surface.notifications] == [stored[1].id, stored[0].id]


def test_zulu_timestamps_are_parsed():
    notification = ClientNotification.from_payload(
        {"id": 1, "message": "m", "timestamp": "2024-05-01T12:00:00.250000Z"}
    )

    assert notification.timestamp == datetime(2024, 5, 1, 12, 0, 0, 250000, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_malformed_fetch_keeps_the_current_list():
    surface = NotificationSurface(FakeSource([{"id": 9, "timestamp": "not a date"}]))
    surface.receive(_payload(1))

    assert await surface.refresh() is False

    assert [item.id for item in surface.notifications] == [1]
