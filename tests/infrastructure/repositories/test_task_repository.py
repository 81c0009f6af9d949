"""Tests for task persistence and the stored comment formats."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.domain.entities import CommentThread, PlainTextComment, Task, TaskComment
from app.infrastructure.models import TaskModel
from app.infrastructure.repositories import TaskRepository
from app.infrastructure.repositories.task_repository import (
    resolve_task_comments,
    serialize_task_comments,
)


def _task(created_by: str, **overrides) -> Task:
    values = {
        "id": None,
        "title": "Calibrate sensor",
        "description": "Sensor 4 drifts",
        "deadline": datetime.now(tz=timezone.utc) + timedelta(days=1),
        "priority": "Low",
        "created_by": created_by,
    }
    values.update(overrides)
    return Task(**values)


@pytest.mark.parametrize("raw", [None, "", "   ", 42, {"text": "x"}])
def test_missing_or_unknown_comments_become_an_empty_thread(raw):
    assert resolve_task_comments(raw) == CommentThread()


def test_single_string_is_kept_as_plain_text():
    assert resolve_task_comments("Call the vendor") == PlainTextComment("Call the vendor")


def test_mixed_list_becomes_a_thread():
    comments = resolve_task_comments(
        [
            "legacy note",
            {"author": "u1", "text": "checked", "timestamp": "2024-03-01T10:00:00+00:00"},
            {"user": "u2", "text": "fixed"},
            {"author": "u3"},
        ]
    )

    assert isinstance(comments, CommentThread)
    assert [entry.text for entry in comments.entries] == ["legacy note", "checked", "fixed"]
    assert [entry.author_id for entry in comments.entries] == [None, "u1", "u2"]
    assert comments.entries[1].created_at == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)


def test_unparseable_timestamp_is_dropped():
    comments = resolve_task_comments([{"author": "u1", "text": "hi", "timestamp": "yesterday"}])

    assert comments.entries[0].created_at is None


def test_serialize_matches_the_stored_shapes():
    assert serialize_task_comments(PlainTextComment("note")) == "note"
    thread = CommentThread().append(TaskComment(text="done", author_id="u1"))
    assert serialize_task_comments(thread) == [
        {"author": "u1", "text": "done", "timestamp": None}
    ]


def test_create_and_reload_task_with_assignees(session, supervisor, make_user):
    operator = make_user()
    repository = TaskRepository(session)

    created = repository.create(_task(supervisor.id, assignee_ids=[operator.id]))

    loaded = repository.get(created.id)
    assert loaded is not None
    assert loaded.assignee_ids == [operator.id]
    assert loaded.comments == CommentThread()
    assert loaded.deadline.tzinfo is not None


def test_legacy_text_comment_is_read_back(session, supervisor):
    repository = TaskRepository(session)
    created = repository.create(_task(supervisor.id))
    session.get(TaskModel, created.id).comments = "Written before threads"
    session.commit()

    assert repository.get(created.id).comments == PlainTextComment("Written before threads")


def test_unknown_assignee_is_rejected(session, supervisor):
    repository = TaskRepository(session)

    with pytest.raises(ValueError, match="Unknown assignees"):
        repository.create(
            _task(supervisor.id, assignee_ids=["6d8f0a1e-0000-4000-8000-000000000001"])
        )


def test_get_ignores_malformed_identifiers(session):
    assert TaskRepository(session).get("not-a-uuid") is None


def test_list_filters_by_assignee(session, supervisor, make_user):
    operator = make_user()
    repository = TaskRepository(session)
    mine = repository.create(_task(supervisor.id, title="Mine", assignee_ids=[operator.id]))
    repository.create(_task(supervisor.id, title="Other"))

    assert [task.id for task in repository.list(assigned_to=operator.id)] == [mine.id]
    assert len(repository.list(created_by=supervisor.id)) == 2
