"""Tests for the append-only conversation log."""

from __future__ import annotations

import pytest

from buildpilot.services.conversation import ConversationLog


def test_append_assigns_id_and_timestamp():
    log = ConversationLog()
    turn = log.append("user", "hello")
    assert turn.id
    assert turn.timestamp
    assert turn.role == "user"


def test_ids_are_unique():
    log = ConversationLog()
    ids = {log.append("user", str(i)).id for i in range(50)}
    assert len(ids) == 50


def test_all_preserves_insertion_order():
    log = ConversationLog()
    log.append("assistant", "welcome")
    log.append("user", "add a button")
    log.append("assistant", "done")
    assert [t.content for t in log.all()] == ["welcome", "add a button", "done"]


def test_snapshot_is_read_only():
    log = ConversationLog()
    log.append("user", "one")
    snapshot = log.all()
    assert isinstance(snapshot, tuple)
    log.append("user", "two")
    assert len(snapshot) == 1
    assert len(log) == 2


def test_explicit_id_and_timestamp_are_kept():
    log = ConversationLog()
    turn = log.append("user", "x", turn_id="t-1", timestamp="2025-01-01T00:00:00+00:00")
    assert turn.id == "t-1"
    assert turn.timestamp == "2025-01-01T00:00:00+00:00"


def test_duplicate_id_rejected():
    log = ConversationLog()
    log.append("user", "x", turn_id="t-1")
    with pytest.raises(ValueError, match="duplicate"):
        log.append("user", "y", turn_id="t-1")


def test_turns_are_immutable():
    log = ConversationLog()
    turn = log.append("user", "x")
    with pytest.raises(Exception):
        turn.content = "changed"
