"""Tests for chat_budget/database.py."""
from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from chat_budget.database import Database
from chat_budget.schemas import Message


@pytest.fixture
def db(tmp_path):
    return Database(str(tmp_path / "nested" / "chat.db"))


def _at(role, content, minutes, token_count=None):
    return Message(
        role=role,
        content=content,
        timestamp=datetime(2026, 1, 30, 10, 0) + timedelta(minutes=minutes),
        token_count=token_count,
    )


class TestMessages:
    def test_creates_parent_directory(self, tmp_path):
        Database(str(tmp_path / "a" / "b" / "chat.db"))
        assert (tmp_path / "a" / "b" / "chat.db").exists()

    def test_save_and_get_round_trip(self, db):
        message = _at("user", "Ａ１％ stays as typed", 0, token_count=7)
        db.save_message("s1", message)
        assert db.get_messages("s1") == [message]

    def test_chronological_order(self, db):
        db.save_message("s1", _at("assistant", "second", 1))
        db.save_message("s1", _at("user", "first", 0))
        assert [m.content for m in db.get_messages("s1")] == ["first", "second"]

    def test_limit(self, db):
        for i in range(5):
            db.save_message("s1", _at("user", f"m{i}", i))
        assert [m.content for m in db.get_messages("s1", limit=2)] == ["m0", "m1"]

    def test_sessions_are_separate(self, db):
        db.save_message("s1", _at("user", "one", 0))
        db.save_message("s2", _at("user", "two", 1))
        assert [m.content for m in db.get_messages("s2")] == ["two"]


class TestUtility:
    def test_clear_session(self, db):
        db.save_message("s1", _at("user", "one", 0))
        db.save_message("s2", _at("user", "two", 0))
        db.clear_session("s1")
        assert db.get_messages("s1") == []
        assert len(db.get_messages("s2")) == 1

    def test_all_session_ids_newest_first(self, db):
        db.save_message("old", _at("user", "a", 0))
        db.save_message("new", _at("user", "b", 10))
        db.save_message("old", _at("user", "c", 20))
        assert db.get_all_session_ids() == ["new", "old"]

    def test_session_stats(self, db):
        db.save_message("s1", _at("user", "a", 0, token_count=4))
        db.save_message("s1", _at("assistant", "b", 1, token_count=6))
        db.save_message("s1", _at("user", "c", 2))
        assert db.get_session_stats("s1") == {"message_count": 3, "total_tokens": 10}

    def test_stats_for_unknown_session(self, db):
        assert db.get_session_stats("missing") == {"message_count": 0, "total_tokens": 0}
