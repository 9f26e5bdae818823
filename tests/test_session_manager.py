"""Tests for editing session lifecycle."""

import pytest

from models.diff import DiffResult
from services.session_manager import SessionManager, SessionNotFoundError


def hunks(result: DiffResult) -> list[tuple[str, int, int]]:
    return [(c.type.value, c.startLine, c.endLine) for c in result.changes]


class TestSessionLifecycle:
    """Test load/update/reset/clear."""

    def test_create_without_content(self):
        sessions = SessionManager()
        session = sessions.create_session()
        assert session.engine.has_baseline() is False
        assert session.session_id in sessions

    def test_create_with_content_loads_baseline(self):
        sessions = SessionManager()
        session = sessions.create_session("line1\nline2")
        assert session.engine.has_baseline() is True
        assert sessions.update(session.session_id, "line1\nline2").hasChanges is False

    def test_update_diffs_against_baseline(self):
        sessions = SessionManager()
        session_id = sessions.create_session("line1\nline2").session_id
        result = sessions.update(session_id, "line1\nline2\nline3")
        assert hunks(result) == [("added", 2, 3)]
        assert sessions.get(session_id).last_diff == result

    def test_update_without_baseline(self):
        sessions = SessionManager()
        session_id = sessions.create_session().session_id
        assert sessions.update(session_id, "anything").hasChanges is False

    def test_reset_accepts_current_content(self):
        sessions = SessionManager()
        session_id = sessions.create_session("a").session_id
        sessions.update(session_id, "a\nb")
        sessions.reset_baseline(session_id)

        assert sessions.get(session_id).last_diff.hasChanges is False
        assert sessions.update(session_id, "a\nb").hasChanges is False
        assert hunks(sessions.update(session_id, "a")) == [("deleted", 1, 1)]

    def test_reset_before_any_content_keeps_no_baseline(self):
        sessions = SessionManager()
        session = sessions.reset_baseline(sessions.create_session().session_id)
        assert session.engine.has_baseline() is False

    def test_load_replaces_baseline(self):
        sessions = SessionManager()
        session_id = sessions.create_session("old").session_id
        sessions.update(session_id, "changed")
        sessions.load(session_id, "fresh")
        assert sessions.get(session_id).last_diff.hasChanges is False
        assert hunks(sessions.update(session_id, "fresh\nmore")) == [("added", 1, 2)]

    def test_clear_drops_baseline(self):
        sessions = SessionManager()
        session_id = sessions.create_session("a").session_id
        session = sessions.clear(session_id)
        assert session.engine.has_baseline() is False
        assert session.current is None
        assert sessions.update(session_id, "b").hasChanges is False

    def test_sessions_are_independent(self):
        sessions = SessionManager()
        first = sessions.create_session("one").session_id
        second = sessions.create_session("two").session_id
        assert sessions.update(first, "one").hasChanges is False
        assert hunks(sessions.update(second, "one")) == [("modified", 0, 1)]


class TestSessionErrors:
    """Test unknown session handling."""

    def test_unknown_session(self):
        sessions = SessionManager()
        with pytest.raises(SessionNotFoundError) as exc_info:
            sessions.update("missing", "text")
        assert "missing" in str(exc_info.value)

    def test_not_found_is_key_error(self):
        with pytest.raises(KeyError):
            SessionManager().get("missing")

    def test_close_twice(self):
        sessions = SessionManager()
        session_id = sessions.create_session().session_id
        sessions.close_session(session_id)
        with pytest.raises(SessionNotFoundError):
            sessions.close_session(session_id)


class TestSessionEviction:
    """Test the session limit."""

    def test_least_recently_used_is_evicted(self):
        sessions = SessionManager(max_sessions=2)
        first = sessions.create_session().session_id
        second = sessions.create_session().session_id
        sessions.get(first)
        third = sessions.create_session().session_id

        assert len(sessions) == 2
        assert first in sessions
        assert third in sessions
        assert second not in sessions

    def test_close_all(self):
        sessions = SessionManager()
        sessions.create_session()
        sessions.create_session()
        sessions.close_all()
        assert len(sessions) == 0


class TestSubscriptions:
    """Test change event fan-out."""

    def test_subscriber_receives_diffs(self):
        sessions = SessionManager()
        session_id = sessions.create_session("a").session_id
        queue = sessions.subscribe(session_id)

        sessions.update(session_id, "a\nb")
        sessions.reset_baseline(session_id)

        assert hunks(queue.get_nowait()) == [("added", 1, 2)]
        assert queue.get_nowait().hasChanges is False
        assert queue.empty()

    def test_close_ends_stream(self):
        sessions = SessionManager()
        session_id = sessions.create_session().session_id
        queue = sessions.subscribe(session_id)
        sessions.close_session(session_id)
        assert queue.get_nowait() is None

    def test_unsubscribe(self):
        sessions = SessionManager()
        session_id = sessions.create_session("a").session_id
        queue = sessions.subscribe(session_id)
        sessions.unsubscribe(session_id, queue)
        sessions.update(session_id, "b")
        assert queue.empty()

    def test_unsubscribe_after_close_is_harmless(self):
        sessions = SessionManager()
        session_id = sessions.create_session().session_id
        queue = sessions.subscribe(session_id)
        sessions.close_session(session_id)
        sessions.unsubscribe(session_id, queue)
