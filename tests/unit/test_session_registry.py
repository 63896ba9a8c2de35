"""Unit tests for the in-process study session registry."""
from datetime import datetime, timedelta, timezone

import pytest

from flashcat.models.flashcard import StudyMode
from flashcat.services import session


def make_session(session_id, started_at=None):
    return session.StudySession(
        id=session_id,
        mode=StudyMode.MIXED,
        cards=[],
        started_at=started_at or datetime.now(timezone.utc),
    )


def test_register_and_discard():
    registered = session.register_session(make_session("s1"))
    assert session.get_session("s1") is registered
    session.discard_session("s1")
    with pytest.raises(session.SessionNotFound):
        session.get_session("s1")


def test_registering_evicts_abandoned_sessions():
    long_ago = datetime.now(timezone.utc) - timedelta(hours=25)
    session.register_session(make_session("old", long_ago))
    session.register_session(make_session("new"))
    assert session.get_session("new").id == "new"
    with pytest.raises(session.SessionNotFound):
        session.get_session("old")


def test_purge_uses_configured_age(monkeypatch):
    monkeypatch.setattr(session.settings, "stale_after_hours", 1)
    now = datetime.now(timezone.utc)
    session.register_session(make_session("recent", now - timedelta(minutes=30)))
    assert session.purge_stale_sessions(now) == 0
    assert session.purge_stale_sessions(now + timedelta(hours=1)) == 1
