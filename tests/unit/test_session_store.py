"""Tests for the SQLite session store."""
from __future__ import annotations

import os
import sqlite3

import pytest

from agents.enhancement_agent import EnhancedResults
from agents.types import ChatMessage, TenantContext
from archetypes import Archetype
from interview_session import ArchetypeTallies, SessionState
from reflection_session import ReflectionMessage, ReflectionState
from services.scoring import apply_scores
from storage.migrate import migrate
from storage.sessions import (
    SessionNotFoundError,
    StaleSessionError,
    create_session,
    list_pending_enhancements,
    load_session,
    recent_sessions,
    save_enhanced_results,
    save_interview_turn,
    save_reflection_turn,
    transition_reflection_status,
)


TENANT = TenantContext(display_name="Acme Leadership", completion_message="See you soon.")


def _scored_state() -> SessionState:
    tallies = ArchetypeTallies(default={Archetype.CATALYST: 4}, authentic={Archetype.ARCHITECT: 3})
    return apply_scores(SessionState(phase="closing", current_question_index=19, tallies=tallies))


def test_migrate_creates_table(tmp_path):
    db_path = str(tmp_path / "nested" / "fresh.db")
    migrate(db_path)
    assert os.path.exists(db_path)
    conn = sqlite3.connect(db_path)
    try:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    finally:
        conn.close()
    assert "coaching_sessions" in tables


def test_create_and_load_round_trip():
    created = create_session(TENANT, "Jordan")
    loaded = load_session(created.id)
    assert loaded.participant_name == "Jordan"
    assert loaded.tenant == TENANT
    assert loaded.interview_state.phase == "opening"
    assert loaded.version == 0
    assert loaded.reflection_status == "none"
    assert loaded.results is None


def test_load_unknown_session_raises():
    with pytest.raises(SessionNotFoundError):
        load_session("missing")


def test_interview_save_bumps_version_and_copies_results():
    session = create_session(TENANT, "Jordan")
    history = [ChatMessage(role="assistant", content="Welcome"), ChatMessage(role="user", content="B")]
    version = save_interview_turn(session.id, expected_version=0, state=_scored_state(), history=history)
    assert version == 1
    loaded = load_session(session.id)
    assert loaded.version == 1
    assert loaded.history == history
    assert loaded.results.default_archetype is Archetype.CATALYST
    assert loaded.results.authentic_archetype is Archetype.ARCHITECT
    assert loaded.interview_state.scores.default[Archetype.CATALYST] == 4


def test_stale_version_is_rejected():
    session = create_session(TENANT, "Jordan")
    save_interview_turn(session.id, expected_version=0, state=SessionState(phase="context", current_question_index=1), history=[])
    with pytest.raises(StaleSessionError):
        save_interview_turn(session.id, expected_version=0, state=SessionState(phase="context", current_question_index=2), history=[])
    assert load_session(session.id).interview_state.current_question_index == 1


def test_save_on_unknown_session_raises_not_found():
    with pytest.raises(SessionNotFoundError):
        save_interview_turn("missing", expected_version=0, state=SessionState(), history=[])


def test_reflection_status_and_pending_enhancements(enhanced_payload):
    session = create_session(TENANT, "Jordan")
    version = save_interview_turn(session.id, expected_version=0, state=_scored_state(), history=[])
    messages = [ReflectionMessage(role="assistant", content="Q?"), ReflectionMessage(role="user", content="A.")]

    version = save_reflection_turn(session.id, expected_version=version, state=ReflectionState(phase="conversation"), messages=messages)
    assert load_session(session.id).reflection_status == "accepted"
    assert list_pending_enhancements() == []

    done = ReflectionState(phase="completed", exchange_count=3, is_complete=True)
    version = save_reflection_turn(session.id, expected_version=version, state=done, messages=messages)
    pending = list_pending_enhancements()
    assert [item.id for item in pending] == [session.id]
    assert pending[0].reflection_messages[1].content == "A."

    enhanced = EnhancedResults.model_validate(enhanced_payload)
    save_enhanced_results(session.id, enhanced, expected_version=version)
    assert list_pending_enhancements() == []
    stored = load_session(session.id)
    assert stored.enhanced_results.personalized_guidance == enhanced.personalized_guidance
    assert stored.reflection_status == "completed"


def test_recent_sessions_newest_first():
    first = create_session(TENANT, "Ada")
    second = create_session(TENANT, "Ben")
    save_interview_turn(first.id, expected_version=0, state=SessionState(phase="context", current_question_index=1), history=[])
    ids = [item.id for item in recent_sessions(5)]
    assert ids[0] == first.id
    assert set(ids) == {first.id, second.id}
    assert len(recent_sessions(1)) == 1


def test_reflection_status_transitions_are_conditional():
    session = create_session(TENANT, "Jordan")
    assert transition_reflection_status(session.id, from_status="none", to_status="pending")
    assert not transition_reflection_status(session.id, from_status="none", to_status="pending")
    assert transition_reflection_status(session.id, from_status="pending", to_status="declined")
    stored = load_session(session.id)
    assert stored.reflection_status == "declined"
    assert stored.version == 0

    with pytest.raises(SessionNotFoundError):
        transition_reflection_status("missing", from_status="pending", to_status="declined")
