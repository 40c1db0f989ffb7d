"""Persistence helpers for coaching session records."""
from __future__ import annotations

import datetime as dt
import json
import sqlite3
import uuid
from typing import Any, Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from agents.enhancement_agent import EnhancedResults
from agents.types import ChatMessage, TenantContext
from interview_session import ArchetypeResults, SessionState, initial_state
from reflection_session import ReflectionMessage, ReflectionState

from .sqlite import get_conn

ReflectionStatus = Literal["none", "pending", "accepted", "declined", "completed"]


class SessionNotFoundError(LookupError):
    """No coaching session exists with the requested id."""


class StaleSessionError(RuntimeError):
    """The session changed since it was loaded; the write was rejected."""


class CoachingSession(BaseModel):
    id: str
    tenant: TenantContext
    participant_name: str
    interview_state: SessionState
    history: List[ChatMessage] = Field(default_factory=list)
    results: Optional[ArchetypeResults] = None
    reflection_state: Optional[ReflectionState] = None
    reflection_messages: List[ReflectionMessage] = Field(default_factory=list)
    reflection_status: ReflectionStatus = "none"
    enhanced_results: Optional[EnhancedResults] = None
    version: int = 0
    created_at: str
    updated_at: str


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _dump_list(items: Sequence[BaseModel]) -> str:
    return json.dumps([item.model_dump(mode="json") for item in items], ensure_ascii=False)


def _from_row(row: sqlite3.Row) -> CoachingSession:
    return CoachingSession(
        id=row["id"],
        tenant=TenantContext(
            display_name=row["tenant_name"],
            welcome_message=row["welcome_message"],
            completion_message=row["completion_message"],
        ),
        participant_name=row["participant_name"],
        interview_state=SessionState.model_validate_json(row["interview_state"]),
        history=json.loads(row["history"] or "[]"),
        results=ArchetypeResults.model_validate_json(row["results"]) if row["results"] else None,
        reflection_state=(
            ReflectionState.model_validate_json(row["reflection_state"]) if row["reflection_state"] else None
        ),
        reflection_messages=json.loads(row["reflection_messages"] or "[]"),
        reflection_status=row["reflection_status"],
        enhanced_results=(
            EnhancedResults.model_validate_json(row["enhanced_results"]) if row["enhanced_results"] else None
        ),
        version=row["version"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _update(session_id: str, expected_version: int, fields: Dict[str, Any]) -> int:
    assignments = ", ".join(f"{column} = ?" for column in fields)
    with get_conn() as conn:
        cur = conn.execute(
            f"""UPDATE coaching_sessions
                SET {assignments}, version = version + 1, updated_at = ?
                WHERE id = ? AND version = ?""",
            (*fields.values(), _now(), session_id, expected_version),
        )
        if cur.rowcount == 0:
            row = conn.execute("SELECT version FROM coaching_sessions WHERE id = ?", (session_id,)).fetchone()
            if row is None:
                raise SessionNotFoundError(session_id)
            raise StaleSessionError(
                f"session {session_id} is at version {row['version']}, expected {expected_version}"
            )
    return expected_version + 1


def create_session(tenant: TenantContext, participant_name: str) -> CoachingSession:
    """Insert a fresh session in the opening phase."""

    now = _now()
    session = CoachingSession(
        id=str(uuid.uuid4()),
        tenant=tenant,
        participant_name=participant_name,
        interview_state=initial_state(),
        created_at=now,
        updated_at=now,
    )
    with get_conn() as conn:
        conn.execute(
            """INSERT INTO coaching_sessions
               (id, tenant_name, welcome_message, completion_message, participant_name,
                interview_state, version, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                session.id,
                tenant.display_name,
                tenant.welcome_message,
                tenant.completion_message,
                participant_name,
                session.interview_state.model_dump_json(),
                session.version,
                now,
                now,
            ),
        )
    return session


def load_session(session_id: str) -> CoachingSession:
    with get_conn() as conn:
        row = conn.execute("SELECT * FROM coaching_sessions WHERE id = ?", (session_id,)).fetchone()
    if row is None:
        raise SessionNotFoundError(session_id)
    return _from_row(row)


def save_interview_turn(
    session_id: str,
    *,
    expected_version: int,
    state: SessionState,
    history: Sequence[ChatMessage],
) -> int:
    """Persist the interview state and transcript; results are copied once scored."""

    fields: Dict[str, Any] = {
        "interview_state": state.model_dump_json(),
        "history": _dump_list(history),
    }
    results = state.results()
    if results is not None:
        fields["results"] = results.model_dump_json()
    return _update(session_id, expected_version, fields)


def save_reflection_turn(
    session_id: str,
    *,
    expected_version: int,
    state: ReflectionState,
    messages: Sequence[ReflectionMessage],
) -> int:
    status: ReflectionStatus = "completed" if state.is_complete else "accepted"
    return _update(
        session_id,
        expected_version,
        {
            "reflection_state": state.model_dump_json(),
            "reflection_messages": _dump_list(messages),
            "reflection_status": status,
        },
    )


def save_enhanced_results(session_id: str, enhanced: EnhancedResults, *, expected_version: int) -> int:
    return _update(
        session_id,
        expected_version,
        {"enhanced_results": enhanced.model_dump_json(by_alias=True)},
    )


def transition_reflection_status(session_id: str, *, from_status: ReflectionStatus, to_status: ReflectionStatus) -> bool:
    """Move the reflection status only if it is currently ``from_status``.

    Status flips are guarded by the status itself rather than ``version``, so
    viewing results never invalidates an in-flight turn.
    """

    with get_conn() as conn:
        cur = conn.execute(
            """UPDATE coaching_sessions
               SET reflection_status = ?, updated_at = ?
               WHERE id = ? AND reflection_status = ?""",
            (to_status, _now(), session_id, from_status),
        )
        if cur.rowcount == 0:
            row = conn.execute("SELECT 1 FROM coaching_sessions WHERE id = ?", (session_id,)).fetchone()
            if row is None:
                raise SessionNotFoundError(session_id)
            return False
    return True


def list_pending_enhancements() -> List[CoachingSession]:
    """Completed reflections that have no enhanced bundle yet, oldest first."""

    with get_conn() as conn:
        rows = conn.execute(
            """SELECT * FROM coaching_sessions
               WHERE reflection_status = 'completed' AND enhanced_results IS NULL
               ORDER BY updated_at ASC"""
        ).fetchall()
    return [_from_row(row) for row in rows]


def recent_sessions(limit: int = 20) -> List[CoachingSession]:
    with get_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM coaching_sessions ORDER BY updated_at DESC LIMIT ?",
            (limit,),
        ).fetchall()
    return [_from_row(row) for row in rows]


__all__ = [
    "CoachingSession",
    "ReflectionStatus",
    "SessionNotFoundError",
    "StaleSessionError",
    "create_session",
    "list_pending_enhancements",
    "load_session",
    "recent_sessions",
    "save_enhanced_results",
    "save_interview_turn",
    "save_reflection_turn",
    "transition_reflection_status",
]
