"""FastAPI routes for archetype discovery sessions."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from agents.types import AgentError, TenantContext
from api.schemas import (
    CreateSessionReq,
    CreateSessionResp,
    DeclineResp,
    MessageReq,
    MessageResp,
    ReflectReq,
    ReflectResp,
    ResultsResp,
)
from config.settings import settings
from graph.build import run_interview_turn, run_reflection_turn
from observability.logger import log_event
from storage.sessions import (
    CoachingSession,
    SessionNotFoundError,
    StaleSessionError,
    create_session,
    load_session,
    save_enhanced_results,
    save_interview_turn,
    save_reflection_turn,
    transition_reflection_status,
)


router = APIRouter(prefix="/api/coach/sessions")


def _load(session_id: str) -> CoachingSession:
    try:
        return load_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="session not found")


def _conflict(session_id: str, exc: StaleSessionError) -> HTTPException:
    log_event("session.stale", session_id, level=logging.WARNING, error=str(exc))
    return HTTPException(status_code=409, detail="session was updated by another request")


@router.post("/", response_model=CreateSessionResp)
def create(req: CreateSessionReq) -> CreateSessionResp:
    tenant = TenantContext(
        display_name=req.tenant_name or settings.DEFAULT_COACH_NAME,
        welcome_message=req.welcome_message,
        completion_message=req.completion_message,
    )
    session = create_session(tenant, req.participant_name)
    log_event("session.create", session.id, phase=session.interview_state.phase)
    return CreateSessionResp(session_id=session.id)


@router.post("/{session_id}/message", response_model=MessageResp)
def message(session_id: str, req: MessageReq) -> MessageResp:
    session = _load(session_id)
    if session.interview_state.phase == "closing":
        raise HTTPException(status_code=400, detail="interview already complete")

    try:
        result = run_interview_turn(
            session.id,
            state=session.interview_state,
            history=session.history,
            tenant=session.tenant,
            participant_name=session.participant_name,
            message=req.message,
            selection=req.selection,
        )
    except AgentError as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    turn = result["interview_turn"]
    try:
        save_interview_turn(
            session.id,
            expected_version=session.version,
            state=turn.session_state,
            history=result["history"],
        )
    except StaleSessionError as exc:
        raise _conflict(session.id, exc)

    return MessageResp(
        message=turn.message,
        phase=turn.session_state.phase,
        current_question_index=turn.session_state.current_question_index,
        is_complete=turn.is_complete,
    )


@router.post("/{session_id}/reflect", response_model=ReflectResp)
def reflect(session_id: str, req: ReflectReq) -> ReflectResp:
    session = _load(session_id)
    if session.results is None:
        raise HTTPException(status_code=400, detail="interview results not available")
    if session.reflection_status == "declined":
        raise HTTPException(status_code=400, detail="reflection was declined")
    if session.reflection_state is not None and session.reflection_state.is_complete:
        raise HTTPException(status_code=400, detail="reflection already complete")

    try:
        result = run_reflection_turn(
            session.id,
            state=session.reflection_state,
            messages=session.reflection_messages,
            results=session.results,
            tenant=session.tenant,
            participant_name=session.participant_name,
            message=req.message,
        )
    except AgentError as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    turn = result["reflection_turn"]
    try:
        version = save_reflection_turn(
            session.id,
            expected_version=session.version,
            state=turn.state,
            messages=result["reflection_messages"],
        )
    except StaleSessionError as exc:
        raise _conflict(session.id, exc)

    is_enhanced = False
    enhancement = result.get("enhancement")
    if enhancement is not None and enhancement.success and enhancement.enhanced is not None:
        try:
            save_enhanced_results(session.id, enhancement.enhanced, expected_version=version)
        except StaleSessionError as exc:
            # The reflection itself is saved; the backfill picks this session up later.
            log_event("enhance.stale", session.id, level=logging.WARNING, error=str(exc))
        else:
            is_enhanced = True

    return ReflectResp(message=turn.message, state=turn.state, is_complete=turn.is_complete, is_enhanced=is_enhanced)


@router.get("/{session_id}/results", response_model=ResultsResp)
def results(session_id: str) -> ResultsResp:
    session = _load(session_id)
    status = session.reflection_status
    # First view of scored results offers the reflection.
    if session.results is not None and status == "none":
        if transition_reflection_status(session.id, from_status="none", to_status="pending"):
            status = "pending"
            log_event("reflection.offered", session.id)
        else:
            status = load_session(session.id).reflection_status
    return ResultsResp(
        session_id=session.id,
        participant_name=session.participant_name,
        phase=session.interview_state.phase,
        results=session.results,
        reflection_status=status,
        enhanced_results=session.enhanced_results,
    )


@router.post("/{session_id}/decline", response_model=DeclineResp)
def decline(session_id: str) -> DeclineResp:
    """Decline an offered reflection; any other status is left as it is."""

    session = _load(session_id)
    status = session.reflection_status
    if status == "pending" and transition_reflection_status(session.id, from_status="pending", to_status="declined"):
        status = "declined"
        log_event("reflection.declined", session.id)
    return DeclineResp(session_id=session.id, reflection_status=status)
