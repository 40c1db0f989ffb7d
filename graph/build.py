"""Graph execution helpers."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from langgraph.graph import END, START, StateGraph

from agents import enhancement_agent, interview_agent, reflection_agent
from agents.types import AgentError, ChatMessage, TenantContext
from interview_session import ArchetypeResults, Selection, SessionState
from observability.logger import log_event
from observability.tracing import span
from reflection_session import ReflectionMessage, ReflectionState

from .state import TurnPayload


def _route(payload: TurnPayload) -> str:
    return payload["mode"]


def _after_reflection(payload: TurnPayload) -> str:
    return "enhance" if payload["reflection_turn"].is_complete else END


def _interview_node(payload: TurnPayload) -> TurnPayload:
    session_id = payload["session_id"]
    events = list(payload.get("events", []))
    message = payload.get("user_message")
    selection = payload.get("selection")
    state = payload.get("interview_state")

    log_event("node.start", session_id, node="interview", phase=state.phase if state else "opening")
    try:
        with span(events, "interview"):
            turn = interview_agent.process_turn(
                message,
                state,
                payload.get("history", []),
                payload["tenant"],
                payload["participant_name"],
                selection=selection,
            )
    except AgentError as exc:
        log_event("node.error", session_id, level=logging.WARNING, node="interview", error=str(exc.__cause__ or exc))
        raise

    history: List[ChatMessage] = list(payload.get("history", []))
    user_text = message or (selection.describe() if selection else None)
    if user_text:
        history.append(ChatMessage(role="user", content=user_text))
    history.append(ChatMessage(role="assistant", content=turn.message))
    log_event(
        "node.end",
        session_id,
        node="interview",
        phase=turn.session_state.phase,
        index=turn.session_state.current_question_index,
        outcome="complete" if turn.is_complete else "continue",
        ms=events[-1]["ms"],
    )
    return {"interview_turn": turn, "history": history, "events": events}


def _reflection_node(payload: TurnPayload) -> TurnPayload:
    session_id = payload["session_id"]
    events = list(payload.get("events", []))
    message = payload.get("user_message")
    prior: List[ReflectionMessage] = list(payload.get("reflection_messages", []))

    log_event("node.start", session_id, node="reflection")
    try:
        with span(events, "reflection"):
            turn = reflection_agent.process_turn(
                message,
                payload.get("reflection_state"),
                prior,
                payload["results"],
                payload["tenant"],
                payload["participant_name"],
            )
    except AgentError as exc:
        log_event("node.error", session_id, level=logging.WARNING, node="reflection", error=str(exc.__cause__ or exc))
        raise

    messages = list(prior)
    if message:
        messages.append(ReflectionMessage(role="user", content=message))
    if turn.message:
        messages.append(ReflectionMessage(role="assistant", content=turn.message))
    log_event(
        "node.end",
        session_id,
        node="reflection",
        phase=turn.state.phase,
        exchanges=turn.state.exchange_count,
        outcome="complete" if turn.is_complete else "continue",
        ms=events[-1]["ms"],
    )
    return {"reflection_turn": turn, "reflection_messages": messages, "events": events}


def _enhance_node(payload: TurnPayload) -> TurnPayload:
    session_id = payload["session_id"]
    events = list(payload.get("events", []))
    log_event("node.start", session_id, node="enhance")
    with span(events, "enhance"):
        outcome = enhancement_agent.synthesize(
            payload["results"],
            payload.get("reflection_messages", []),
            payload["participant_name"],
            payload["tenant"],
        )
    if outcome.success:
        log_event("node.end", session_id, node="enhance", outcome="enhanced", ms=events[-1]["ms"])
    else:
        log_event(
            "node.end",
            session_id,
            level=logging.WARNING,
            node="enhance",
            outcome="failed",
            error=outcome.error,
            ms=events[-1]["ms"],
        )
    return {"enhancement": outcome, "events": events}


def build_graph():
    """Compile the turn graph: route by mode, enhance once a reflection completes."""

    graph = StateGraph(TurnPayload)
    graph.add_node("interview", _interview_node)
    graph.add_node("reflection", _reflection_node)
    graph.add_node("enhance", _enhance_node)
    graph.add_conditional_edges(START, _route, {"interview": "interview", "reflection": "reflection"})
    graph.add_edge("interview", END)
    graph.add_conditional_edges("reflection", _after_reflection, {"enhance": "enhance", END: END})
    graph.add_edge("enhance", END)
    return graph.compile()


TURN_GRAPH = build_graph()


def run_interview_turn(
    session_id: str,
    *,
    state: Optional[SessionState],
    history: Sequence[ChatMessage],
    tenant: TenantContext,
    participant_name: str,
    message: Optional[str] = None,
    selection: Optional[Selection] = None,
) -> TurnPayload:
    """Run one interview turn; ``AgentError`` propagates with nothing committed."""

    log_event("step.start", session_id, mode="interview")
    result = TURN_GRAPH.invoke(
        {
            "session_id": session_id,
            "mode": "interview",
            "tenant": tenant,
            "participant_name": participant_name,
            "user_message": message,
            "selection": selection,
            "interview_state": state,
            "history": list(history),
            "events": [],
        }
    )
    log_event("step.end", session_id, mode="interview", phase=result["interview_turn"].session_state.phase)
    return result


def run_reflection_turn(
    session_id: str,
    *,
    state: Optional[ReflectionState],
    messages: Sequence[ReflectionMessage],
    results: ArchetypeResults,
    tenant: TenantContext,
    participant_name: str,
    message: Optional[str] = None,
) -> TurnPayload:
    """Run one reflection turn, synthesizing the enhanced bundle when it completes."""

    log_event("step.start", session_id, mode="reflection")
    result = TURN_GRAPH.invoke(
        {
            "session_id": session_id,
            "mode": "reflection",
            "tenant": tenant,
            "participant_name": participant_name,
            "user_message": message,
            "results": results,
            "reflection_state": state,
            "reflection_messages": list(messages),
            "events": [],
        }
    )
    log_event("step.end", session_id, mode="reflection", phase=result["reflection_turn"].state.phase)
    return result


__all__ = ["TURN_GRAPH", "build_graph", "run_interview_turn", "run_reflection_turn"]
