"""Shared LangGraph state definition for one coaching turn."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, TypedDict

from agents.enhancement_agent import EnhancementResponse
from agents.types import AgentTurn, ChatMessage, ReflectionTurn, TenantContext
from interview_session import ArchetypeResults, Selection, SessionState
from reflection_session import ReflectionMessage, ReflectionState

Mode = Literal["interview", "reflection"]


class TurnPayload(TypedDict, total=False):
    """Values flowing through the turn graph; nodes return partial updates."""

    session_id: str
    mode: Mode
    tenant: TenantContext
    participant_name: str
    user_message: Optional[str]
    selection: Optional[Selection]

    interview_state: Optional[SessionState]
    history: List[ChatMessage]
    interview_turn: AgentTurn

    results: Optional[ArchetypeResults]
    reflection_state: Optional[ReflectionState]
    reflection_messages: List[ReflectionMessage]
    reflection_turn: ReflectionTurn
    enhancement: Optional[EnhancementResponse]

    events: List[Dict[str, Any]]


__all__ = ["Mode", "TurnPayload"]
