from __future__ import annotations  # Reflection conversation state and transitions

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field


ReflectionPhase = Literal["opening", "conversation", "closing", "completed"]
Role = Literal["user", "assistant"]

WRAP_UP_HINT_AT = 2  # Prompt starts suggesting a wrap-up; no transition
CLOSE_AT = 3  # Conversation moves to closing


class ReflectionState(BaseModel):  # Progress through the post-results reflection
    phase: ReflectionPhase = "opening"
    exchange_count: int = Field(default=0, ge=0)
    is_complete: bool = False


class ReflectionMessage(BaseModel):  # One persisted line of the reflection transcript
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def initial_reflection_state() -> ReflectionState:
    return ReflectionState()


def wrap_up_hint(state: ReflectionState) -> bool:  # Soft signal carried in the conversation prompt
    return state.phase == "conversation" and state.exchange_count >= WRAP_UP_HINT_AT


def advance_reflection(state: ReflectionState, user_message: Optional[str] = None) -> ReflectionState:
    """Next reflection state after the assistant replies to this turn."""

    if state.phase == "opening":
        return state.model_copy(update={"phase": "conversation"})
    if state.phase == "conversation":
        if not user_message:
            return state.model_copy()
        count = state.exchange_count + 1
        phase: ReflectionPhase = "closing" if count >= CLOSE_AT else "conversation"
        return state.model_copy(update={"exchange_count": count, "phase": phase})
    if state.phase == "closing":
        return state.model_copy(update={"phase": "completed", "is_complete": True})
    return state.model_copy()


__all__ = [
    "CLOSE_AT",
    "ReflectionMessage",
    "ReflectionPhase",
    "ReflectionState",
    "WRAP_UP_HINT_AT",
    "advance_reflection",
    "initial_reflection_state",
    "wrap_up_hint",
]
