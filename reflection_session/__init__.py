"""Reflection conversation state machine."""
from .state import (
    CLOSE_AT,
    WRAP_UP_HINT_AT,
    ReflectionMessage,
    ReflectionPhase,
    ReflectionState,
    advance_reflection,
    initial_reflection_state,
    wrap_up_hint,
)

__all__ = [
    "CLOSE_AT",
    "WRAP_UP_HINT_AT",
    "ReflectionMessage",
    "ReflectionPhase",
    "ReflectionState",
    "advance_reflection",
    "initial_reflection_state",
    "wrap_up_hint",
]
