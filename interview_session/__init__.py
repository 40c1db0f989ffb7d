"""Interview session state machine for archetype discovery."""
from .machine import (
    FIRST_CHOICE_WEIGHT,
    SECOND_CHOICE_WEIGHT,
    add_response,
    advance,
    awaiting_second_choice,
    initial_state,
)
from .selection import ParsedSelection, Selection, parse_selection, resolve_selection
from .state import ArchetypeResults, ArchetypeTallies, QuestionResponse, SessionState

__all__ = [
    "FIRST_CHOICE_WEIGHT",
    "SECOND_CHOICE_WEIGHT",
    "add_response",
    "advance",
    "awaiting_second_choice",
    "initial_state",
    "ParsedSelection",
    "Selection",
    "parse_selection",
    "resolve_selection",
    "ArchetypeResults",
    "ArchetypeTallies",
    "QuestionResponse",
    "SessionState",
]
