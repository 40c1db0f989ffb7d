from __future__ import annotations  # Pure interview state transitions

from typing import Optional

from archetypes import Question, TOTAL_QUESTIONS, archetype_for_key, phase_for_index, question_by_index
from .selection import ParsedSelection, Selection, parse_selection, resolve_selection
from .state import ArchetypeTallies, QuestionResponse, SessionState


FIRST_CHOICE_WEIGHT = 2  # Also the weight of a single-select choice
SECOND_CHOICE_WEIGHT = 1

_BUCKETS = {
    "default_mode": "default",
    "authentic_mode": "authentic",
    "friction_signals": "friction",
}


def initial_state() -> SessionState:
    return SessionState()


def advance(
    state: SessionState,
    message: Optional[str] = None,
    selection: Optional[Selection] = None,
) -> SessionState:
    """Return the state that follows ``state`` after one participant turn.

    The input is never mutated. The opening turn always moves to the first
    question; question turns advance only once a selection resolves; the
    closing phase is terminal.
    """

    if state.phase == "opening":
        return state.model_copy(update={"phase": phase_for_index(1), "current_question_index": 1}, deep=True)
    if state.phase == "closing":
        return state.model_copy(deep=True)

    question = question_by_index(state.current_question_index)
    parsed = _parse(question, message, selection)
    if question is None or not parsed.detected:
        return state.model_copy(deep=True)

    response = _merge_response(question, state.responses.get(question.id), parsed)
    responses = {**state.responses, question.id: response}
    if question.selection_type == "ranked" and response.second_most_like_me is None:
        return state.model_copy(update={"responses": responses}, deep=True)

    tallies = add_response(state.tallies, question, response)
    next_index = state.current_question_index + 1
    if next_index > TOTAL_QUESTIONS:
        update = {"phase": "closing", "current_question_index": TOTAL_QUESTIONS}
    else:
        update = {"phase": phase_for_index(next_index), "current_question_index": next_index}
    update.update(responses=responses, tallies=tallies)
    return state.model_copy(update=update, deep=True)


def awaiting_second_choice(state: SessionState) -> Optional[QuestionResponse]:
    """Partial ranked response for the current question, if one is pending."""

    question = question_by_index(state.current_question_index)
    if question is None or question.selection_type != "ranked" or state.phase == "closing":
        return None
    response = state.responses.get(question.id)
    if response and response.most_like_me and not response.second_most_like_me:
        return response
    return None


def add_response(tallies: ArchetypeTallies, question: Question, response: QuestionResponse) -> ArchetypeTallies:
    """Return ``tallies`` with one resolved response's weights added."""

    bucket_name = _BUCKETS.get(question.section)
    if not question.scored or bucket_name is None:
        return tallies
    updated = tallies.model_copy(deep=True)
    bucket = getattr(updated, bucket_name)
    if response.most_like_me:
        bucket[archetype_for_key(response.most_like_me)] += FIRST_CHOICE_WEIGHT
    if question.selection_type == "ranked" and response.second_most_like_me:
        bucket[archetype_for_key(response.second_most_like_me)] += SECOND_CHOICE_WEIGHT
    return updated


def _parse(question: Optional[Question], message: Optional[str], selection: Optional[Selection]) -> ParsedSelection:
    if question is None:
        return ParsedSelection()
    if selection is not None:
        return resolve_selection(selection, question)
    if message and message.strip():
        return parse_selection(message, question)
    return ParsedSelection()


def _merge_response(
    question: Question,
    existing: Optional[QuestionResponse],
    parsed: ParsedSelection,
) -> QuestionResponse:
    if question.selection_type != "ranked":
        return QuestionResponse(question_id=question.id, most_like_me=parsed.most_like_me)
    if parsed.second_most_like_me:
        return QuestionResponse(
            question_id=question.id,
            most_like_me=parsed.most_like_me,
            second_most_like_me=parsed.second_most_like_me,
        )
    pending = existing and existing.most_like_me and not existing.second_most_like_me
    if pending and parsed.most_like_me != existing.most_like_me:
        return QuestionResponse(
            question_id=question.id,
            most_like_me=existing.most_like_me,
            second_most_like_me=parsed.most_like_me,
        )
    return QuestionResponse(question_id=question.id, most_like_me=parsed.most_like_me)


__all__ = [
    "FIRST_CHOICE_WEIGHT",
    "SECOND_CHOICE_WEIGHT",
    "add_response",
    "advance",
    "awaiting_second_choice",
    "initial_state",
]
