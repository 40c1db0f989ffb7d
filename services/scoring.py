"""Archetype scoring from interview tallies."""
from __future__ import annotations

import logging
from typing import Dict, Mapping, Tuple

from archetypes import CATALOG_ORDER, Archetype, Section, question_by_id, questions_for_section
from interview_session.machine import add_response
from interview_session.state import ArchetypeResults, ArchetypeTallies, QuestionResponse, SessionState


logger = logging.getLogger(__name__)

SCORED_SECTIONS: Tuple[Section, ...] = ("default_mode", "authentic_mode", "friction_signals")


def top_archetype(tally: Mapping[Archetype, int]) -> Archetype:
    """Highest-scoring archetype; ties go to the earliest in catalog order."""

    best = CATALOG_ORDER[0]
    best_score = tally.get(best, 0)
    for archetype in CATALOG_ORDER[1:]:
        value = tally.get(archetype, 0)
        if value > best_score:
            best, best_score = archetype, value
    return best


def score(state: SessionState) -> ArchetypeResults:
    """Derive headline archetypes and alignment from the running tallies."""

    tallies = state.tallies.model_copy(deep=True)
    default_archetype = top_archetype(tallies.default)
    authentic_archetype = top_archetype(tallies.authentic)
    return ArchetypeResults(
        default_archetype=default_archetype,
        authentic_archetype=authentic_archetype,
        is_aligned=default_archetype == authentic_archetype,
        scores=tallies,
    )


def apply_scores(state: SessionState) -> SessionState:
    """Attach results to a closing state exactly once; otherwise return it unchanged."""

    if state.phase != "closing" or state.is_scored:
        return state
    results = score(state)
    _log_missing(state.responses)
    _audit_tallies(state)
    logger.info(
        "Scored interview default=%s authentic=%s aligned=%s",
        results.default_archetype.value,
        results.authentic_archetype.value,
        results.is_aligned,
    )
    return state.model_copy(
        update={
            "scores": results.scores,
            "default_archetype": results.default_archetype,
            "authentic_archetype": results.authentic_archetype,
            "is_aligned": results.is_aligned,
        }
    )


def tally_responses(responses: Mapping[str, QuestionResponse]) -> ArchetypeTallies:
    """Recompute tallies from stored responses; only complete answers count."""

    tallies = ArchetypeTallies()
    for question_id, response in responses.items():
        question = question_by_id(question_id)
        if question is None:
            logger.warning("Ignoring response to unknown question %s", question_id)
            continue
        if response.most_like_me is None:
            continue
        if question.selection_type == "ranked" and response.second_most_like_me is None:
            continue
        tallies = add_response(tallies, question, response)
    return tallies


def _audit_tallies(state: SessionState) -> None:
    recomputed = tally_responses(state.responses)
    if recomputed != state.tallies:
        logger.warning(
            "Running tallies disagree with stored responses: running=%s recomputed=%s",
            state.tallies.model_dump(mode="json"),
            recomputed.model_dump(mode="json"),
        )


def _log_missing(responses: Dict[str, QuestionResponse]) -> None:
    missing = [
        question.id
        for section in SCORED_SECTIONS
        for question in questions_for_section(section)
        if question.id not in responses
    ]
    if missing:
        logger.warning("Scoring with missing responses: %s", ", ".join(missing))


__all__ = ["apply_scores", "score", "tally_responses", "top_archetype"]
