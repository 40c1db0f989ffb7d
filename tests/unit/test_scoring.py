import logging

from archetypes import Archetype
from interview_session import ArchetypeTallies, QuestionResponse, SessionState, advance, initial_state
from services.scoring import apply_scores, score, tally_responses, top_archetype


def _closed(tallies: ArchetypeTallies) -> SessionState:
    return SessionState(phase="closing", current_question_index=19, tallies=tallies)


def test_top_archetype_breaks_ties_by_catalog_order():
    tally = {Archetype.ANCHOR: 0, Archetype.CATALYST: 4, Archetype.STEWARD: 0, Archetype.WAYFINDER: 4, Archetype.ARCHITECT: 1}
    assert top_archetype(tally) is Archetype.CATALYST
    assert top_archetype({}) is Archetype.ANCHOR


def test_score_reports_alignment():
    aligned = score(_closed(ArchetypeTallies(default={Archetype.ARCHITECT: 6}, authentic={Archetype.ARCHITECT: 3})))
    assert aligned.default_archetype is Archetype.ARCHITECT
    assert aligned.is_aligned is True

    tension = score(_closed(ArchetypeTallies(default={Archetype.ANCHOR: 6}, authentic={Archetype.WAYFINDER: 3})))
    assert tension.is_aligned is False
    assert tension.is_aligned == (tension.default_archetype == tension.authentic_archetype)


def test_apply_scores_only_on_closing():
    state = SessionState(phase="friction_signals", current_question_index=18)
    assert apply_scores(state) is state
    assert state.default_archetype is None


def test_apply_scores_is_idempotent():
    first = apply_scores(_closed(ArchetypeTallies(default={Archetype.STEWARD: 4}, authentic={Archetype.CATALYST: 2})))
    assert first.default_archetype is Archetype.STEWARD
    assert first.authentic_archetype is Archetype.CATALYST

    changed = first.model_copy(update={"tallies": ArchetypeTallies(default={Archetype.ANCHOR: 50})})
    again = apply_scores(changed)
    assert again is changed
    assert again.default_archetype is Archetype.STEWARD
    assert again.scores == first.scores


def test_tally_responses_matches_running_tallies():
    state = advance(initial_state())
    answers = iter(["B", "C", "A"] + ["B and D"] * 9 + ["E and A", "C and D", "A and E", "B and C"] + ["B", "B", "C"])
    while state.phase != "closing":
        state = advance(state, next(answers))
    assert tally_responses(state.responses) == state.tallies

    result = apply_scores(state)
    assert result.default_archetype is Archetype.CATALYST
    assert result.scores.default[Archetype.CATALYST] == 18
    assert result.scores.default[Archetype.WAYFINDER] == 9
    assert result.scores.friction[Archetype.CATALYST] == 4


def test_tally_responses_ignores_partial_ranked_answers():
    state = advance(SessionState(phase="default_mode", current_question_index=4), "B")
    assert tally_responses(state.responses) == ArchetypeTallies()


def _answered_state() -> SessionState:
    state = advance(initial_state())
    answers = iter(["B", "C", "A"] + ["B and D"] * 9 + ["E and A", "C and D", "A and E", "B and C"] + ["B", "B", "C"])
    while state.phase != "closing":
        state = advance(state, next(answers))
    return state


def test_apply_scores_audits_running_tallies(caplog):
    state = _answered_state()
    with caplog.at_level(logging.WARNING, logger="services.scoring"):
        apply_scores(state)
    assert "disagree" not in caplog.text

    corrupted = state.tallies.model_copy(deep=True)
    corrupted.default[Archetype.ANCHOR] += 20
    with caplog.at_level(logging.WARNING, logger="services.scoring"):
        result = apply_scores(state.model_copy(update={"tallies": corrupted}))
    assert "Running tallies disagree with stored responses" in caplog.text
    assert result.default_archetype is Archetype.ANCHOR


def test_tally_responses_ignores_unknown_questions():
    state = _answered_state()
    responses = dict(state.responses, Q99=QuestionResponse(question_id="Q99", most_like_me="A"))
    assert tally_responses(responses) == state.tallies
