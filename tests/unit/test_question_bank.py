import pytest

from archetypes import (
    CATALOG_ORDER,
    QUESTIONS,
    TOTAL_QUESTIONS,
    Archetype,
    archetype_for_key,
    phase_for_index,
    profile,
    progress_percentage,
    question_by_id,
    question_by_index,
    questions_for_section,
)


def test_bank_has_nineteen_ordered_questions():
    assert TOTAL_QUESTIONS == 19
    assert [q.index for q in QUESTIONS] == list(range(1, 20))
    assert [q.id for q in QUESTIONS] == [f"Q{i}" for i in range(1, 20)]


def test_section_sizes_and_selection_types():
    assert len(questions_for_section("context")) == 3
    assert len(questions_for_section("default_mode")) == 9
    assert len(questions_for_section("authentic_mode")) == 4
    assert len(questions_for_section("friction_signals")) == 3
    for question in questions_for_section("context"):
        assert question.selection_type == "single"
        assert not question.scored
        assert all(option.archetype is None for option in question.options)
    for question in questions_for_section("default_mode") + questions_for_section("authentic_mode"):
        assert question.selection_type == "ranked"
        assert question.scored
    for question in questions_for_section("friction_signals"):
        assert question.selection_type == "single"
        assert question.scored


def test_scored_options_map_letters_to_archetypes():
    question = question_by_id("Q4")
    assert question.keys == ("A", "B", "C", "D", "E")
    assert [option.archetype for option in question.options] == list(CATALOG_ORDER)
    assert archetype_for_key("B") is Archetype.CATALYST
    assert profile(Archetype.ANCHOR).key == "A"


def test_short_context_questions_offer_four_options():
    assert question_by_index(2).keys == ("A", "B", "C", "D")
    assert question_by_index(3).option("E") is None


@pytest.mark.parametrize(
    "index,phase",
    [
        (0, "opening"),
        (1, "context"),
        (3, "context"),
        (4, "default_mode"),
        (12, "default_mode"),
        (13, "authentic_mode"),
        (16, "authentic_mode"),
        (17, "friction_signals"),
        (19, "friction_signals"),
        (20, "closing"),
    ],
)
def test_phase_boundaries(index, phase):
    assert phase_for_index(index) == phase


def test_lookup_misses_and_progress():
    assert question_by_index(0) is None
    assert question_by_index(20) is None
    assert question_by_id("Q99") is None
    assert progress_percentage(0) == 0
    assert progress_percentage(19) == 100
    assert progress_percentage(40) == 100


def test_unknown_option_key_raises():
    with pytest.raises(KeyError):
        archetype_for_key("F")
