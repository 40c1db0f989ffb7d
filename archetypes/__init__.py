"""Archetype catalog, question bank and facilitator constitution."""
from .catalog import (
    ARCHETYPES,
    CATALOG_ORDER,
    OPTION_KEYS,
    Archetype,
    ArchetypeProfile,
    OptionKey,
    archetype_for_key,
    profile,
    zero_tally,
)
from .question_bank import (
    QUESTIONS,
    TOTAL_QUESTIONS,
    Option,
    Phase,
    Question,
    Section,
    phase_for_index,
    progress_percentage,
    question_by_id,
    question_by_index,
    questions_for_section,
)

__all__ = [
    "ARCHETYPES",
    "CATALOG_ORDER",
    "OPTION_KEYS",
    "Archetype",
    "ArchetypeProfile",
    "OptionKey",
    "archetype_for_key",
    "profile",
    "zero_tally",
    "QUESTIONS",
    "TOTAL_QUESTIONS",
    "Option",
    "Phase",
    "Question",
    "Section",
    "phase_for_index",
    "progress_percentage",
    "question_by_id",
    "question_by_index",
    "questions_for_section",
]
