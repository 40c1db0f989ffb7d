"""Enhancement synthesizer.

Merges a completed reflection transcript into the scored archetype results,
producing personalized narratives in one structured model call. Nothing is
persisted here; callers store ``enhanced`` only when ``success`` is true.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from agents.toolkit import generate, results_block
from agents.types import AgentError, TenantContext
from archetypes import profile
from config.registry import ENHANCEMENT_KEY, get_model
from config.settings import settings
from interview_session import ArchetypeResults
from llm_gateway import ParseError, parse_structured
from reflection_session import ReflectionMessage


logger = logging.getLogger(__name__)

NO_REFLECTION_ERROR = "No user reflection messages to enhance from"
PARSE_ERROR = "Failed to parse enhancement response"


class MeaningfulQuote(BaseModel):
    quote: str = ""
    context: str = ""

    @field_validator("quote", "context", mode="before")
    @classmethod
    def _blank_to_empty(cls, value):
        return value or ""


class EnhancedResults(BaseModel):
    """Personalized narrative bundle; serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    personalized_default_narrative: str
    personalized_authentic_narrative: str
    personalized_tension_insights: Optional[str] = None
    reflection_themes: List[str]
    personalized_guidance: str
    meaningful_quotes: List[MeaningfulQuote]
    enhanced_at: Optional[datetime] = None

    @field_validator("personalized_tension_insights", mode="before")
    @classmethod
    def _empty_insights(cls, value):
        return value or None


class EnhancementResponse(BaseModel):
    success: bool
    enhanced: Optional[EnhancedResults] = None
    error: Optional[str] = None


def build_system_prompt(results: ArchetypeResults, participant_name: str, tenant: TenantContext) -> str:
    default_profile = profile(results.default_archetype)
    authentic_profile = profile(results.authentic_archetype)
    sections: List[str] = [
        "You are an expert leadership assessment synthesizer.",
        f"Your task is to analyze {participant_name}'s reflection conversation and generate deeply personalized assessment narratives.",
        f"This assessment is facilitated by {tenant.display_name}.",
        "",
        "YOUR TASK:",
        "Create personalized narratives that weave the archetype framework together with the specific situations,",
        "language and insights the participant shared, ending in guidance that feels personally relevant.",
        "The output should feel written FOR this person, not a generic description with their name inserted.",
        "",
        *results_block(results, with_overuse=True),
        "",
    ]
    if results.is_aligned:
        sections.extend(
            [
                "ALIGNMENT:",
                f"This participant is ALIGNED: their {default_profile.name} archetype shows up both under pressure and when grounded.",
            ]
        )
    else:
        sections.extend(
            [
                "TENSION PATTERN:",
                f"Their default response under pressure ({default_profile.name}) differs from what energizes them "
                f"when grounded ({authentic_profile.name}). This reflects adaptive strategies developed over time.",
            ]
        )
    tension_field = (
        '  "personalizedTensionInsights": null,'
        if results.is_aligned
        else '  "personalizedTensionInsights": "Insights about the tension between their default and authentic patterns, using their examples...",'
    )
    sections.extend(
        [
            "",
            "WRITING GUIDELINES:",
            '- Write in second person ("You tend to..." not "They tend to...")',
            "- Reference specific situations or language from their reflection",
            "- Normalize patterns as adaptive, not flawed",
            "- Each narrative should be 100-200 words; themes 3-5 words each",
            "- Quotes should be meaningful moments from the reflection (exact or paraphrased)",
            "- Guidance should be specific and actionable, not generic advice",
            "",
            "OUTPUT FORMAT:",
            "Respond with ONLY a valid JSON object (no markdown code blocks, no explanation):",
            "{",
            '  "personalizedDefaultNarrative": "How their default archetype shows up, referencing their situations...",',
            '  "personalizedAuthenticNarrative": "Their authentic archetype and what it looks like when they are grounded...",',
            tension_field,
            '  "reflectionThemes": ["Theme 1", "Theme 2", "Theme 3"],',
            '  "personalizedGuidance": "Specific guidance for moving forward based on what they shared...",',
            '  "meaningfulQuotes": [{"quote": "Something significant they said", "context": "Why this matters"}]',
            "}",
        ]
    )
    return "\n".join(sections)


def format_transcript(messages: Sequence[ReflectionMessage]) -> str:
    lines = []
    for message in messages:
        speaker = "PARTICIPANT" if message.role == "user" else "GUIDE"
        lines.append(f"{speaker}: {message.content}")
    return "\n\n".join(lines)


def synthesize(
    original_results: ArchetypeResults,
    reflection_messages: Sequence[ReflectionMessage],
    participant_name: str,
    tenant: TenantContext,
    *,
    llm: Optional[Callable[..., str]] = None,
) -> EnhancementResponse:
    """Produce the personalized bundle, or ``success=False`` with a reason."""

    if not any(message.role == "user" for message in reflection_messages):
        return EnhancementResponse(success=False, error=NO_REFLECTION_ERROR)
    instructions = build_system_prompt(original_results, participant_name, tenant)
    request = (
        "Here is the reflection conversation to analyze and synthesize:\n\n"
        f"{format_transcript(reflection_messages)}\n\n"
        "Please generate the enhanced, personalized results based on this reflection."
    )
    model = llm or get_model(ENHANCEMENT_KEY)
    try:
        reply = generate(
            model,
            instructions,
            [{"role": "user", "content": request}],
            max_tokens=settings.ENHANCEMENT_MAX_TOKENS,
            label="enhancement",
        )
    except AgentError as exc:
        cause = exc.__cause__
        return EnhancementResponse(success=False, error=str(cause) if cause else str(exc))
    try:
        draft = parse_structured(EnhancedResults, reply)
    except ParseError as exc:
        logger.error("Enhancement response did not match schema: %s", exc)
        return EnhancementResponse(success=False, error=PARSE_ERROR)
    enhanced = draft.model_copy(update={"enhanced_at": datetime.now(timezone.utc)})
    return EnhancementResponse(success=True, enhanced=enhanced)


__all__ = [
    "ENHANCEMENT_KEY",
    "EnhancedResults",
    "EnhancementResponse",
    "MeaningfulQuote",
    "NO_REFLECTION_ERROR",
    "PARSE_ERROR",
    "build_system_prompt",
    "format_transcript",
    "synthesize",
]
