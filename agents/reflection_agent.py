from __future__ import annotations  # Post-results reflection conversation agent

import logging
from textwrap import dedent
from typing import Callable, List, Optional, Sequence

from agents.toolkit import bullet_list, conversation, generate, results_block
from agents.types import ReflectionTurn, TenantContext
from archetypes import profile
from config.registry import REFLECTION_KEY, get_model
from config.settings import settings
from interview_session import ArchetypeResults
from reflection_session import (
    CLOSE_AT,
    ReflectionMessage,
    ReflectionState,
    advance_reflection,
    initial_reflection_state,
    wrap_up_hint,
)


logger = logging.getLogger(__name__)

START_TRIGGER = "[Session started - please provide opening reflection questions]"

ROLE_GUIDANCE = dedent(  # Stance shared by every reflection turn
    """
    YOUR ROLE:
    - Help the participant reflect on their archetype assessment results
    - Ask open-ended questions that invite deeper self-awareness
    - Be warm, curious, and non-judgmental
    - This is reflection, not therapy or coaching
    - The goal is insight and self-discovery, not fixing or diagnosing

    TONE:
    - Warm but professional
    - Normalizing ("these patterns make sense")
    - Reflective ("I hear that...")
    - Curious without being clinical
    - Brief acknowledgments, not lengthy validations
    """
).strip()

OPENING_TASK = dedent(
    """
    CURRENT TASK: Opening with Reflection Questions
    Generate 2-3 thoughtful reflection questions based on their results.
    If they have a tension pattern, explore how the tension shows up in their daily work,
    what situations trigger the default response, and what one small shift might feel possible.
    If they are aligned, explore how this archetype serves their leadership,
    when they notice the pattern most strongly, and what helps them stay grounded.
    Start with a brief warm acknowledgment of their results, then present the questions.
    Invite them to respond to whichever question resonates most.
    """
).strip()

CONVERSATION_TASK = dedent(
    """
    CURRENT TASK: Continue Reflection Conversation
    Acknowledge their response warmly and briefly.
    You may ask 1-2 follow-up questions if appropriate.
    Keep responses concise; this is about their reflection, not your analysis.
    """
).strip()

WRAP_UP_HINT = dedent(
    f"""
    We are nearing the end of the reflection ({CLOSE_AT} exchanges at most).
    Consider wrapping up with a closing message.
    """
).strip()

CLOSING_TASK = dedent(
    """
    CURRENT TASK: Wrap Up Reflection
    Thank them for their reflections and briefly affirm what you heard as valuable.
    Let them know these insights will be included in their results.
    End warmly and encourage them to discuss with their coach.
    """
).strip()

RESPONSE_FORMAT = dedent(
    """
    RESPONSE FORMAT:
    - Respond conversationally, not in markdown
    - No bullet points or numbered lists in opening questions; use natural prose
    - Use line breaks between questions for readability
    - Maximum 200 words per response
    """
).strip()


def build_system_prompt(
    state: ReflectionState,
    results: ArchetypeResults,
    tenant: TenantContext,
    participant_name: str,
) -> str:
    """Prompt for the reflection turn taken from ``state``."""

    default_profile = profile(results.default_archetype)
    authentic_profile = profile(results.authentic_archetype)
    sections: List[str] = [
        "You are a warm, thoughtful leadership reflection guide.",
        f"The participant is {participant_name}.",
        f"This reflection session is facilitated by {tenant.display_name}.",
        "",
        ROLE_GUIDANCE,
        "",
        *results_block(results),
        "",
    ]
    if results.is_aligned:
        sections.extend(
            [
                "ALIGNMENT:",
                f"This participant is aligned: their {default_profile.name} archetype shows up both under pressure and when grounded.",
                "This suggests consistency in their leadership approach.",
            ]
        )
    else:
        sections.extend(
            [
                "TENSION PATTERN:",
                f"Their default response under pressure ({default_profile.name}) differs from what energizes them "
                f"when grounded ({authentic_profile.name}).",
                "This is common and represents adaptive strategies developed over time.",
                "Potential triggers to explore:",
                bullet_list(default_profile.overuse_signals),
            ]
        )
    sections.extend(
        [
            "",
            "CONVERSATION STATE:",
            f"Phase: {state.phase}",
            f"Exchange count: {state.exchange_count} of 2-3",
            "",
        ]
    )
    if state.phase == "opening":
        sections.append(OPENING_TASK)
    elif state.phase == "conversation":
        sections.append(CONVERSATION_TASK)
        if wrap_up_hint(state):
            sections.append(WRAP_UP_HINT)
    else:
        sections.append(CLOSING_TASK)
    sections.extend(["", RESPONSE_FORMAT])
    return "\n".join(sections)


def process_turn(
    user_message: Optional[str],
    current_state: Optional[ReflectionState],
    history: Sequence[ReflectionMessage],
    results: ArchetypeResults,
    tenant: TenantContext,
    participant_name: str,
    *,
    llm: Optional[Callable[..., str]] = None,
) -> ReflectionTurn:
    """Run one reflection turn; a completed reflection is returned unchanged."""

    state = current_state or initial_reflection_state()
    if state.is_complete:
        return ReflectionTurn(message="", state=state, is_complete=True)
    instructions = build_system_prompt(state, results, tenant, participant_name)
    messages = conversation(history, user_message, START_TRIGGER)
    model = llm or get_model(REFLECTION_KEY)
    reply = generate(model, instructions, messages, max_tokens=settings.REFLECTION_MAX_TOKENS, label="reflection")
    new_state = advance_reflection(state, user_message)
    logger.info(
        "Reflection turn phase=%s->%s exchanges=%d",
        state.phase,
        new_state.phase,
        new_state.exchange_count,
    )
    return ReflectionTurn(message=reply, state=new_state, is_complete=new_state.is_complete)


__all__ = ["REFLECTION_KEY", "START_TRIGGER", "build_system_prompt", "process_turn"]
