"""Archetype interview agent: one conversational turn of the discovery survey."""
from __future__ import annotations

import logging
from textwrap import dedent
from typing import Callable, Dict, List, Optional, Sequence

from agents.toolkit import bullet_list, conversation, generate
from agents.types import AgentTurn, ChatMessage, TenantContext
from archetypes import TOTAL_QUESTIONS, Phase, Question, progress_percentage, question_by_index
from archetypes import constitution
from config.registry import INTERVIEW_KEY, get_model
from config.settings import settings
from interview_session import Selection, SessionState, advance, awaiting_second_choice, initial_state
from services.scoring import apply_scores


logger = logging.getLogger(__name__)

START_TRIGGER = "[Session started - please provide the opening greeting]"


def _opening_task(tenant: TenantContext) -> str:
    welcome = tenant.welcome_message or constitution.DEFAULT_WELCOME
    return "\n".join(
        [
            "CURRENT TASK: Opening",
            "Greet the participant warmly and introduce the session.",
            f'Use this welcome message as inspiration: "{welcome}"',
            f"Explain that there are {TOTAL_QUESTIONS} questions across 4 sections.",
            "Emphasize there are no right or wrong answers.",
            "After the greeting, ask the first context question below.",
        ]
    )


def _context_task(tenant: TenantContext) -> str:
    return dedent(
        """
        CURRENT TASK: Context Questions (Q1-Q3)
        These questions gather context about the participant's role.
        Single-select: ask them to pick ONE option that fits best.
        """
    ).strip()


def _default_mode_task(tenant: TenantContext) -> str:
    return dedent(
        """
        CURRENT TASK: Default Mode Questions (Q4-Q12)
        These questions explore how the participant responds under pressure.
        Ranked selection: ask for MOST like them, then SECOND most like them.
        Do not ask for examples or stories; collect their two selections and move on.
        """
    ).strip()


def _authentic_mode_task(tenant: TenantContext) -> str:
    return dedent(
        """
        CURRENT TASK: Authentic Mode Questions (Q13-Q16)
        These questions explore leadership when grounded and at their best.
        Same ranked format: ask for MOST like them, then SECOND most like them.
        Do not ask for examples or stories; collect their two selections and move on.
        """
    ).strip()


def _friction_task(tenant: TenantContext) -> str:
    return dedent(
        """
        CURRENT TASK: Friction Signal Questions (Q17-Q19)
        These questions identify what is currently draining the participant.
        Single-select: ask them to pick ONE option that resonates most.
        Do not ask for elaboration; collect their selection and move on.
        """
    ).strip()


def _closing_task(tenant: TenantContext) -> str:
    lines = [
        "CURRENT TASK: Closing",
        "All questions are answered. Thank the participant for their thoughtful responses.",
        "Let them know their results will be available shortly.",
        "Their coach will be in touch to discuss their archetype pattern.",
    ]
    if tenant.completion_message:
        lines.append(f'Close with this message in your own words: "{tenant.completion_message}"')
    return "\n".join(lines)


PHASE_TASKS: Dict[Phase, Callable[[TenantContext], str]] = {
    "opening": _opening_task,
    "context": _context_task,
    "default_mode": _default_mode_task,
    "authentic_mode": _authentic_mode_task,
    "friction_signals": _friction_task,
    "closing": _closing_task,
}


def build_system_prompt(
    current: SessionState,
    candidate: SessionState,
    tenant: TenantContext,
    participant_name: str,
    *,
    stalled: bool = False,
) -> str:
    """Compose the system prompt for the turn that moves ``current`` to ``candidate``.

    Only the question the participant should answer next is exposed. The
    opening turn keeps the opening task while already showing Q1.
    """

    task_phase: Phase = "opening" if current.phase == "opening" else candidate.phase
    question = None if candidate.phase == "closing" else question_by_index(candidate.current_question_index)
    sections: List[str] = [
        "You are conducting a Leadership Archetype Discovery session.",
        f"The participant is {participant_name}.",
        f"This session is facilitated by {tenant.display_name}.",
        "",
        "YOUR ROLE:",
        f"Identity: {constitution.IDENTITY}",
        f"Stance: {constitution.STANCE}",
        "You ARE:",
        bullet_list(constitution.YOU_ARE),
        "You are NOT:",
        bullet_list(constitution.YOU_ARE_NOT),
        "",
        "TONE:",
        ", ".join(constitution.TONE_QUALITIES),
        "Good examples:",
        bullet_list(f'"{example}"' for example in constitution.GOOD_EXAMPLES[:3]),
        "",
        "CORE RULES:",
        *[f"{number}. {rule.name}: {rule.description}" for number, rule in enumerate(constitution.RULES, start=1)],
        "",
        "SESSION STATE:",
        f"Phase: {candidate.phase}",
        f"Question: {candidate.current_question_index} of {TOTAL_QUESTIONS}",
        f"Progress: {progress_percentage(candidate.current_question_index)}%",
        "",
        PHASE_TASKS[task_phase](tenant),
    ]
    transition = constitution.SECTION_TRANSITIONS.get(candidate.phase)
    if transition and candidate.phase != current.phase:
        sections.extend(["", "SECTION TRANSITION:", transition])
    if question is not None:
        sections.extend(["", *_question_block(question)])
    pending = awaiting_second_choice(candidate)
    if pending is not None and question is not None:
        option = question.option(pending.most_like_me)
        sections.extend(
            [
                "",
                f'They chose {pending.most_like_me} ("{option.text if option else ""}") as MOST like them.',
                "Ask only for the option that is SECOND most like them on this same question.",
            ]
        )
    elif stalled and question is not None:
        sections.extend(["", "The last reply did not contain a clear choice. Gently restate the options and ask them to pick."])
    sections.extend(["", "RESPONSE FORMAT:", constitution.RESPONSE_FORMAT])
    return "\n".join(sections)


def process_turn(
    user_message: Optional[str],
    current_state: Optional[SessionState],
    history: Sequence[ChatMessage],
    tenant: TenantContext,
    participant_name: str,
    *,
    selection: Optional[Selection] = None,
    llm: Optional[Callable[..., str]] = None,
) -> AgentTurn:
    """Run one interview turn.

    The next state is computed up front but only returned once the model has
    replied; a failed call raises ``AgentError`` and leaves the caller's state
    as it was.
    """

    state = current_state or initial_state()
    user_text = user_message or (selection.describe() if selection else None)
    candidate = advance(state, user_text, selection)
    stalled = bool(user_text) and candidate == state
    instructions = build_system_prompt(state, candidate, tenant, participant_name, stalled=stalled)
    messages = conversation(history, user_text, START_TRIGGER)
    model = llm or get_model(INTERVIEW_KEY)
    reply = generate(model, instructions, messages, max_tokens=settings.INTERVIEW_MAX_TOKENS, label="interview")
    candidate = apply_scores(candidate)
    logger.info(
        "Interview turn phase=%s->%s index=%d->%d",
        state.phase,
        candidate.phase,
        state.current_question_index,
        candidate.current_question_index,
    )
    return AgentTurn(message=reply, session_state=candidate, is_complete=candidate.phase == "closing")


def _question_block(question: Question) -> List[str]:
    lines = ["CURRENT QUESTION:", f"Q{question.index}: {question.stem}", "Options:"]
    lines.extend(f"  {option.key}. {option.text}" for option in question.options)
    lines.append(f"Selection type: {question.selection_type}")
    return lines


__all__ = ["INTERVIEW_KEY", "PHASE_TASKS", "START_TRIGGER", "build_system_prompt", "process_turn"]
