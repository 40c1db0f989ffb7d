from __future__ import annotations  # Shared LangChain helpers for the discovery agents

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from agents.types import AgentError, ChatMessage
from archetypes import profile
from archetypes.catalog import trait_line
from interview_session import ArchetypeResults
from llm_gateway import runnable as llm_runnable


logger = logging.getLogger(__name__)

PROMPT = ChatPromptTemplate.from_messages(  # System instructions followed by the running conversation
    [
        ("system", "{instructions}"),
        MessagesPlaceholder("history"),
    ]
)


def transcript_messages(history: Sequence[ChatMessage | Dict[str, Any]]) -> List[dict]:  # Map stored turns to role/content dicts
    messages: List[dict] = []
    for turn in history:
        role = turn["role"] if isinstance(turn, dict) else turn.role
        content = (turn["content"] if isinstance(turn, dict) else turn.content) or ""
        if not content.strip():
            continue
        messages.append({"role": role, "content": content})
    return messages


def conversation(
    history: Sequence[ChatMessage | Dict[str, Any]],
    user_message: Optional[str],
    start_trigger: str,
) -> List[dict]:  # History plus the new turn, or a synthetic start trigger when empty
    messages = transcript_messages(history)
    if user_message:
        messages.append({"role": "user", "content": user_message})
    if not messages:
        messages.append({"role": "user", "content": start_trigger})
    return messages


def generate(
    model: Callable[..., Any],
    instructions: str,
    messages: Sequence[dict],
    *,
    max_tokens: int,
    label: str,
) -> str:  # Run one prompt through the bound model, failing the turn on any error
    chain = PROMPT | llm_runnable(model, max_tokens=max_tokens)
    try:
        reply = chain.invoke({"instructions": instructions, "history": list(messages)})
    except Exception as exc:  # noqa: BLE001
        logger.exception("%s model call failed", label)
        raise AgentError("Failed to generate response") from exc
    if not isinstance(reply, str):
        logger.error("%s model returned %s instead of text", label, type(reply).__name__)
        raise AgentError("Failed to generate response")
    return reply


def results_block(results: ArchetypeResults, *, with_overuse: bool = False) -> List[str]:  # Describe both headline archetypes
    default = profile(results.default_archetype)
    authentic = profile(results.authentic_archetype)
    lines = [
        "PARTICIPANT ARCHETYPE RESULTS:",
        f"Default Archetype (under pressure): {default.name}",
        f"- {default.under_pressure}",
        f"- Core traits: {trait_line(default)}",
    ]
    if with_overuse:
        lines.append(f"- Overuse signals: {'; '.join(default.overuse_signals)}")
    lines.extend(
        [
            "",
            f"Authentic Archetype (when grounded): {authentic.name}",
            f"- {authentic.when_grounded}",
            f"- Core traits: {trait_line(authentic)}",
        ]
    )
    return lines


def bullet_list(entries: Iterable[str]) -> str:  # Render entries as markdown bullets
    lines = [item.strip() for item in entries if item and item.strip()]
    if not lines:
        return "None provided."
    return "\n".join(f"- {line}" for line in lines)


__all__ = [
    "PROMPT",
    "bullet_list",
    "conversation",
    "generate",
    "results_block",
    "transcript_messages",
]
