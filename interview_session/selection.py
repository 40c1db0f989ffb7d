"""Selection detection for interview answers.

Participants usually answer in free text ("B", "B and D", "I'd pick C").
``parse_selection`` applies a permissive set of patterns, strongest first,
and keeps only option keys that exist on the current question. Callers that
already know the chosen options pass a structured ``Selection`` instead.
"""
from __future__ import annotations

import re
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, field_validator

from archetypes import OptionKey, Question


Confidence = Literal["high", "medium", "low"]

_LETTER = r"\b([A-E])\b"

_RANKED = re.compile(
    _LETTER + r"\s+(?:is\s+)?(?:most|first|#1|number\s+one).*?" + _LETTER + r"\s+(?:is\s+)?(?:second|next|#2|number\s+two)",
    re.IGNORECASE,
)
_REVERSE_RANKED = re.compile(
    r"\b(?:most|first)\b.*?" + _LETTER + r".*?\b(?:second|next)\b.*?" + _LETTER,
    re.IGNORECASE,
)
_TWO_LETTERS = re.compile(_LETTER + r"\s*(?:and|&|,)\s*" + _LETTER, re.IGNORECASE)
_END_LETTERS = re.compile(
    r"\b([A-E])(?:\s*(?:and|then|,|&)\s*([A-E]))?\s*[.!?]?\s*$",
    re.IGNORECASE,
)
_START_LETTER = re.compile(r"^([A-E])\b", re.IGNORECASE)
_CHOICE_PHRASE = re.compile(
    r"(?:i\s+)?(?:choose|pick|select|go\s+with|say|think)\s+(?:option\s+)?([A-E])\b",
    re.IGNORECASE,
)
_OPTION_PHRASE = re.compile(r"\b(?:option|answer|choice)\s+([A-E])\b", re.IGNORECASE)

_SHORT_REPLY = 20
_TEXT_PREFIX_CAP = 25


class Selection(BaseModel):
    """Structured answer supplied directly by the caller."""

    most_like_me: OptionKey
    second_most_like_me: Optional[OptionKey] = None

    @field_validator("most_like_me", "second_most_like_me", mode="before")
    @classmethod
    def _upper(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def describe(self) -> str:  # Plain-text rendering used as the participant's turn
        if self.second_most_like_me:
            return f"{self.most_like_me} is most like me, {self.second_most_like_me} is second"
        return self.most_like_me


class ParsedSelection(BaseModel):
    detected: bool = False
    most_like_me: Optional[OptionKey] = None
    second_most_like_me: Optional[OptionKey] = None
    confidence: Confidence = "low"


def parse_selection(message: str, question: Question) -> ParsedSelection:
    """Detect which option(s) a free-text reply selects for ``question``."""

    first, second, confidence = _match(message.strip(), question)
    return _restrict(first, second, confidence, question)


def resolve_selection(selection: Selection, question: Question) -> ParsedSelection:
    """Validate a structured selection against the question's options."""

    return _restrict(selection.most_like_me, selection.second_most_like_me, "high", question)


def _match(msg: str, question: Question) -> Tuple[Optional[str], Optional[str], Confidence]:
    for pattern in (_RANKED, _REVERSE_RANKED, _TWO_LETTERS):
        found = pattern.search(msg)
        if found:
            return found.group(1), found.group(2), "high"
    found = _END_LETTERS.search(msg)
    if found:
        return found.group(1), found.group(2), "high"
    found = _START_LETTER.search(msg)
    if found and len(msg) < _SHORT_REPLY:
        return found.group(1), None, "high"
    for pattern in (_CHOICE_PHRASE, _OPTION_PHRASE):
        found = pattern.search(msg)
        if found:
            return found.group(1), None, "medium"
    matches = _text_matches(msg, question)
    if matches:
        return matches[0], matches[1] if len(matches) > 1 else None, "low"
    return None, None, "low"


def _text_matches(msg: str, question: Question) -> List[str]:
    lowered = msg.lower()
    hits: List[Tuple[int, str]] = []
    for option in question.options:
        text = option.text.lower()
        size = min(_TEXT_PREFIX_CAP, len(text) // 2)
        if size <= 0:
            continue
        if text[:size] in lowered:
            hits.append((size, option.key))
    hits.sort(key=lambda item: item[0], reverse=True)
    return [key for _, key in hits]


def _restrict(
    first: Optional[str],
    second: Optional[str],
    confidence: Confidence,
    question: Question,
) -> ParsedSelection:
    valid = set(question.keys)
    first = first.upper() if first else None
    second = second.upper() if second else None
    if first not in valid:
        return ParsedSelection()
    if second not in valid or second == first:
        second = None
    if question.selection_type == "single":
        second = None
    return ParsedSelection(
        detected=True,
        most_like_me=first,
        second_most_like_me=second,
        confidence=confidence,
    )


__all__ = ["ParsedSelection", "Selection", "parse_selection", "resolve_selection"]
