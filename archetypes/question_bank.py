"""Ordered survey questions for the leadership archetype discovery interview.

Questions are grouped into four sections. Context questions (Q1-Q3) gather
background and are not scored. Default-mode (Q4-Q12) and authentic-mode
(Q13-Q16) questions are ranked: the participant names the option most like
them and the one second most like them. Friction-signal questions (Q17-Q19)
are single-select and scored.
"""
from __future__ import annotations

from typing import Dict, List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from .catalog import Archetype, OptionKey, archetype_for_key


Section = Literal["context", "default_mode", "authentic_mode", "friction_signals"]
Phase = Literal["opening", "context", "default_mode", "authentic_mode", "friction_signals", "closing"]
SelectionType = Literal["single", "ranked"]


class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: OptionKey
    text: str
    archetype: Optional[Archetype] = None


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    index: int
    section: Section
    stem: str
    selection_type: SelectionType
    scored: bool
    options: Tuple[Option, ...]

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(option.key for option in self.options)

    def option(self, key: str) -> Optional[Option]:
        for candidate in self.options:
            if candidate.key == key:
                return candidate
        return None


def _context(index: int, stem: str, texts: Sequence[str]) -> Question:
    options = tuple(Option(key=key, text=text) for key, text in zip("ABCDE", texts))
    return Question(
        id=f"Q{index}",
        index=index,
        section="context",
        stem=stem,
        selection_type="single",
        scored=False,
        options=options,
    )


def _scored(index: int, section: Section, stem: str, texts: Sequence[str]) -> Question:
    options = tuple(
        Option(key=key, text=text, archetype=archetype_for_key(key)) for key, text in zip("ABCDE", texts)
    )
    selection_type: SelectionType = "single" if section == "friction_signals" else "ranked"
    return Question(
        id=f"Q{index}",
        index=index,
        section=section,
        stem=stem,
        selection_type=selection_type,
        scored=True,
        options=options,
    )


QUESTIONS: Tuple[Question, ...] = (
    _context(
        1,
        "Which best describes your current role?",
        (
            "Individual contributor",
            "People manager",
            "Manager of managers",
            "Senior leader or executive",
            "Founder or business owner",
        ),
    ),
    _context(
        2,
        "How often does your role require you to make decisions with incomplete information?",
        ("Rarely", "Occasionally", "Frequently", "Constantly"),
    ),
    _context(
        3,
        "Lately, leadership feels:",
        ("Mostly manageable", "Busy but sustainable", "Heavy and draining", "Chaotic and overwhelming"),
    ),
    _scored(
        4,
        "default_mode",
        "When pressure is high and things feel messy, I tend to:",
        (
            "Slow things down and help everyone regain calm before moving",
            "Push for a decision so we do not stall",
            "Check in on how people are feeling and try to reduce strain",
            "Step back to think through what actually matters",
            "Fix the process or system that seems broken",
        ),
    ),
    _scored(
        5,
        "default_mode",
        "When conflict or tension shows up on my team, my instinct is to:",
        (
            "De-escalate and stabilize the situation",
            "Move things toward resolution quickly",
            "Make sure everyone feels heard and supported",
            "Understand the root causes before acting",
            "Adjust roles, rules, or workflows to prevent repeat issues",
        ),
    ),
    _scored(
        6,
        "default_mode",
        "When deadlines are tight and expectations are high, I usually:",
        (
            "Try to keep things steady so people do not panic",
            "Increase the pace and drive execution",
            "Take on more myself so others are not overwhelmed",
            "Reprioritize and reassess what truly matters",
            "Improve how the work is structured so it flows better",
        ),
    ),
    _scored(
        7,
        "default_mode",
        "When things start to fall apart, I am most likely to:",
        (
            "Become the calming presence in the room",
            "Take control and start moving pieces",
            "Support people emotionally so they can keep going",
            "Pull back to get clarity before intervening",
            "Identify what is broken in the system and fix it",
        ),
    ),
    _scored(
        8,
        "default_mode",
        "When I feel personally overwhelmed at work, I tend to:",
        (
            "Hold it together and stay steady for others",
            "Work faster and push through",
            "Focus on helping others cope",
            "Spend more time thinking and analyzing",
            "Try to redesign how things are working",
        ),
    ),
    _scored(
        9,
        "default_mode",
        "When a problem keeps repeating, my first instinct is to:",
        (
            "Smooth it over so things stay stable",
            "Solve it decisively and move on",
            "Support the people affected by it",
            "Understand why it keeps happening",
            "Change the underlying system or process",
        ),
    ),
    _scored(
        10,
        "default_mode",
        "When things are not going well and I feel responsible for the outcome, I am most likely to:",
        (
            "Stay composed and try not to add to the chaos",
            "Step in and drive action myself",
            "Take on more so others are not overwhelmed",
            "Pull back to reassess what is really going on",
            "Start changing how the work is set up",
        ),
    ),
    _scored(
        11,
        "default_mode",
        "In high pressure situations, others often rely on me to:",
        (
            "Be the steady one",
            "Make things happen",
            "Be understanding and supportive",
            "Provide clarity and perspective",
            "Fix what is not working",
        ),
    ),
    _scored(
        12,
        "default_mode",
        "When I feel like I cannot drop the ball, I tend to:",
        (
            "Hold things together myself",
            "Push harder and move faster",
            "Protect people from stress",
            "Think longer before acting",
            "Rework the system so failure is less likely",
        ),
    ),
    _scored(
        13,
        "authentic_mode",
        "When I am at my best as a leader, I feel most energized by:",
        (
            "Creating steadiness and calm",
            "Creating momentum and progress",
            "Building trust and strong relationships",
            "Clarifying priorities and direction",
            "Designing systems that make work easier",
        ),
    ),
    _scored(
        14,
        "authentic_mode",
        "The kind of leadership that feels most sustainable to me involves:",
        (
            "Being a grounding presence",
            "Making decisions and moving forward",
            "Supporting people and morale",
            "Providing clarity and perspective",
            "Improving how work is structured",
        ),
    ),
    _scored(
        15,
        "authentic_mode",
        "When I imagine my ideal leadership rhythm, it includes:",
        (
            "Calm, steadiness, and emotional regulation",
            "Forward motion and visible progress",
            "Connection, trust, and psychological safety",
            "Thinking space and clear priorities",
            "Well designed systems that reduce friction",
        ),
    ),
    _scored(
        16,
        "authentic_mode",
        "I feel most like myself as a leader when I am:",
        (
            "Helping people feel grounded",
            "Driving things toward action",
            "Creating a supportive environment",
            "Making sense of complexity",
            "Building something that lasts",
        ),
    ),
    _scored(
        17,
        "friction_signals",
        "What feels most draining for you right now?",
        (
            "Feeling responsible for keeping everyone steady",
            "Feeling like nothing moves unless I push it",
            "Carrying other people's emotional weight",
            "Having no time or space to think clearly",
            "Dealing with constant inefficiency or broken systems",
        ),
    ),
    _scored(
        18,
        "friction_signals",
        "Which frustration shows up most often?",
        (
            "I am holding things together instead of moving them forward",
            "I am moving fast but it never feels sustainable",
            "I care deeply, but it is wearing me down",
            "I see what needs to happen, but cannot get traction",
            "I keep fixing things that should already work",
        ),
    ),
    _scored(
        19,
        "friction_signals",
        "Which statement feels most uncomfortably true?",
        (
            "I absorb more tension than I should",
            "I carry momentum almost alone",
            "I carry emotional weight that is not mine",
            "I carry too many open loops mentally",
            "I carry responsibility for broken systems",
        ),
    ),
)

TOTAL_QUESTIONS = len(QUESTIONS)

_BY_INDEX: Dict[int, Question] = {question.index: question for question in QUESTIONS}
_BY_ID: Dict[str, Question] = {question.id: question for question in QUESTIONS}

# Upper index bound (inclusive) for each question-bearing phase.
_PHASE_BOUNDS: Tuple[Tuple[int, Phase], ...] = (
    (0, "opening"),
    (3, "context"),
    (12, "default_mode"),
    (16, "authentic_mode"),
    (19, "friction_signals"),
)


def question_by_index(index: int) -> Optional[Question]:
    return _BY_INDEX.get(index)


def question_by_id(question_id: str) -> Optional[Question]:
    return _BY_ID.get(question_id)


def questions_for_section(section: Section) -> List[Question]:
    return [question for question in QUESTIONS if question.section == section]


def phase_for_index(index: int) -> Phase:
    """Derive the interview phase from a question index."""

    for bound, phase in _PHASE_BOUNDS:
        if index <= bound:
            return phase
    return "closing"


def progress_percentage(index: int) -> int:
    return round(min(max(index, 0), TOTAL_QUESTIONS) / TOTAL_QUESTIONS * 100)


__all__ = [
    "Option",
    "Phase",
    "QUESTIONS",
    "Question",
    "Section",
    "SelectionType",
    "TOTAL_QUESTIONS",
    "phase_for_index",
    "progress_percentage",
    "question_by_id",
    "question_by_index",
    "questions_for_section",
]
