"""Serializable state for a single archetype discovery interview."""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field, model_validator

from archetypes import Archetype, OptionKey, Phase, zero_tally


Tally = Dict[Archetype, int]


class QuestionResponse(BaseModel):
    """Recorded answer to one question; ranked answers may be partial."""

    question_id: str
    most_like_me: Optional[OptionKey] = None
    second_most_like_me: Optional[OptionKey] = None


class ArchetypeTallies(BaseModel):
    """Per-archetype points for the default, authentic and friction buckets."""

    default: Tally = Field(default_factory=zero_tally)
    authentic: Tally = Field(default_factory=zero_tally)
    friction: Tally = Field(default_factory=zero_tally)

    @model_validator(mode="after")
    def _fill_missing(self) -> "ArchetypeTallies":
        for bucket in (self.default, self.authentic, self.friction):
            for archetype, count in zero_tally().items():
                bucket.setdefault(archetype, count)
        return self


class ArchetypeResults(BaseModel):
    """Headline outcome of a completed interview."""

    default_archetype: Archetype
    authentic_archetype: Archetype
    is_aligned: bool
    scores: ArchetypeTallies


class SessionState(BaseModel):
    """Interview progress passed in and returned on every turn."""

    phase: Phase = "opening"
    current_question_index: int = Field(default=0, ge=0)
    responses: Dict[str, QuestionResponse] = Field(default_factory=dict)
    tallies: ArchetypeTallies = Field(default_factory=ArchetypeTallies)

    scores: Optional[ArchetypeTallies] = None
    default_archetype: Optional[Archetype] = None
    authentic_archetype: Optional[Archetype] = None
    is_aligned: Optional[bool] = None

    @property
    def is_scored(self) -> bool:
        return self.default_archetype is not None

    def results(self) -> Optional[ArchetypeResults]:
        if not self.is_scored or self.scores is None:
            return None
        return ArchetypeResults(
            default_archetype=self.default_archetype,
            authentic_archetype=self.authentic_archetype,
            is_aligned=bool(self.is_aligned),
            scores=self.scores,
        )


__all__ = ["ArchetypeResults", "ArchetypeTallies", "QuestionResponse", "SessionState", "Tally"]
