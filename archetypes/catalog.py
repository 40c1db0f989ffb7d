from __future__ import annotations  # Leadership archetype reference catalog

from enum import Enum
from typing import Dict, Literal, Tuple

from pydantic import BaseModel, ConfigDict


OptionKey = Literal["A", "B", "C", "D", "E"]
OPTION_KEYS: Tuple[str, ...] = ("A", "B", "C", "D", "E")


class Archetype(str, Enum):  # Declaration order is the catalog order used for tie-breaks
    ANCHOR = "anchor"
    CATALYST = "catalyst"
    STEWARD = "steward"
    WAYFINDER = "wayfinder"
    ARCHITECT = "architect"


CATALOG_ORDER: Tuple[Archetype, ...] = tuple(Archetype)


class ArchetypeProfile(BaseModel):  # Immutable descriptive profile for one archetype
    model_config = ConfigDict(frozen=True)

    archetype: Archetype
    name: str
    key: OptionKey
    core_traits: Tuple[str, ...]
    under_pressure: str
    when_grounded: str
    overuse_signals: Tuple[str, ...]


ARCHETYPES: Dict[Archetype, ArchetypeProfile] = {
    Archetype.ANCHOR: ArchetypeProfile(
        archetype=Archetype.ANCHOR,
        name="Anchor",
        key="A",
        core_traits=("Steadiness", "calming", "emotional regulation", "stability"),
        under_pressure="Absorbs tension, holds things together, stays composed",
        when_grounded="Creates calm, helps others feel grounded and secure",
        overuse_signals=(
            "Feeling responsible for keeping everyone steady",
            "Absorbing more tension than you should",
            "Holding things together instead of moving them forward",
        ),
    ),
    Archetype.CATALYST: ArchetypeProfile(
        archetype=Archetype.CATALYST,
        name="Catalyst",
        key="B",
        core_traits=("Momentum", "action", "decisiveness", "urgency"),
        under_pressure="Pushes for decisions, drives execution, increases pace",
        when_grounded="Creates progress, makes things happen, generates momentum",
        overuse_signals=(
            "Feeling like nothing moves unless you push it",
            "Carrying momentum almost alone",
            "Moving fast but never feeling sustainable",
        ),
    ),
    Archetype.STEWARD: ArchetypeProfile(
        archetype=Archetype.STEWARD,
        name="Steward",
        key="C",
        core_traits=("Care", "connection", "emotional support", "trust"),
        under_pressure="Carries emotional weight, protects others from stress",
        when_grounded="Builds trust, creates psychological safety, supports growth",
        overuse_signals=(
            "Carrying other people's emotional weight",
            "Caring deeply but getting worn down",
            "Taking on more so others aren't overwhelmed",
        ),
    ),
    Archetype.WAYFINDER: ArchetypeProfile(
        archetype=Archetype.WAYFINDER,
        name="Wayfinder",
        key="D",
        core_traits=("Clarity", "thinking", "perspective", "orientation"),
        under_pressure="Steps back to think, carries mental loops, analyzes longer",
        when_grounded="Provides clarity, makes sense of complexity, orients others",
        overuse_signals=(
            "Having no time or space to think clearly",
            "Seeing what needs to happen but can't get traction",
            "Carrying too many open loops mentally",
        ),
    ),
    Archetype.ARCHITECT: ArchetypeProfile(
        archetype=Archetype.ARCHITECT,
        name="Architect",
        key="E",
        core_traits=("Systems", "structure", "process", "design"),
        under_pressure="Fixes broken systems, redesigns processes compulsively",
        when_grounded="Builds sustainable structures, reduces friction through design",
        overuse_signals=(
            "Dealing with constant inefficiency or broken systems",
            "Keep fixing things that should already work",
            "Carrying responsibility for broken systems",
        ),
    ),
}


def profile(archetype: Archetype | str) -> ArchetypeProfile:  # Look up a profile by enum or raw value
    return ARCHETYPES[Archetype(archetype)]


def archetype_for_key(key: str) -> Archetype:  # Map an option letter to its archetype
    for entry in ARCHETYPES.values():
        if entry.key == key.upper():
            return entry.archetype
    raise KeyError(f"Unknown option key: {key}")


def zero_tally() -> Dict[Archetype, int]:  # Fresh tally with every archetype present
    return {archetype: 0 for archetype in CATALOG_ORDER}


def trait_line(entry: ArchetypeProfile) -> str:  # Comma-joined trait summary used in prompts
    return ", ".join(entry.core_traits)


__all__ = [
    "ARCHETYPES",
    "Archetype",
    "ArchetypeProfile",
    "CATALOG_ORDER",
    "OPTION_KEYS",
    "OptionKey",
    "archetype_for_key",
    "profile",
    "trait_line",
    "zero_tally",
]
