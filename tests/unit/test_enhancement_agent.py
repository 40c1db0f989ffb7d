from __future__ import annotations

import json

from agents.enhancement_agent import (
    NO_REFLECTION_ERROR,
    PARSE_ERROR,
    EnhancedResults,
    build_system_prompt,
    format_transcript,
    synthesize,
)
from agents.types import TenantContext
from archetypes import Archetype
from interview_session import ArchetypeResults, ArchetypeTallies
from reflection_session import ReflectionMessage


TENANT = TenantContext(display_name="Acme Leadership")
RESULTS = ArchetypeResults(
    default_archetype=Archetype.ANCHOR,
    authentic_archetype=Archetype.WAYFINDER,
    is_aligned=False,
    scores=ArchetypeTallies(),
)
TRANSCRIPT = [
    ReflectionMessage(role="assistant", content="How does the tension show up?"),
    ReflectionMessage(role="user", content="I hold back my ideas when things get tense."),
]


def test_synthesize_parses_fenced_json(enhanced_payload):
    calls = []

    def _model(**kwargs):
        calls.append(kwargs)
        return "```json\n" + json.dumps(enhanced_payload) + "\n```"

    outcome = synthesize(RESULTS, TRANSCRIPT, "Jordan", TENANT, llm=_model)
    assert outcome.success
    assert outcome.error is None
    assert outcome.enhanced.reflection_themes == ["Steadiness", "Direction"]
    assert outcome.enhanced.meaningful_quotes[0].quote == "I hold back my ideas"
    assert outcome.enhanced.enhanced_at is not None
    request = calls[0]["messages"][-1]["content"]
    assert "PARTICIPANT: I hold back my ideas when things get tense." in request
    assert "GUIDE: How does the tension show up?" in request
    assert calls[0]["max_tokens"] == 4096


def test_synthesize_requires_user_messages():
    calls = []
    outcome = synthesize(RESULTS, TRANSCRIPT[:1], "Jordan", TENANT, llm=lambda **kw: calls.append(kw) or "{}")
    assert not outcome.success
    assert outcome.error == NO_REFLECTION_ERROR
    assert calls == []


def test_synthesize_reports_parse_failure():
    outcome = synthesize(RESULTS, TRANSCRIPT, "Jordan", TENANT, llm=lambda **_: "Sure! Here are your results.")
    assert not outcome.success
    assert outcome.error == PARSE_ERROR
    assert outcome.enhanced is None


def test_synthesize_reports_model_failure():
    def _fail(**_):
        raise RuntimeError("rate limited")

    outcome = synthesize(RESULTS, TRANSCRIPT, "Jordan", TENANT, llm=_fail)
    assert not outcome.success
    assert outcome.error == "rate limited"


def test_enhanced_results_round_trip_with_camel_case(enhanced_payload):
    payload = dict(enhanced_payload, personalizedTensionInsights="")
    enhanced = EnhancedResults.model_validate(payload)
    assert enhanced.personalized_tension_insights is None
    dumped = json.loads(enhanced.model_dump_json(by_alias=True))
    assert dumped["personalizedDefaultNarrative"] == enhanced_payload["personalizedDefaultNarrative"]
    assert EnhancedResults.model_validate_json(enhanced.model_dump_json()) == enhanced


def test_prompt_requests_null_tension_when_aligned():
    aligned = RESULTS.model_copy(update={"authentic_archetype": Archetype.ANCHOR, "is_aligned": True})
    assert '"personalizedTensionInsights": null' in build_system_prompt(aligned, "Jordan", TENANT)
    assert "TENSION PATTERN:" in build_system_prompt(RESULTS, "Jordan", TENANT)


def test_format_transcript_labels_speakers():
    assert format_transcript(TRANSCRIPT) == (
        "GUIDE: How does the tension show up?\n\nPARTICIPANT: I hold back my ideas when things get tense."
    )
