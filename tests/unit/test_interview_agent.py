from __future__ import annotations

import pytest

from agents.interview_agent import START_TRIGGER, build_system_prompt, process_turn
from agents.types import AgentError, ChatMessage, TenantContext
from archetypes import Archetype
from interview_session import ArchetypeTallies, Selection, SessionState, advance, initial_state


TENANT = TenantContext(display_name="Acme Leadership", welcome_message="Welcome to your discovery session.")


class Recorder:
    def __init__(self, reply: str = "Thanks, let's keep going.") -> None:
        self.reply = reply
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        return self.reply

    @property
    def system(self) -> str:
        return self.calls[-1]["messages"][0]["content"]

    @property
    def last_user(self) -> str:
        return self.calls[-1]["messages"][-1]["content"]


def _boom(**_):
    raise RuntimeError("upstream timeout")


def test_first_turn_sends_start_trigger_and_shows_first_question():
    llm = Recorder("Welcome! First question...")
    turn = process_turn(None, None, [], TENANT, "Jordan", llm=llm)
    assert turn.message == "Welcome! First question..."
    assert turn.session_state.phase == "context"
    assert turn.session_state.current_question_index == 1
    assert not turn.is_complete
    assert llm.last_user == START_TRIGGER
    assert "CURRENT TASK: Opening" in llm.system
    assert "Q1: Which best describes your current role?" in llm.system
    assert "Acme Leadership" in llm.system
    assert llm.calls[-1]["max_tokens"] == 1024


def test_history_and_new_message_are_forwarded():
    llm = Recorder()
    state = SessionState(phase="context", current_question_index=1)
    history = [
        ChatMessage(role="assistant", content="Which best describes your current role?"),
        ChatMessage(role="user", content=""),
    ]
    turn = process_turn("B", state, history, TENANT, "Jordan", llm=llm)
    roles = [message["role"] for message in llm.calls[-1]["messages"]]
    assert roles == ["system", "assistant", "user"]
    assert llm.last_user == "B"
    assert turn.session_state.current_question_index == 2


def test_model_failure_leaves_state_untouched():
    state = SessionState(phase="default_mode", current_question_index=6)
    snapshot = state.model_copy(deep=True)
    with pytest.raises(AgentError) as excinfo:
        process_turn("B and D", state, [], TENANT, "Jordan", llm=_boom)
    assert str(excinfo.value) == "Failed to generate response"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert state == snapshot


def test_unclear_reply_asks_again_without_advancing():
    llm = Recorder()
    state = SessionState(phase="default_mode", current_question_index=5)
    turn = process_turn("hard to say really", state, [], TENANT, "Jordan", llm=llm)
    assert turn.session_state == state
    assert "did not contain a clear choice" in llm.system


def test_partial_ranked_answer_prompts_for_second_choice():
    llm = Recorder()
    state = SessionState(phase="default_mode", current_question_index=4)
    turn = process_turn("B", state, [], TENANT, "Jordan", llm=llm)
    assert turn.session_state.current_question_index == 4
    assert "SECOND most like them" in llm.system


def test_structured_selection_is_used_as_the_user_turn():
    llm = Recorder()
    state = SessionState(phase="default_mode", current_question_index=4)
    turn = process_turn(None, state, [], TENANT, "Jordan", selection=Selection(most_like_me="B", second_most_like_me="D"), llm=llm)
    assert llm.last_user == "B is most like me, D is second"
    assert turn.session_state.current_question_index == 5


def test_section_transition_is_announced_on_phase_change():
    llm = Recorder()
    state = SessionState(phase="context", current_question_index=3)
    turn = process_turn("A", state, [], TENANT, "Jordan", llm=llm)
    assert turn.session_state.phase == "default_mode"
    assert "SECTION TRANSITION:" in llm.system
    assert "Q4:" in llm.system


def test_final_answer_scores_and_completes():
    llm = Recorder("Thank you for sharing.")
    tallies = ArchetypeTallies(default={Archetype.CATALYST: 5}, authentic={Archetype.STEWARD: 6})
    state = SessionState(phase="friction_signals", current_question_index=19, tallies=tallies)
    turn = process_turn("C", state, [], TENANT, "Jordan", llm=llm)
    assert turn.is_complete
    assert turn.session_state.phase == "closing"
    assert turn.session_state.default_archetype is Archetype.CATALYST
    assert turn.session_state.authentic_archetype is Archetype.STEWARD
    assert turn.session_state.is_aligned is False
    assert "CURRENT TASK: Closing" in llm.system
    assert "CURRENT QUESTION" not in llm.system


def test_closing_prompt_has_no_question():
    closing = SessionState(phase="closing", current_question_index=19)
    prompt = build_system_prompt(closing, advance(closing, "A"), TENANT, "Jordan")
    assert "CURRENT QUESTION" not in prompt


def test_registry_model_is_used_when_no_override(fake_models):
    turn = process_turn(None, initial_state(), [], TENANT, "Jordan")
    assert turn.message == "Thanks, here is the next question."


def test_tenant_messages_reach_the_prompt_verbatim():
    welcome = "Hi {name}!\n\n  Take your time;  there is no rush. " + "x" * 700
    farewell = "Thanks,\n  the Acme team"
    tenant = TenantContext(display_name="Acme", welcome_message=welcome, completion_message=farewell)
    opening = build_system_prompt(initial_state(), advance(initial_state()), tenant, "Jordan")
    assert f'"{welcome}"' in opening
    closing = SessionState(phase="closing", current_question_index=19)
    assert f'"{farewell}"' in build_system_prompt(closing, closing, tenant, "Jordan")
