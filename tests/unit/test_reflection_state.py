from reflection_session import (
    CLOSE_AT,
    ReflectionState,
    advance_reflection,
    initial_reflection_state,
    wrap_up_hint,
)


def test_opening_moves_to_conversation_without_counting():
    state = advance_reflection(initial_reflection_state(), None)
    assert state.phase == "conversation"
    assert state.exchange_count == 0
    assert not state.is_complete


def test_each_user_reply_counts_once_until_closing():
    state = ReflectionState(phase="conversation")
    counts = []
    while state.phase == "conversation":
        state = advance_reflection(state, "It shows up in planning meetings.")
        counts.append(state.exchange_count)
    assert counts == [1, 2, 3]
    assert state.phase == "closing"
    assert state.exchange_count == CLOSE_AT


def test_conversation_without_message_is_unchanged():
    state = ReflectionState(phase="conversation", exchange_count=1)
    assert advance_reflection(state, None) == state


def test_wrap_up_hint_is_separate_from_closing():
    assert not wrap_up_hint(ReflectionState(phase="conversation", exchange_count=1))
    hinted = ReflectionState(phase="conversation", exchange_count=2)
    assert wrap_up_hint(hinted)
    assert advance_reflection(hinted, "yes").phase == "closing"
    assert not wrap_up_hint(ReflectionState(phase="closing", exchange_count=3))


def test_closing_completes_and_completed_is_terminal():
    done = advance_reflection(ReflectionState(phase="closing", exchange_count=3), None)
    assert done.phase == "completed"
    assert done.is_complete
    for message in (None, "one more thought"):
        again = advance_reflection(done, message)
        assert again.is_complete
        assert again.phase == "completed"
        assert again.exchange_count == 3
