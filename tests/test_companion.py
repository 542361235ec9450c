from models.pet import PetState
from services.companion import (
    OPENING_LINE_REQUEST,
    PROJECTION_KEYS,
    build_messages,
    build_system_prompt,
    memory_summary,
    project,
)


def _context(**overrides):
    pet = PetState(name="Mochi", species="puppup", stage="child", adopted=True)
    for key, value in overrides.items():
        setattr(pet, key, value)
    return project(pet)


def _history(n):
    return [
        {"role": "user" if i % 2 == 0 else "assistant", "content": f"message {i}"}
        for i in range(n)
    ]


def test_projection_is_limited_to_readable_fields():
    ctx = _context()
    assert set(ctx) == set(PROJECTION_KEYS)
    assert "coins" not in ctx
    assert "death_cause" not in ctx


def test_system_prompt_reflects_state():
    prompt = build_system_prompt(_context(hunger=20, happiness=90, is_sick=True))
    assert "You are Mochi" in prompt
    assert "Species: puppup (stage: child)" in prompt
    assert "Hunger: 20/100 (you feel very hungry)" in prompt
    assert "Happiness: 90/100 (feeling joyful)" in prompt
    assert "something feels wrong inside you" in prompt


def test_system_prompt_tolerates_missing_fields():
    prompt = build_system_prompt({})
    assert "You are a pet" in prompt
    assert "Personality trait: curious" in prompt


def test_empty_history_asks_for_an_opening_line():
    messages = build_messages([], _context())
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[1]["content"] == OPENING_LINE_REQUEST
    assert "PAST CONVERSATION MEMORIES" not in messages[0]["content"]


def test_short_history_is_passed_through():
    history = _history(3)
    messages = build_messages(history, _context())
    assert messages[1:] == history
    assert "PAST CONVERSATION MEMORIES" not in messages[0]["content"]


def test_older_messages_become_memories():
    history = _history(7)
    messages = build_messages(history, _context())
    assert len(messages) == 5
    assert messages[1:] == history[3:]
    system = messages[0]["content"]
    assert "PAST CONVERSATION MEMORIES" in system
    assert '"message 0", "message 2"' in system
    assert 'Things you\'ve said before: "message 1"' in system
    assert "message 4" not in system


def test_memory_snippets_are_truncated():
    summary = memory_summary([{"role": "user", "content": "a" * 300}])
    assert '"' + "a" * 120 + '"' in summary
    assert "a" * 121 not in summary


def test_build_messages_does_not_mutate_history():
    history = _history(6)
    copy = [dict(m) for m in history]
    build_messages(history, _context())
    assert history == copy
