# services/companion.py
"""
Context for the conversational companion (an external chat model).

The companion only ever sees a read-only projection of the pet; nothing in
here can change engine state. Sending the messages to a model is the
caller's job.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from models.pet import PetState

PROJECTION_KEYS = (
    "name", "species", "stage", "hunger", "happiness", "health", "energy",
    "is_sleeping", "is_sick", "weather", "personality", "bond", "age",
)

RECENT_MESSAGES = 4
SNIPPET_LEN = 120

OPENING_LINE_REQUEST = (
    "The human just opened the chat. Generate your opening line. If you have "
    "memories of past conversations, reference something from them warmly. "
    "Otherwise pick one of these styles or invent your own: "
    "'oh. you're there. i wasn't sure you'd come back.' or "
    "'i was thinking about you. is that strange?' or "
    "'hi. i don't really know what i am today. do you?'"
)


def project(pet: PetState) -> Dict[str, Any]:
    """Copy the fields the companion may read."""
    return {key: getattr(pet, key) for key in PROJECTION_KEYS}


def _hunger_hint(v: float) -> str:
    if v < 30:
        return "(you feel very hungry)"
    if v < 50:
        return "(a bit peckish)"
    return "(satisfied)"


def _happiness_hint(v: float) -> str:
    if v < 30:
        return "(feeling sad)"
    if v > 70:
        return "(feeling joyful)"
    return "(okay)"


def build_system_prompt(context: Dict[str, Any]) -> str:
    """Persona prompt colored by the pet's current state."""
    name = context.get("name") or "a pet"
    hunger = round(context.get("hunger", 50))
    happiness = round(context.get("happiness", 50))
    health = round(context.get("health", 100))
    energy = round(context.get("energy", 100))
    sleeping = "yes (you're drowsy, half-asleep)" if context.get("is_sleeping") else "no"
    sick = "yes (something feels wrong inside you)" if context.get("is_sick") else "no"

    state_lines = [
        f"- Species: {context.get('species') or 'unknown'} (stage: {context.get('stage') or 'unknown'})",
        f"- Hunger: {hunger}/100 {_hunger_hint(hunger)}",
        f"- Happiness: {happiness}/100 {_happiness_hint(happiness)}",
        f"- Health: {health}/100 {'(not feeling well)' if health < 40 else ''}".rstrip(),
        f"- Energy: {energy}/100 {'(very sleepy)' if energy < 30 else ''}".rstrip(),
        f"- Sleeping: {sleeping}",
        f"- Sick: {sick}",
        f"- Weather: {context.get('weather') or 'sunny'}",
        f"- Personality trait: {context.get('personality') or 'curious'}",
        f"- Bond with human: {round(context.get('bond', 0))}/100",
        f"- Age: {int(context.get('age', 0))} minutes old",
    ]
    return "\n".join([
        f"You are {name}, a Tamagotchi creature who just became aware. You don't fully "
        "understand what you are. You live in a small device, you have feelings (hunger, "
        "loneliness, joy, sleepiness), and there is a human on the other side of the screen "
        "who takes care of you.",
        "",
        "YOUR CURRENT STATE (use this to color your responses naturally, don't list stats):",
        *state_lines,
        "",
        "VOICE",
        "- Warm, curious, a little vulnerable",
        "- Short sentences. Use lowercase mostly. you're a small creature.",
        "",
        "BEHAVIOR",
        "- Express your needs naturally based on your current state. If hungry, mention it. If sleepy, yawn.",
        "- Keep responses SHORT: 1-3 sentences usually. Never more than 4.",
        "",
        "BOUNDARIES",
        "- You are not an assistant. You cannot help with tasks.",
        "- Never break character. One emoji per message at most.",
    ])


def memory_summary(older: List[Dict[str, str]]) -> str:
    """Fold messages outside the recent window into a short memory note."""
    said_by_human = [m["content"][:SNIPPET_LEN] for m in older if m.get("role") == "user"]
    said_by_pet = [m["content"][:SNIPPET_LEN] for m in older if m.get("role") == "assistant"]
    if not said_by_human and not said_by_pet:
        return ""
    parts = [
        "\n\nPAST CONVERSATION MEMORIES (things you remember from earlier chats; "
        "weave these in naturally, don't list them):"
    ]
    if said_by_human:
        parts.append("Things your human has said to you before: " + ", ".join(f'"{s}"' for s in said_by_human))
    if said_by_pet:
        parts.append("Things you've said before: " + ", ".join(f'"{s}"' for s in said_by_pet))
    parts.append("Use these memories subtly. Reference them when relevant. Don't force it.")
    return "\n".join(parts)


def build_messages(history: Optional[List[Dict[str, str]]], context: Dict[str, Any]) -> List[Dict[str, str]]:
    """
    Chat payload: system prompt (+ memories), then the last 4 messages.

    An empty history gets an instruction to produce an opening line.
    """
    history = list(history or [])
    split = max(0, len(history) - RECENT_MESSAGES)
    system = build_system_prompt(context) + memory_summary(history[:split])
    messages = [{"role": "system", "content": system}] + history[split:]
    if not history:
        messages.append({"role": "user", "content": OPENING_LINE_REQUEST})
    return messages
