# models/events.py
"""
Rules for critical events (time-boxed emergencies) and teen misbehavior.

The functions here mutate a PetState in place and leave bookkeeping
(clearing the active event, timestamps, notifying observers) to the caller.
"""

from typing import Dict, Optional

from models.catalog import MISBEHAVIOR_INFO
from models.pet import PetState, clamp_stat


EVENT_TIMEOUT_MIN: Dict[str, float] = {
    "choking": 2.0,
    "escaped": 10.0,
    "nightmare": 2.0,
    "tantrum": 2.0,
    "fever": 2.0,
}
TAP_EVENTS: Dict[str, int] = {"choking": 15, "escaped": 20}
TAP_BOND_REWARD = 5.0
FEVER_TREATMENT_COST = 30

DISCIPLINE_RESPONSES = ("scold", "praise", "ignore")


def kill(pet: PetState, cause: str) -> None:
    """Mark the pet dead; the first recorded cause wins."""
    if not pet.is_dead:
        pet.death_cause = cause
    pet.is_dead = True


def event_timed_out(event: str, started_at: Optional[float], now: float) -> bool:
    if started_at is None:
        return False
    return (now - started_at) / 60 > EVENT_TIMEOUT_MIN[event]


def apply_ignore_penalty(pet: PetState, event: str, now: float) -> None:
    """Penalty for an event that was dismissed or left to time out."""
    if event == "choking":
        if pet.difficulty == "nightmare":
            kill(pet, "Choked")
        else:
            pet.health = clamp_stat(pet.health - 40)
    elif event == "escaped":
        pet.happiness = clamp_stat(pet.happiness - 30)
    elif event == "fever":
        pet.health = clamp_stat(pet.health - 20)
        pet.is_sick = True
        pet.sick_since = pet.sick_since or now
    elif event == "tantrum":
        pet.happiness = clamp_stat(pet.happiness - 25)
    elif event == "nightmare":
        pet.happiness = clamp_stat(pet.happiness - 15)
    else:
        raise ValueError(f"Unknown critical event: {event!r}")


def apply_comfort(pet: PetState, event: str) -> bool:
    """
    Positive resolution for events that are not tap-resolved.

    Fever treatment costs 30 coins; without them nothing happens and False
    is returned so the event stays active.
    """
    if event == "nightmare":
        pet.happiness = clamp_stat(pet.happiness + 10)
        pet.bond = clamp_stat(pet.bond + 3)
    elif event == "tantrum":
        pet.happiness = clamp_stat(pet.happiness + 5)
        pet.bond = clamp_stat(pet.bond + 2)
    elif event == "fever":
        if pet.coins < FEVER_TREATMENT_COST:
            return False
        pet.coins -= FEVER_TREATMENT_COST
        pet.health = clamp_stat(pet.health + 30)
        pet.is_sick = False
        pet.sick_since = None
    else:
        return False
    return True


def correct_response(misbehavior: str) -> str:
    return MISBEHAVIOR_INFO[misbehavior]["correct_response"]


def apply_discipline(pet: PetState, misbehavior: str, response: str) -> str:
    """
    Apply the outcome of a disciplinary choice.

    Returns 'correct', 'ignored' or 'wrong'.
    """
    if response == "ignore":
        pet.bond = clamp_stat(pet.bond - 5)
        return "ignored"
    if response == correct_response(misbehavior):
        pet.bond = clamp_stat(pet.bond + 3)
        pet.happiness = clamp_stat(pet.happiness + 5)
        return "correct"
    pet.happiness = clamp_stat(pet.happiness - 10)
    return "wrong"
