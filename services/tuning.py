# services/tuning.py
"""
Simulation tuning and session configuration.

All rates are per elapsed minute unless the name says otherwise. Like
services.economy, this module is dependency-free and the namespaces are
not meant to be instantiated.
"""

from typing import Dict, Final, Tuple


class Tuning:
    """Namespace for the life-simulation constants."""

    # Ticks closer together than this (minutes) are ignored.
    MIN_ELAPSED_MIN: Final[float] = 0.5

    # Base decay while awake
    HUNGER_DECAY: Final[float] = 0.5
    HAPPINESS_DECAY: Final[float] = 0.3
    HYGIENE_DECAY: Final[float] = 0.2
    ENERGY_DECAY: Final[float] = 0.15
    SLEEP_ENERGY_REGEN: Final[float] = 2.0

    # Weather
    WEATHER_PERIOD_MIN: Final[float] = 60.0
    WEATHER_WEIGHTS: Final[Tuple[Tuple[str, int], ...]] = (
        ("sunny", 35), ("rainy", 25), ("cold", 15), ("hot", 15), ("storm", 10),
    )
    WEATHER_MULTIPLIERS: Final[Dict[str, Dict[str, float]]] = {
        "sunny": {"happiness": 0.7, "energy": 0.8},
        "rainy": {"happiness": 1.5},
        "cold": {"hunger": 1.5},
        "hot": {"hygiene": 1.5},
        "storm": {"hunger": 2.0, "happiness": 2.0, "hygiene": 2.0, "energy": 2.0},
    }

    # Personality / stage multipliers
    LAZY_ENERGY_MULT: Final[float] = 1.5
    ANXIOUS_HAPPINESS_MULT: Final[float] = 1.3
    ATHLETIC_HAPPINESS_MULT: Final[float] = 1.2
    ATHLETIC_HAPPINESS_ABOVE: Final[float] = 50.0
    SENIOR_ENERGY_MULT: Final[float] = 1.5

    # Poop
    POOP_RATE: Final[float] = 0.03
    MESSY_POOP_RATE: Final[float] = 0.045
    POOP_HYGIENE_HIT: Final[float] = 10.0

    # Sickness
    SICK_RATE: Final[float] = 0.004
    SENSITIVE_SICK_RATE: Final[float] = 0.008
    SICK_BELOW: Final[float] = 30.0
    # difficulty -> (health drain per hour, untreated window in minutes)
    SICKNESS: Final[Dict[str, Tuple[float, float]]] = {
        "easy": (5.0, 360.0),
        "normal": (10.0, 180.0),
        "hard": (15.0, 120.0),
        "nightmare": (20.0, 60.0),
    }
    SICK_HUNGER_DRAIN: Final[float] = 0.2
    SICK_HAPPINESS_DRAIN: Final[float] = 0.3
    SICK_HYGIENE_DRAIN: Final[float] = 0.15
    UNTREATED_HEALTH_HIT: Final[float] = 30.0

    # Health penalties for neglected needs
    LOW_STAT: Final[float] = 30.0
    LOW_STAT_HEALTH_DRAIN: Final[float] = 0.3
    CRITICAL_STAT: Final[float] = 10.0
    CRITICAL_STAT_HEALTH_DRAIN: Final[float] = 0.8

    # Old age
    OLD_AGE_MIN: Final[float] = 30 * 24 * 60
    OLD_AGE_DEATH_RATE: Final[float] = 0.001

    # Critical events / misbehavior
    EVENT_RATE: Final[float] = 0.003
    MISBEHAVIOR_RATE: Final[float] = 0.005
    MISBEHAVIOR_TIMEOUT_MIN: Final[float] = 5.0

    def __new__(cls, *args, **kwargs):
        raise TypeError(f"{cls.__name__} is not instantiable")


class Session:
    """Namespace for the session driver (tick cadence, autosave, files)."""

    TICK_INTERVAL_S: Final[float] = 10.0
    AUTOSAVE_INTERVAL_S: Final[float] = 30.0
    SAVE_FILE: Final[str] = "save.json"
    MEMORIAL_FILE: Final[str] = "memorials.json"
    PROFILE_FILE: Final[str] = "profile.json"
    FALLBACK_DIR: Final[str] = ".userdata"

    def __new__(cls, *args, **kwargs):
        raise TypeError(f"{cls.__name__} is not instantiable")
