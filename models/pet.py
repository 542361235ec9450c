# models/pet.py
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


SPECIES = ("meowchi", "puppup", "drakeling")
STAGES = ("egg", "baby", "child", "teen", "adult", "senior")
DIFFICULTIES = ("easy", "normal", "hard", "nightmare")
WEATHERS = ("sunny", "rainy", "cold", "hot", "storm")
PERSONALITIES = (
    "lazy", "picky_eater", "messy", "anxious",
    "athletic", "sensitive", "independent",
)
CRITICAL_EVENTS = ("choking", "escaped", "nightmare", "tantrum", "fever")
MISBEHAVIORS = ("refuses_eat", "throws_toys", "runs_around", "wont_sleep")

NEED_STATS = ("hunger", "happiness", "health", "hygiene", "energy")
MAX_POOPS = 5
NAME_MAX_LEN = 16

# Upper bound (in hours of age) for each stage; senior is open-ended.
STAGE_HOURS = (
    ("egg", 10 / 60),
    ("baby", 24),
    ("child", 72),
    ("teen", 144),
    ("adult", 480),
)


def clamp_stat(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp a need/bond value to the inclusive range [lo, hi]."""
    return max(lo, min(hi, value))


def stage_for_age(age_minutes: float) -> str:
    """Map an age in minutes to its life stage."""
    hours = age_minutes / 60
    for stage, limit in STAGE_HOURS:
        if hours < limit:
            return stage
    return "senior"


def fmt_age(age_minutes: float) -> str:
    """Format an age in minutes, e.g. '12m', '3h 5m' or '2d 4h'."""
    if age_minutes < 0:
        age_minutes = 0
    hours = age_minutes / 60
    if hours < 1:
        return f"{int(age_minutes)}m"
    if hours < 24:
        return f"{int(hours)}h {int(age_minutes % 60)}m"
    return f"{int(hours // 24)}d {int(hours % 24)}h"


def _check_choice(label: str, value: Optional[str], allowed, nullable: bool = False) -> None:
    if value is None and nullable:
        return
    if value not in allowed:
        raise ValueError(f"{label} must be one of {', '.join(allowed)} (got {value!r}).")


@dataclass
class PetState:
    """
    The single mutable aggregate describing one pet.

    Defaults are the pristine pre-adoption values restored by a reset.

    Fields:
        name / species / personality / difficulty: identity, fixed at adoption.
        stage / age: life phase derived from age in minutes.
        created_at / last_update: epoch seconds.
        hunger, happiness, health, hygiene, energy: needs, 0–100.
        poops: droppings on the floor, 0–5.
        is_sick / sick_since: illness flag and onset time.
        weather / weather_changed_at: current weather and when it rolled.
        active_event / event_started_at / event_taps: critical emergency.
        active_misbehavior / misbehavior_at: teen disobedience.
        coins, level, xp, bond: economy and relationship.
        play_coins_this_hour / play_coins_hour_start: play reward window.
    """
    name: str = ""
    species: str = "meowchi"
    personality: str = "lazy"
    difficulty: str = "normal"

    stage: str = "egg"
    age: float = 0.0
    created_at: float = 0.0
    last_update: float = 0.0
    adopted: bool = False
    is_dead: bool = False
    death_cause: str = ""

    hunger: float = 80.0
    happiness: float = 80.0
    health: float = 100.0
    hygiene: float = 80.0
    energy: float = 100.0

    is_sleeping: bool = False
    poops: int = 0
    is_sick: bool = False
    sick_since: Optional[float] = None
    weather: str = "sunny"
    weather_changed_at: float = 0.0
    active_event: Optional[str] = None
    event_started_at: Optional[float] = None
    event_taps: int = 0
    active_misbehavior: Optional[str] = None
    misbehavior_at: Optional[float] = None

    coins: int = 50
    level: int = 1
    xp: float = 0.0
    bond: float = 0.0
    play_coins_this_hour: int = 0
    play_coins_hour_start: float = 0.0

    def __post_init__(self) -> None:
        """Validate enum fields and normalize numeric ranges."""
        _check_choice("species", self.species, SPECIES)
        _check_choice("personality", self.personality, PERSONALITIES)
        _check_choice("difficulty", self.difficulty, DIFFICULTIES)
        _check_choice("stage", self.stage, STAGES)
        _check_choice("weather", self.weather, WEATHERS)
        _check_choice("active_event", self.active_event, CRITICAL_EVENTS, nullable=True)
        _check_choice("active_misbehavior", self.active_misbehavior, MISBEHAVIORS, nullable=True)

        for stat in NEED_STATS:
            setattr(self, stat, clamp_stat(float(getattr(self, stat))))
        self.bond = clamp_stat(float(self.bond))
        self.poops = max(0, min(MAX_POOPS, int(self.poops)))
        self.coins = max(0, int(self.coins))
        self.level = max(1, int(self.level))
        self.age = max(0.0, float(self.age))

    def avg_stats(self) -> float:
        """Mean of the five needs, used by the evolution calculator."""
        return sum(getattr(self, stat) for stat in NEED_STATS) / len(NEED_STATS)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize every field to a flat JSON-friendly dict."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PetState":
        """
        Build a PetState from a snapshot produced by to_dict().

        Missing keys fall back to defaults and values are coerced to the
        field's type; unknown keys are ignored. No schema migration is done.
        """
        base = PetState()

        def opt_float(key: str) -> Optional[float]:
            v = d.get(key)
            return None if v is None else float(v)

        def opt_str(key: str) -> Optional[str]:
            v = d.get(key)
            return None if v is None else str(v)

        return PetState(
            name=str(d.get("name", base.name)),
            species=str(d.get("species", base.species)),
            personality=str(d.get("personality", base.personality)),
            difficulty=str(d.get("difficulty", base.difficulty)),
            stage=str(d.get("stage", base.stage)),
            age=float(d.get("age", base.age)),
            created_at=float(d.get("created_at", base.created_at)),
            last_update=float(d.get("last_update", base.last_update)),
            adopted=bool(d.get("adopted", base.adopted)),
            is_dead=bool(d.get("is_dead", base.is_dead)),
            death_cause=str(d.get("death_cause", base.death_cause) or ""),
            hunger=float(d.get("hunger", base.hunger)),
            happiness=float(d.get("happiness", base.happiness)),
            health=float(d.get("health", base.health)),
            hygiene=float(d.get("hygiene", base.hygiene)),
            energy=float(d.get("energy", base.energy)),
            is_sleeping=bool(d.get("is_sleeping", base.is_sleeping)),
            poops=int(d.get("poops", base.poops)),
            is_sick=bool(d.get("is_sick", base.is_sick)),
            sick_since=opt_float("sick_since"),
            weather=str(d.get("weather", base.weather)),
            weather_changed_at=float(d.get("weather_changed_at", base.weather_changed_at)),
            active_event=opt_str("active_event"),
            event_started_at=opt_float("event_started_at"),
            event_taps=int(d.get("event_taps", base.event_taps)),
            active_misbehavior=opt_str("active_misbehavior"),
            misbehavior_at=opt_float("misbehavior_at"),
            coins=int(d.get("coins", base.coins)),
            level=int(d.get("level", base.level)),
            xp=float(d.get("xp", base.xp)),
            bond=float(d.get("bond", base.bond)),
            play_coins_this_hour=int(d.get("play_coins_this_hour", base.play_coins_this_hour)),
            play_coins_hour_start=float(d.get("play_coins_hour_start", base.play_coins_hour_start)),
        )
