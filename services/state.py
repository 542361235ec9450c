# services/state.py
from __future__ import annotations

import logging
import math
import random
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from models.catalog import find_food, find_store_item
from models.evolution import EvolutionInfo, evaluate
from models.events import (
    DISCIPLINE_RESPONSES,
    TAP_BOND_REWARD,
    TAP_EVENTS,
    apply_comfort,
    apply_discipline,
    apply_ignore_penalty,
    event_timed_out,
    kill,
)
from models.pet import (
    CRITICAL_EVENTS,
    DIFFICULTIES,
    MAX_POOPS,
    MISBEHAVIORS,
    NAME_MAX_LEN,
    NEED_STATS,
    PERSONALITIES,
    SPECIES,
    PetState,
    clamp_stat,
    stage_for_age,
)
from services.companion import project
from services.economy import Economy, roll_xp
from services.tuning import Tuning

logger = logging.getLogger("petpocket.engine")


class PetEngine:
    """
    Owns one PetState and every rule that mutates it.

    The engine is an ordinary object: create as many as you like and inject
    the random source and clock for deterministic runs. `rng` needs
    random(), choice() and randint(); `clock` returns epoch seconds.

    Each public call runs inside a single critical section, and observers
    registered with add_observer() are invoked after every mutation.
    Actions return True when the intent took effect and False when a game
    precondition turned them into a no-op (dead, asleep, too poor, ...).
    """

    def __init__(
        self,
        pet: Optional[PetState] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.pet = pet if pet is not None else PetState()
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock if clock is not None else time.time
        self._observers: List[Callable[[], None]] = []
        self._lock = threading.RLock()

    # --- Observers ---
    def add_observer(self, cb: Callable[[], None]) -> None:
        """Register a no-arg callback invoked after successful mutations."""
        if cb not in self._observers:
            self._observers.append(cb)

    def remove_observer(self, cb: Callable[[], None]) -> None:
        if cb in self._observers:
            self._observers.remove(cb)

    def _notify(self) -> None:
        """Invoke all registered observers; a failing one is logged and skipped."""
        for cb in list(self._observers):
            try:
                cb()
            except Exception:
                logger.exception("Observer %r failed", cb)

    # --- Snapshot contract ---
    def snapshot(self) -> Dict[str, Any]:
        """Return a full, JSON-friendly copy of the pet state."""
        with self._lock:
            return self.pet.to_dict()

    def load_snapshot(self, data: Dict[str, Any]) -> bool:
        """
        Replace the whole state with a saved snapshot.

        Snapshots that aren't marked adopted are ignored (returns False).
        """
        if not isinstance(data, dict) or not data.get("adopted"):
            return False
        pet = PetState.from_dict(data)
        with self._lock:
            self.pet = pet
        self._notify()
        return True

    # --- Queries ---
    def evolution(self) -> EvolutionInfo:
        """Current cosmetic form, recomputed on every call."""
        with self._lock:
            p = self.pet
            return evaluate(p.species, p.stage, p.bond, p.avg_stats(), p.personality)

    def companion_context(self) -> Dict[str, Any]:
        """Read-only projection handed to the conversational companion."""
        with self._lock:
            return project(self.pet)

    def memorial(self) -> Optional[Dict[str, Any]]:
        """Archive record for a dead pet, or None while it is alive."""
        with self._lock:
            p = self.pet
            if not p.is_dead:
                return None
            evo = self.evolution()
            return {
                "name": p.name,
                "species": p.species,
                "personality": p.personality,
                "death_cause": p.death_cause or "Unknown",
                "level": p.level,
                "bond": p.bond,
                "age_minutes": p.age,
                "stage": p.stage,
                "difficulty": p.difficulty,
                "evolution_tier": evo.tier,
                "evolution_name": evo.name,
            }

    # --- Lifecycle ---
    def adopt(self, name: str, species: str, difficulty: str) -> None:
        """
        Start a fresh pet. Personality and weather are rolled at random.

        Raises:
            ValueError: on an empty/too long name or unknown species/difficulty.
        """
        name = (name or "").strip()
        if not 1 <= len(name) <= NAME_MAX_LEN:
            raise ValueError(f"name must be 1-{NAME_MAX_LEN} characters.")
        if species not in SPECIES:
            raise ValueError(f"Unknown species: {species!r}")
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        with self._lock:
            now = self.clock()
            self.pet = PetState(
                name=name,
                species=species,
                difficulty=difficulty,
                stage="egg",
                personality=self.rng.choice(PERSONALITIES),
                weather=self._roll_weather(),
                weather_changed_at=now,
                created_at=now,
                last_update=now,
                play_coins_hour_start=now,
                adopted=True,
            )
            logger.info("Adopted %s the %s (%s, %s)", name, species, self.pet.personality, difficulty)
        self._notify()

    def reset(self) -> None:
        """Return to the pristine, not-yet-adopted defaults."""
        with self._lock:
            self.pet = PetState()
        self._notify()

    # --- Time-driven transition ---
    def tick(self) -> bool:
        """
        Advance the simulation to the current clock time.

        Returns False when nothing happened: not adopted, dead, or less than
        half a minute since the last update.
        """
        with self._lock:
            pet = self.pet
            if not pet.adopted or pet.is_dead:
                return False
            now = self.clock()
            elapsed = (now - pet.last_update) / 60
            if elapsed < Tuning.MIN_ELAPSED_MIN:
                logger.debug("Tick skipped, %.2f min elapsed", elapsed)
                return False

            pet.age += elapsed
            pet.stage = stage_for_age(pet.age)
            self._rotate_weather(now)
            self._decay(elapsed, self._decay_multipliers())
            self._maybe_poop(elapsed)
            self._update_sickness(elapsed, now)
            self._penalize_low_stats(elapsed)
            self._maybe_die_of_old_age(elapsed)
            if pet.health <= 0:
                kill(pet, "Health reached zero")
            self._update_event(elapsed, now)
            self._update_misbehavior(elapsed, now)
            pet.last_update = now

            if pet.is_dead:
                logger.info("%s died: %s", pet.name, pet.death_cause)
        self._notify()
        return True

    def _roll_weather(self) -> str:
        total = sum(weight for _, weight in Tuning.WEATHER_WEIGHTS)
        r = self.rng.random() * total
        for weather, weight in Tuning.WEATHER_WEIGHTS:
            r -= weight
            if r <= 0:
                return weather
        return "sunny"

    def _rotate_weather(self, now: float) -> None:
        pet = self.pet
        if (now - pet.weather_changed_at) / 60 > Tuning.WEATHER_PERIOD_MIN:
            pet.weather = self._roll_weather()
            pet.weather_changed_at = now
            logger.debug("Weather changed to %s", pet.weather)

    def _decay_multipliers(self) -> Dict[str, float]:
        pet = self.pet
        mult = {"hunger": 1.0, "happiness": 1.0, "hygiene": 1.0, "energy": 1.0}
        for stat, factor in Tuning.WEATHER_MULTIPLIERS[pet.weather].items():
            mult[stat] *= factor
        if pet.personality == "lazy":
            mult["energy"] *= Tuning.LAZY_ENERGY_MULT
        elif pet.personality == "anxious":
            mult["happiness"] *= Tuning.ANXIOUS_HAPPINESS_MULT
        elif pet.personality == "athletic" and pet.happiness > Tuning.ATHLETIC_HAPPINESS_ABOVE:
            mult["happiness"] *= Tuning.ATHLETIC_HAPPINESS_MULT
        if pet.stage == "senior":
            mult["energy"] *= Tuning.SENIOR_ENERGY_MULT
        return mult

    def _decay(self, elapsed: float, mult: Dict[str, float]) -> None:
        pet = self.pet
        if pet.is_sleeping:
            # Waking is always manual, even at full energy.
            pet.energy = clamp_stat(pet.energy + elapsed * Tuning.SLEEP_ENERGY_REGEN)
            return
        pet.hunger = clamp_stat(pet.hunger - elapsed * Tuning.HUNGER_DECAY * mult["hunger"])
        pet.happiness = clamp_stat(pet.happiness - elapsed * Tuning.HAPPINESS_DECAY * mult["happiness"])
        pet.hygiene = clamp_stat(pet.hygiene - elapsed * Tuning.HYGIENE_DECAY * mult["hygiene"])
        pet.energy = clamp_stat(pet.energy - elapsed * Tuning.ENERGY_DECAY * mult["energy"])

    def _maybe_poop(self, elapsed: float) -> None:
        pet = self.pet
        rate = Tuning.MESSY_POOP_RATE if pet.personality == "messy" else Tuning.POOP_RATE
        if self.rng.random() < elapsed * rate:
            pet.poops = min(pet.poops + 1, MAX_POOPS)
            pet.hygiene = clamp_stat(pet.hygiene - Tuning.POOP_HYGIENE_HIT)

    def _update_sickness(self, elapsed: float, now: float) -> None:
        pet = self.pet
        if not pet.is_sick and (pet.hunger < Tuning.SICK_BELOW or pet.hygiene < Tuning.SICK_BELOW):
            rate = Tuning.SENSITIVE_SICK_RATE if pet.personality == "sensitive" else Tuning.SICK_RATE
            if self.rng.random() < elapsed * rate:
                pet.is_sick = True
                pet.sick_since = now
                logger.info("%s got sick", pet.name)
        if not pet.is_sick:
            return

        drain_per_hour, window_min = Tuning.SICKNESS[pet.difficulty]
        pet.health = clamp_stat(pet.health - elapsed * drain_per_hour / 60)
        pet.hunger = clamp_stat(pet.hunger - elapsed * Tuning.SICK_HUNGER_DRAIN)
        pet.happiness = clamp_stat(pet.happiness - elapsed * Tuning.SICK_HAPPINESS_DRAIN)
        pet.hygiene = clamp_stat(pet.hygiene - elapsed * Tuning.SICK_HYGIENE_DRAIN)
        if pet.sick_since is not None and (now - pet.sick_since) / 60 > window_min:
            if pet.difficulty == "nightmare":
                kill(pet, "Died from untreated illness")
            else:
                pet.health = clamp_stat(pet.health - Tuning.UNTREATED_HEALTH_HIT)

    def _penalize_low_stats(self, elapsed: float) -> None:
        pet = self.pet
        if pet.hunger < Tuning.LOW_STAT or pet.hygiene < Tuning.LOW_STAT:
            pet.health = clamp_stat(pet.health - elapsed * Tuning.LOW_STAT_HEALTH_DRAIN)
        if pet.hunger < Tuning.CRITICAL_STAT or pet.hygiene < Tuning.CRITICAL_STAT:
            pet.health = clamp_stat(pet.health - elapsed * Tuning.CRITICAL_STAT_HEALTH_DRAIN)

    def _maybe_die_of_old_age(self, elapsed: float) -> None:
        pet = self.pet
        if pet.stage != "senior" or pet.age <= Tuning.OLD_AGE_MIN:
            return
        if self.rng.random() < elapsed * Tuning.OLD_AGE_DEATH_RATE:
            kill(pet, "Passed away peacefully of old age")

    def _update_event(self, elapsed: float, now: float) -> None:
        pet = self.pet
        if (
            pet.active_event is None
            and not pet.is_sleeping
            and not pet.is_dead
            and self.rng.random() < elapsed * Tuning.EVENT_RATE
        ):
            pet.active_event = self.rng.choice(CRITICAL_EVENTS)
            pet.event_started_at = now
            pet.event_taps = 0
            logger.info("Critical event: %s", pet.active_event)

        if pet.active_event is not None and event_timed_out(pet.active_event, pet.event_started_at, now):
            logger.info("Critical event %s timed out", pet.active_event)
            apply_ignore_penalty(pet, pet.active_event, now)
            self._clear_event()

    def _update_misbehavior(self, elapsed: float, now: float) -> None:
        pet = self.pet
        if (
            pet.active_misbehavior is None
            and pet.stage == "teen"
            and not pet.is_sleeping
            and not pet.is_dead
            and self.rng.random() < elapsed * Tuning.MISBEHAVIOR_RATE
        ):
            pet.active_misbehavior = self.rng.choice(MISBEHAVIORS)
            pet.misbehavior_at = now
            logger.info("Misbehaving: %s", pet.active_misbehavior)

        if (
            pet.active_misbehavior is not None
            and pet.misbehavior_at is not None
            and (now - pet.misbehavior_at) / 60 > Tuning.MISBEHAVIOR_TIMEOUT_MIN
        ):
            pet.active_misbehavior = None
            pet.misbehavior_at = None

    def _clear_event(self) -> None:
        self.pet.active_event = None
        self.pet.event_started_at = None
        self.pet.event_taps = 0

    def _award_xp(self, amount: float) -> None:
        pet = self.pet
        old_level = pet.level
        pet.xp, pet.level = roll_xp(pet.xp, pet.level, amount)
        if pet.level != old_level:
            logger.info("%s reached level %d", pet.name, pet.level)

    # --- Player actions ---
    def feed(self, food_id: str) -> bool:
        """
        Feed a catalog food. Returns True if the pet ate it.

        A picky eater refuses basic food: happiness drops by 5, nothing is
        charged and False is returned.
        """
        food = find_food(food_id)
        with self._lock:
            pet = self.pet
            if food is None or pet.is_dead or pet.is_sleeping or pet.coins < food.cost:
                logger.debug("Feed %r ignored", food_id)
                return False
            if pet.personality == "picky_eater" and food.quality == "basic":
                pet.happiness = clamp_stat(pet.happiness - 5)
                refused = True
            else:
                penalty = 0.5 if pet.is_sick else 1.0
                pet.hunger = clamp_stat(pet.hunger + food.hunger * penalty)
                pet.happiness = clamp_stat(pet.happiness + food.happiness * penalty)
                pet.health = clamp_stat(pet.health + food.health)
                pet.energy = clamp_stat(pet.energy - 2)
                pet.coins -= food.cost
                pet.bond = clamp_stat(pet.bond + 1)
                self._award_xp(math.ceil(food.cost / Economy.FEED_XP_DIVISOR))
                refused = False
        self._notify()
        return not refused

    def play(self) -> bool:
        """Play with the pet; earns up to 30 coins per hour from play."""
        with self._lock:
            pet = self.pet
            if pet.is_dead or pet.is_sleeping or pet.energy < Economy.PLAY_MIN_ENERGY:
                return False
            now = self.clock()
            if now - pet.play_coins_hour_start > Economy.PLAY_WINDOW_S:
                pet.play_coins_this_hour = 0
                pet.play_coins_hour_start = now
            remaining = Economy.PLAY_COIN_CAP - pet.play_coins_this_hour
            earned = 0
            if remaining > 0:
                earned = min(self.rng.randint(Economy.PLAY_COIN_MIN, Economy.PLAY_COIN_MAX), remaining)

            athletic = pet.personality == "athletic"
            pet.happiness = clamp_stat(pet.happiness + (30 if athletic else 20))
            pet.energy = clamp_stat(pet.energy - (20 if athletic else 15))
            pet.hunger = clamp_stat(pet.hunger - 5)
            pet.bond = clamp_stat(pet.bond + 2)
            pet.coins += earned
            pet.play_coins_this_hour += earned
            self._award_xp(Economy.PLAY_XP)
        self._notify()
        return True

    def clean(self) -> bool:
        """Scoop the poops and wash the pet; works while asleep."""
        with self._lock:
            pet = self.pet
            if pet.is_dead:
                return False
            pet.poops = 0
            pet.hygiene = clamp_stat(pet.hygiene + 30)
            pet.happiness = clamp_stat(pet.happiness + 5)
            pet.bond = clamp_stat(pet.bond + 1)
        self._notify()
        return True

    def sleep(self) -> bool:
        return self._set_sleeping(True)

    def wake(self) -> bool:
        return self._set_sleeping(False)

    def _set_sleeping(self, asleep: bool) -> bool:
        with self._lock:
            pet = self.pet
            if pet.is_dead or pet.is_sleeping == asleep:
                return False
            pet.is_sleeping = asleep
        self._notify()
        return True

    def heal(self) -> bool:
        """Give medicine: +40 health, -10 happiness, cures sickness."""
        with self._lock:
            pet = self.pet
            cost = Economy.HEAL_COST * (Economy.SENIOR_HEAL_MULT if pet.stage == "senior" else 1)
            if pet.is_dead or pet.coins < cost:
                return False
            pet.coins -= cost
            pet.health = clamp_stat(pet.health + 40)
            pet.happiness = clamp_stat(pet.happiness - 10)
            pet.is_sick = False
            pet.sick_since = None
        self._notify()
        return True

    # --- Critical events ---
    def tap_event(self) -> bool:
        """Count one tap on a choking/escaped event; enough taps rescue the pet."""
        with self._lock:
            pet = self.pet
            if pet.is_dead or pet.active_event not in TAP_EVENTS:
                return False
            pet.event_taps += 1
            if pet.event_taps >= TAP_EVENTS[pet.active_event]:
                logger.info("Critical event %s resolved by tapping", pet.active_event)
                self._clear_event()
                pet.bond = clamp_stat(pet.bond + TAP_BOND_REWARD)
        self._notify()
        return True

    def resolve_event(self) -> bool:
        """
        Comfort the pet through a nightmare, tantrum or fever.

        Tap events must be tapped out; a fever without 30 coins stays active.
        """
        with self._lock:
            pet = self.pet
            event = pet.active_event
            if pet.is_dead or event is None or event in TAP_EVENTS:
                return False
            if not apply_comfort(pet, event):
                return False
            self._clear_event()
        self._notify()
        return True

    def dismiss_event(self) -> bool:
        """Ignore the active event and take the same penalty as a timeout."""
        with self._lock:
            pet = self.pet
            event = pet.active_event
            if pet.is_dead or event is None:
                return False
            apply_ignore_penalty(pet, event, self.clock())
            self._clear_event()
            if pet.is_dead:
                logger.info("%s died: %s", pet.name, pet.death_cause)
        self._notify()
        return True

    def discipline(self, response: str) -> bool:
        """Answer the active misbehavior with 'scold', 'praise' or 'ignore'."""
        with self._lock:
            pet = self.pet
            misbehavior = pet.active_misbehavior
            if pet.is_dead or misbehavior is None or response not in DISCIPLINE_RESPONSES:
                return False
            outcome = apply_discipline(pet, misbehavior, response)
            logger.debug("Discipline %s for %s: %s", response, misbehavior, outcome)
            pet.active_misbehavior = None
            pet.misbehavior_at = None
        self._notify()
        return True

    # --- Economy primitives for external reward sources ---
    def add_coins(self, amount: int) -> bool:
        """Credit coins unconditionally (minigames, daily bonus)."""
        if not isinstance(amount, int) or amount < 0:
            raise ValueError("amount must be a non-negative int.")
        with self._lock:
            if self.pet.is_dead:
                return False
            self.pet.coins += amount
        self._notify()
        return True

    def add_xp(self, amount: float) -> bool:
        """Credit xp with the same single-step level rollover as feed/play."""
        if not isinstance(amount, (int, float)) or amount < 0:
            raise ValueError("amount must be a non-negative number.")
        with self._lock:
            if self.pet.is_dead:
                return False
            self._award_xp(amount)
        self._notify()
        return True

    def spend_coins(self, amount: int) -> bool:
        """Atomically debit coins; False (and no change) if there aren't enough."""
        if not isinstance(amount, int) or amount < 0:
            raise ValueError("amount must be a non-negative int.")
        with self._lock:
            if self.pet.is_dead or self.pet.coins < amount:
                return False
            self.pet.coins -= amount
        self._notify()
        return True

    def boost_stat(self, stat: str, value: float) -> bool:
        """Add `value` to one need, clamped to [0, 100]."""
        if stat not in NEED_STATS:
            raise ValueError(f"Unknown stat: {stat!r}")
        with self._lock:
            if self.pet.is_dead:
                return False
            setattr(self.pet, stat, clamp_stat(getattr(self.pet, stat) + value))
        self._notify()
        return True

    def use_item(self, item_id: str) -> bool:
        """Apply a purchased store item's effect. Unknown ids are ignored."""
        item = find_store_item(item_id)
        if item is None:
            return False
        return self.boost_stat(item.stat, item.value)
