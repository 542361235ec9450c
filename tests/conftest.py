import os
import tempfile

# Kivy parses sys.argv and writes its config on import; keep it away from
# pytest's arguments and the user's home directory.
os.environ.setdefault("KIVY_NO_ARGS", "1")
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")
os.environ.setdefault("KIVY_HOME", tempfile.mkdtemp(prefix="kivy-home-"))

import pytest

from models.pet import PetState, stage_for_age
from services.state import PetEngine

START = 1_700_000_000.0


class FakeClock:
    """Callable clock returning a settable epoch time in seconds."""

    def __init__(self, now: float = START) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, minutes: float = 0.0, seconds: float = 0.0) -> None:
        self.now += minutes * 60 + seconds


class ScriptedRandom:
    """
    Random source with scripted draws.

    random() pops from `values` and falls back to `default` (0.999, so no
    Bernoulli draw fires). choice() pops from `picks` or returns the first
    element; randint() pops from `ints` or returns the lower bound.
    """

    def __init__(self, values=(), default=0.999, picks=(), ints=()):
        self.values = list(values)
        self.default = default
        self.picks = list(picks)
        self.ints = list(ints)

    def random(self) -> float:
        return self.values.pop(0) if self.values else self.default

    def choice(self, seq):
        if self.picks:
            pick = self.picks.pop(0)
            assert pick in seq
            return pick
        return seq[0]

    def randint(self, a: int, b: int) -> int:
        return self.ints.pop(0) if self.ints else a


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return ScriptedRandom()


@pytest.fixture
def make_engine(clock, rng):
    """Build an engine around an adopted pet; keyword args override PetState fields."""

    def _make(**overrides) -> PetEngine:
        fields = dict(
            name="Mochi",
            species="meowchi",
            personality="independent",
            difficulty="normal",
            weather="sunny",
            adopted=True,
            created_at=clock.now,
            last_update=clock.now,
            weather_changed_at=clock.now,
            play_coins_hour_start=clock.now,
        )
        fields.update(overrides)
        fields.setdefault("stage", stage_for_age(fields.get("age", 0.0)))
        return PetEngine(PetState(**fields), rng=rng, clock=clock)

    return _make
