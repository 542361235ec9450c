# services/economy.py
"""
Economy configuration constants and small pure rules.

Provides fixed costs, rewards, XP leveling and the reward formulas used by
external sources. The minigame rewards (catch_the_star_reward,
memory_match_reward) are for minigames hosted outside the engine: they
compute (coins, xp) and the caller credits them through
PetEngine.add_coins / PetEngine.add_xp. The daily login bonus is granted
by the app on start. This module is pure Python, dependency-free, and
intended to be imported wherever economic values are needed.
"""

from datetime import date, datetime
from typing import Final, Optional, Tuple


class Economy:
    """Namespace container for game economy constants. Not meant to be instantiated."""

    # Leveling
    XP_PER_LEVEL: Final[int] = 50            # xp needed = level * XP_PER_LEVEL
    FEED_XP_DIVISOR: Final[int] = 5          # feed xp = ceil(cost / 5)
    PLAY_XP: Final[int] = 5

    # Costs (in coins)
    HEAL_COST: Final[int] = 20               # doubled for seniors
    SENIOR_HEAL_MULT: Final[int] = 2

    # Play rewards
    PLAY_COIN_MIN: Final[int] = 5
    PLAY_COIN_MAX: Final[int] = 14           # inclusive
    PLAY_COIN_CAP: Final[int] = 30           # per rolling hour window
    PLAY_WINDOW_S: Final[float] = 3600.0
    PLAY_MIN_ENERGY: Final[float] = 10.0

    # External rewards
    DAILY_BONUS: Final[int] = 50
    STAR_COINS_PER_CATCH: Final[int] = 3
    STAR_XP_PER_CATCH: Final[int] = 5
    MEMORY_BASE_COINS: Final[int] = 50
    MEMORY_MIN_COINS: Final[int] = 10
    MEMORY_XP: Final[int] = 30

    def __new__(cls, *args, **kwargs):
        raise TypeError(f"{cls.__name__} is not instantiable")


def xp_needed(level: int) -> int:
    return level * Economy.XP_PER_LEVEL


def roll_xp(xp: float, level: int, amount: float) -> Tuple[float, int]:
    """
    Add xp and apply at most one level-up.

    A single call never gains more than one level, so a very large award can
    leave xp above the next threshold until the next award.

    Returns:
        (new_xp, new_level)
    """
    new_xp = xp + amount
    needed = xp_needed(level)
    if new_xp >= needed:
        return new_xp - needed, level + 1
    return new_xp, level


def catch_the_star_reward(score: int) -> Tuple[int, int]:
    """(coins, xp) for a Catch-the-Star round with `score` catches."""
    score = max(0, int(score))
    return score * Economy.STAR_COINS_PER_CATCH, score * Economy.STAR_XP_PER_CATCH


def memory_match_reward(moves: int) -> Tuple[int, int]:
    """(coins, xp) for a finished Memory Match board; fewer moves pay more."""
    coins = max(Economy.MEMORY_MIN_COINS, Economy.MEMORY_BASE_COINS - int(moves))
    return coins, Economy.MEMORY_XP


def daily_bonus_due(last_claim: Optional[str], now: datetime) -> bool:
    """
    True if the daily bonus can be claimed.

    Args:
        last_claim: ISO date/datetime of the previous claim, or None.
        now: current local time.
    """
    if not last_claim:
        return True
    try:
        last: date = datetime.fromisoformat(last_claim).date()
    except ValueError:
        return True
    return last != now.date()
