from datetime import datetime

import pytest

from services.economy import (
    Economy,
    catch_the_star_reward,
    daily_bonus_due,
    memory_match_reward,
    roll_xp,
    xp_needed,
)
from services.tuning import Session, Tuning

def test_namespaces_are_not_instantiable():
    for cls in (Economy, Tuning, Session):
        with pytest.raises(TypeError):
            cls()

def test_xp_needed_scales_with_level():
    assert xp_needed(1) == 50
    assert xp_needed(4) == 200

@pytest.mark.parametrize(
    "xp,level,amount,expected",
    [
        (0, 1, 49, (49, 1)),
        (0, 1, 50, (0, 2)),
        (40, 2, 70, (10, 3)),
        (0, 1, 1000, (950, 2)),
    ],
)
def test_roll_xp(xp, level, amount, expected):
    assert roll_xp(xp, level, amount) == expected

def test_catch_the_star_reward():
    assert catch_the_star_reward(12) == (36, 60)
    assert catch_the_star_reward(0) == (0, 0)
    assert catch_the_star_reward(-3) == (0, 0)

@pytest.mark.parametrize("moves,coins", [(8, 42), (40, 10), (45, 10), (0, 50)])
def test_memory_match_reward(moves, coins):
    assert memory_match_reward(moves) == (coins, 30)

def test_daily_bonus_once_per_calendar_day():
    now = datetime(2024, 5, 2, 9, 30)
    assert daily_bonus_due(None, now)
    assert daily_bonus_due("", now)
    assert daily_bonus_due("2024-05-01T23:59:00", now)
    assert not daily_bonus_due("2024-05-02T00:01:00", now)
    assert not daily_bonus_due("2024-05-02", now)

def test_garbled_daily_bonus_claim_counts_as_unclaimed():
    assert daily_bonus_due("yesterday-ish", datetime(2024, 5, 2))


def test_xp_needed_follows_the_per_level_constant(monkeypatch):
    monkeypatch.setattr(Economy, "XP_PER_LEVEL", 80)
    assert xp_needed(3) == 240
    assert roll_xp(70, 1, 10) == (0, 2)


def test_minigame_reward_is_credited_through_the_engine(make_engine):
    eng = make_engine()
    coins, xp = catch_the_star_reward(12)
    assert eng.add_coins(coins) is True
    assert eng.add_xp(xp) is True
    assert eng.pet.coins == 50 + 36
    assert eng.pet.level == 2
    assert eng.pet.xp == 10

    coins, xp = memory_match_reward(20)
    eng.add_coins(coins)
    eng.add_xp(xp)
    assert eng.pet.coins == 50 + 36 + 30
    assert eng.pet.xp == 40
