import pytest

from models.evolution import EVOLUTION_TIERS, evaluate, evolution_score


@pytest.mark.parametrize("stage", ["egg", "baby"])
def test_young_pets_show_base_form(stage):
    info = evaluate("drakeling", stage, bond=100, avg_stats=100, personality="athletic")
    assert info.tier == "base"
    assert info.name == "Drakeling"


def test_ultimate_boundary_is_inclusive():
    # 70 + 100 * 0.5 = 120
    assert evaluate("meowchi", "adult", 70, 100, "lazy").tier == "ultimate"
    assert evaluate("meowchi", "adult", 69.9, 100, "lazy").tier == "great"


@pytest.mark.parametrize(
    "bond,tier",
    [(0, "base"), (34.9, "base"), (35, "good"), (69.9, "good"), (70, "great")],
)
def test_tier_thresholds(bond, tier):
    assert evaluate("puppup", "teen", bond, 0, "messy").tier == tier


def test_personality_bonus_needs_stats_above_sixty():
    assert evolution_score(0, 60, "athletic") == 30
    assert evolution_score(0, 62, "athletic") == 41
    assert evolution_score(0, 62, "lazy") == 31
    assert evolution_score(0, 62, "independent") == 41


def test_species_tables():
    info = evaluate("puppup", "senior", 100, 100, "sensitive")
    assert (info.tier, info.name, info.aura, info.label) == ("ultimate", "Aureowolf", "👑", "Legendary")
    assert evaluate("meowchi", "child", 40, 0, "lazy").name == "Whiskerion"


def test_tier_is_monotonic_in_score():
    ranks = []
    for bond in range(0, 101, 5):
        for avg in range(0, 101, 10):
            score = evolution_score(bond, avg, "athletic")
            tier = evaluate("meowchi", "adult", bond, avg, "athletic").tier
            ranks.append((score, EVOLUTION_TIERS.index(tier)))
    ranks.sort()
    assert all(a[1] <= b[1] for a, b in zip(ranks, ranks[1:]))


def test_unknown_species_raises():
    with pytest.raises(ValueError):
        evaluate("axolotl", "adult", 0, 0, "lazy")
