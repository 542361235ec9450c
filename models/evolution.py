# models/evolution.py
from dataclasses import dataclass
from typing import Dict

from models.pet import PERSONALITIES, SPECIES, STAGES


EVOLUTION_TIERS = ("base", "good", "great", "ultimate")
TIER_LABELS = {"base": "Base", "good": "Evolved", "great": "Rare", "ultimate": "Legendary"}

# Minimum score for each tier, highest first.
TIER_THRESHOLDS = (("ultimate", 120.0), ("great", 70.0), ("good", 35.0))
BONUS_PERSONALITIES = frozenset({"athletic", "sensitive", "independent"})
PERSONALITY_BONUS = 10.0
BONUS_MIN_AVG_STATS = 60.0


@dataclass(frozen=True)
class EvolutionInfo:
    """Cosmetic form shown for a pet; never persisted."""
    tier: str
    name: str
    emoji: str
    aura: str
    requirement: str

    @property
    def label(self) -> str:
        return TIER_LABELS[self.tier]


def _forms(names, emojis, auras) -> Dict[str, EvolutionInfo]:
    requirements = (
        "Starting form",
        "Bond 20+ & decent care",
        "Bond 50+ & great care",
        "Bond 80+ & perfect care",
    )
    return {
        tier: EvolutionInfo(tier, name, emoji, aura, req)
        for tier, name, emoji, aura, req in zip(EVOLUTION_TIERS, names, emojis, auras, requirements)
    }


EVOLUTION_DATA: Dict[str, Dict[str, EvolutionInfo]] = {
    "meowchi": _forms(
        ("Meowchi", "Whiskerion", "Felionix", "Celesticat"),
        ("🐱", "😺", "🦁", "🐈‍⬛"),
        ("", "✨", "🔥", "👑"),
    ),
    "puppup": _forms(
        ("Puppup", "Barknight", "Howlstorm", "Aureowolf"),
        ("🐶", "🐕", "🐺", "🦊"),
        ("", "✨", "⚡", "👑"),
    ),
    "drakeling": _forms(
        ("Drakeling", "Wyvernscale", "Infernax", "Celestidrake"),
        ("🐉", "🐲", "🔥", "🌟"),
        ("", "✨", "💎", "👑"),
    ),
}


def evolution_score(bond: float, avg_stats: float, personality: str) -> float:
    """
    Score = bond + avg_stats * 0.5 + personality bonus.

    The bonus (10) applies to athletic, sensitive and independent pets
    whose average stats are above 60.
    """
    bonus = PERSONALITY_BONUS if personality in BONUS_PERSONALITIES and avg_stats > BONUS_MIN_AVG_STATS else 0.0
    return bond + avg_stats * 0.5 + bonus


def tier_for_score(score: float) -> str:
    for tier, minimum in TIER_THRESHOLDS:
        if score >= minimum:
            return tier
    return "base"


def evaluate(species: str, stage: str, bond: float, avg_stats: float, personality: str) -> EvolutionInfo:
    """
    Compute the display form for a pet.

    Eggs and babies always show the species' base form.
    """
    if species not in SPECIES:
        raise ValueError(f"Unknown species: {species!r}")
    if stage not in STAGES:
        raise ValueError(f"Unknown stage: {stage!r}")
    if personality not in PERSONALITIES:
        raise ValueError(f"Unknown personality: {personality!r}")
    forms = EVOLUTION_DATA[species]
    if stage in ("egg", "baby"):
        return forms["base"]
    return forms[tier_for_score(evolution_score(bond, avg_stats, personality))]
