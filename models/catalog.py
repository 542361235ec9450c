# models/catalog.py
"""
Static lookup tables: foods, store items and display info for the enums.

Pure data, no game state. Items are frozen dataclasses so callers can't
mutate the shared catalog by accident.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class FoodItem:
    """A food the pet can be fed; quality 'basic' is refused by picky eaters."""
    id: str
    emoji: str
    name: str
    hunger: int
    happiness: int
    health: int
    cost: int
    quality: str


@dataclass(frozen=True)
class StoreItem:
    """An inventory item; using it adds `value` to the pet's `stat`."""
    id: str
    emoji: str
    name: str
    desc: str
    cost: int
    stat: str
    value: int


FOOD_ITEMS: List[FoodItem] = [
    FoodItem("bread", "🍞", "Bread", hunger=10, happiness=0, health=0, cost=3, quality="basic"),
    FoodItem("milk", "🥛", "Milk", hunger=15, happiness=5, health=0, cost=4, quality="basic"),
    FoodItem("apple", "🍎", "Apple", hunger=20, happiness=0, health=5, cost=5, quality="basic"),
    FoodItem("burger", "🍔", "Burger", hunger=40, happiness=10, health=0, cost=15, quality="premium"),
    FoodItem("pizza", "🍕", "Pizza", hunger=50, happiness=15, health=0, cost=25, quality="premium"),
    FoodItem("cake", "🍰", "Cake", hunger=30, happiness=30, health=0, cost=30, quality="premium"),
    FoodItem("sushi", "🍣", "Sushi", hunger=60, happiness=20, health=5, cost=50, quality="premium"),
    FoodItem("candy", "🍬", "Candy", hunger=5, happiness=15, health=-5, cost=6, quality="basic"),
    FoodItem("steak", "🥩", "Steak", hunger=70, happiness=25, health=10, cost=80, quality="premium"),
    FoodItem("salad", "🥗", "Salad", hunger=25, happiness=5, health=15, cost=10, quality="premium"),
]

STORE_ITEMS: List[StoreItem] = [
    StoreItem("toy_ball", "⚽", "Toy Ball", "+25 happiness", cost=30, stat="happiness", value=25),
    StoreItem("premium_bed", "🛏️", "Premium Bed", "+40 energy", cost=50, stat="energy", value=40),
    StoreItem("vitamins", "💊", "Vitamins", "+30 health", cost=40, stat="health", value=30),
    StoreItem("luxury_shampoo", "🧴", "Luxury Shampoo", "+35 hygiene", cost=35, stat="hygiene", value=35),
    StoreItem("treat_bag", "🎒", "Treat Bag", "+50 hunger", cost=45, stat="hunger", value=50),
    StoreItem("energy_drink", "⚡", "Energy Drink", "+50 energy", cost=60, stat="energy", value=50),
]

SPECIES_INFO: Dict[str, Dict[str, str]] = {
    "meowchi": {"emoji": "🐱", "name": "Meowchi"},
    "puppup": {"emoji": "🐶", "name": "Puppup"},
    "drakeling": {"emoji": "🐉", "name": "Drakeling"},
}

PERSONALITY_INFO: Dict[str, Dict[str, str]] = {
    "lazy": {"emoji": "😴", "name": "Lazy", "desc": "Energy drains 50% faster"},
    "picky_eater": {"emoji": "🤢", "name": "Picky Eater", "desc": "Rejects basic food"},
    "messy": {"emoji": "💩", "name": "Messy", "desc": "Poops 50% more"},
    "anxious": {"emoji": "😰", "name": "Anxious", "desc": "Happiness drops 30% faster"},
    "athletic": {"emoji": "🏃", "name": "Athletic", "desc": "Needs more playtime"},
    "sensitive": {"emoji": "🤧", "name": "Sensitive", "desc": "Gets sick easier"},
    "independent": {"emoji": "😎", "name": "Independent", "desc": "Doesn't call for help"},
}

WEATHER_INFO: Dict[str, Dict[str, str]] = {
    "sunny": {"emoji": "☀️", "name": "Sunny", "effect": "Happiness decays slower"},
    "rainy": {"emoji": "🌧️", "name": "Rainy", "effect": "Pet gets sad faster"},
    "cold": {"emoji": "❄️", "name": "Cold", "effect": "Hunger increases faster"},
    "hot": {"emoji": "🔥", "name": "Hot", "effect": "Hygiene drops faster"},
    "storm": {"emoji": "🌪️", "name": "Storm", "effect": "All stats decay 2x for 1hr!"},
}

CRITICAL_EVENT_INFO: Dict[str, Dict[str, str]] = {
    "choking": {"emoji": "🚨", "name": "CHOKING!", "instruction": "Tap rapidly to save!"},
    "escaped": {"emoji": "🏃", "name": "ESCAPED!", "instruction": "Tap to search! Find within 10 min!"},
    "nightmare": {"emoji": "😱", "name": "NIGHTMARE!", "instruction": "Comfort immediately!"},
    "tantrum": {"emoji": "😤", "name": "TANTRUM!", "instruction": "Calm down or happiness crashes!"},
    "fever": {"emoji": "🤒", "name": "FEVER!", "instruction": "Medicine + ice pack needed NOW!"},
}

MISBEHAVIOR_INFO: Dict[str, Dict[str, str]] = {
    "refuses_eat": {"emoji": "🚫🍔", "desc": "Refuses to eat!", "correct_response": "scold"},
    "throws_toys": {"emoji": "🧸💥", "desc": "Throwing toys everywhere!", "correct_response": "scold"},
    "runs_around": {"emoji": "🏃💨", "desc": "Won't stay still for cleaning!", "correct_response": "praise"},
    "wont_sleep": {"emoji": "😤💤", "desc": "Won't go to sleep!", "correct_response": "praise"},
}

_FOODS_BY_ID = {f.id: f for f in FOOD_ITEMS}
_STORE_BY_ID = {s.id: s for s in STORE_ITEMS}


def find_food(food_id: str) -> Optional[FoodItem]:
    return _FOODS_BY_ID.get(food_id)


def find_store_item(item_id: str) -> Optional[StoreItem]:
    return _STORE_BY_ID.get(item_id)
