import json
import os

import pytest

from models.pet import PetState
from services.persistence import Persistence
from services.state import PetEngine
from services.tuning import Session


@pytest.fixture
def store(tmp_path):
    return Persistence(str(tmp_path))


def test_save_and_load_round_trip(store, make_engine, tmp_path):
    eng = make_engine(coins=123, bond=7.5, poops=2)
    assert store.save(eng) is True
    assert (tmp_path / Session.SAVE_FILE).exists()

    restored = PetEngine()
    assert store.load(restored) is True
    assert restored.pet == eng.pet


def test_save_leaves_no_temp_files(store, make_engine, tmp_path):
    store.save(make_engine())
    store.save(make_engine(coins=1))
    assert sorted(os.listdir(tmp_path)) == [Session.SAVE_FILE]


def test_unadopted_pet_is_not_saved(store, tmp_path):
    assert store.save(PetEngine()) is False
    assert not (tmp_path / Session.SAVE_FILE).exists()


def test_load_without_a_save(store):
    eng = PetEngine()
    assert store.load(eng) is False
    assert eng.pet == PetState()


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2, 3]",
        json.dumps({"adopted": False, "name": "Ghost"}),
        json.dumps({"adopted": True, "species": "unicorn"}),
    ],
)
def test_bad_saves_leave_the_engine_alone(store, tmp_path, make_engine, content):
    (tmp_path / Session.SAVE_FILE).write_text(content, encoding="utf-8")
    eng = make_engine(coins=9)
    before = eng.snapshot()
    assert store.load(eng) is False
    assert eng.snapshot() == before


def test_partial_save_fills_defaults(store, tmp_path):
    (tmp_path / Session.SAVE_FILE).write_text(
        json.dumps({"adopted": True, "name": "Pip", "species": "drakeling"}), encoding="utf-8"
    )
    eng = PetEngine()
    assert store.load(eng) is True
    assert eng.pet.name == "Pip"
    assert eng.pet.coins == 50
    assert eng.pet.hunger == 80


def test_memorials_accumulate(store, make_engine):
    assert store.load_memorials() == []
    first = make_engine(name="Pip", is_dead=True, death_cause="Choked").memorial()
    second = make_engine(name="Bean", is_dead=True, death_cause="Health reached zero").memorial()
    assert store.archive_memorial(first)
    assert store.archive_memorial(second)
    names = [m["name"] for m in store.load_memorials()]
    assert names == ["Pip", "Bean"]


def test_profile_round_trip(store):
    assert store.load_profile() == {}
    profile = {"last_daily_bonus": "2024-05-02T09:30:00", "inventory": {"vitamins": 2}}
    assert store.save_profile(profile)
    assert store.load_profile() == profile


def test_unwritable_directory_reports_failure(tmp_path, make_engine):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = Persistence(str(blocker / "nested"))
    assert store.save(make_engine()) is False


def test_unreadable_directory_reports_nothing_saved(tmp_path, make_engine):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = Persistence(str(blocker / "nested"))
    eng = make_engine(coins=9)
    before = eng.snapshot()
    assert store.load(eng) is False
    assert eng.snapshot() == before
    assert store.load_memorials() == []
    assert store.load_profile() == {}
