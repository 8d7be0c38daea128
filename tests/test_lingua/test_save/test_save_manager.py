import json
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from narrative.core.events import SaveEvent
from lingua.components.progress import GameState
from lingua.save.manager import SaveManager


class FakeClock:
    """Returns a later time on every call."""

    def __init__(self, start=datetime(2024, 3, 5, 14, 0, 0)):
        self.now = start

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def saves(config, event_bus):
    return SaveManager(config, event_bus, clock=FakeClock())


@pytest.fixture
def state():
    return GameState(
        player_name="Anna",
        completed_dialogues=["base.intro"],
        unlocked_words=["dopis"],
        puzzle_attempts={"base.letterman.quiz": ["0", "1"]},
    )


def test_save_and_load_round_trip(saves, state):
    slot = saves.save(state, slot=2, scene="VillaOutside")
    assert slot == 2

    loaded = saves.load(2)
    assert loaded is not None
    assert loaded.player_name == "Anna"
    assert loaded.save_slot == 2
    assert loaded.current_scene == "VillaOutside"
    assert loaded.completed_dialogues == ["base.intro"]
    assert loaded.puzzle_attempts == {"base.letterman.quiz": ["0", "1"]}
    assert loaded.last_saved == "2024-03-05T14:01:00"


def test_file_is_flat_readable_json(saves, state, config):
    saves.save(state, slot=1)
    path = saves.save_path / "save_slot1.json"

    text = path.read_text(encoding="utf-8")
    document = json.loads(text)
    assert "\n  " in text
    assert document["playerName"] == "Anna"
    assert document["unlockedVocabularyTokens"] == ["dopis"]
    assert "checksum" in document


def test_auto_slot_picks_first_empty(saves, state):
    for slot in (1, 2, 3):
        saves.save(state, slot=slot)

    assert saves.save(state) == 4
    assert saves.exists(4)


def test_auto_slot_overwrites_last_when_full(saves, state):
    for slot in range(1, 9):
        saves.save(GameState(player_name=f"p{slot}"), slot=slot)

    assert saves.save(state) == 8
    assert saves.load(8).player_name == "Anna"
    assert saves.load(7).player_name == "p7"


def test_load_missing_slot_returns_none(saves):
    assert saves.load(5) is None


def test_checksum_mismatch(saves, state, event_bus):
    failed = MagicMock()
    event_bus.subscribe(SaveEvent.LOAD_FAILED, failed, weak=False)

    saves.save(state, slot=1)
    path = saves.save_path / "save_slot1.json"
    document = json.loads(path.read_text(encoding="utf-8"))
    document["playerName"] = "Cheater"
    path.write_text(json.dumps(document), encoding="utf-8")

    assert not saves.validate_save(1)
    assert saves.load(1) is None
    failed.assert_called_once()

    # Validation can be skipped explicitly
    assert saves.load(1, validate=False).player_name == "Cheater"


def test_corrupt_file(saves):
    (saves.save_path / "save_slot3.json").write_text("{broken", encoding="utf-8")
    assert saves.load(3) is None
    assert not saves.validate_save(3)
    assert saves.list_slots()[3] is None


def test_non_object_file(saves, event_bus, caplog):
    failed = MagicMock()
    event_bus.subscribe(SaveEvent.LOAD_FAILED, failed, weak=False)
    (saves.save_path / "save_slot1.json").write_text('["not", "a", "state"]', encoding="utf-8")

    assert saves.load(1) is None
    assert "is not a JSON object" in caplog.text
    failed.assert_called_once()
    assert not saves.validate_save(1)


def test_delete(saves, state, event_bus):
    deleted = MagicMock()
    event_bus.subscribe(SaveEvent.DELETED, deleted, weak=False)

    saves.save(state, slot=1)
    assert saves.delete(1)
    assert not saves.exists(1)
    assert not saves.delete(1)
    deleted.assert_called_once()


def test_list_slots_and_latest(saves, state):
    saves.save(state, slot=3)
    saves.save(GameState(player_name="Petr"), slot=1)

    slots = saves.list_slots()
    assert list(slots) == list(range(1, 9))
    assert slots[3].player_name == "Anna"
    assert slots[3].scene == "Base"
    assert slots[1].player_name == "Petr"
    assert slots[2] is None

    # slot 1 was written last
    assert saves.latest_slot() == 1


def test_latest_slot_when_empty(saves):
    assert saves.latest_slot() is None


def test_save_completed_event(saves, state, event_bus):
    completed = MagicMock()
    event_bus.subscribe(SaveEvent.SAVE_COMPLETED, completed, weak=False)

    saves.save(state, slot=6)

    completed.assert_called_once()
    assert completed.call_args[0][0].data == {"slot": 6}
