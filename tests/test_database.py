from __future__ import annotations

import json

import pytest

from acbridge.models import DeviceProfile, FanSpeed, LogicalState, Mode, RecordedCode
from acbridge.storage import Database


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "data")
    database.init()
    return database


def test_init_creates_files_once(tmp_path):
    """Test init creates files once."""
    db = Database(tmp_path / "data")

    assert db.init() is True
    assert db.devices_path.exists()
    assert json.loads(db.states_path.read_text()) == {}
    assert db.init() is False
    assert db.init(force=True) is True


def test_missing_files_read_as_empty(tmp_path):
    """Test missing files read as empty."""
    db = Database(tmp_path / "nowhere")

    assert db.load_devices().devices == {}
    assert db.load_states() == {}
    assert db.get_profile("living") is None


def test_add_device_creates_default_state(db, living_room):
    """Test add device creates default state."""
    assert db.add_device("living", living_room) is True
    assert db.add_device("living", living_room) is False

    assert db.get_profile("living") == living_room
    state = db.get_state("living")
    assert state.power is False
    assert state.mode is Mode.AUTO
    assert state.temperature == 22
    assert db.available_devices() == ["living"]


def test_add_device_keeps_existing_state(db, living_room, fixed_now):
    """Test add device keeps existing state."""
    db.add_device("living", living_room)
    state = LogicalState(
        power=True, mode=Mode.HEAT, temperature=26, last_updated=fixed_now
    )
    db.put_state("living", state)

    renamed = living_room.model_copy(update={"friendly_name": "Lounge"})
    db.add_device("living", renamed)

    assert db.get_state("living") == state
    assert db.get_profile("living").friendly_name == "Lounge"


def test_devices_file_is_readable_yaml(db, living_room):
    """Test devices file is readable YAML."""
    db.add_device("living", living_room)

    text = db.devices_path.read_text()

    assert text.startswith("# acbridge device registry")
    assert "friendly_name: Living Room AC" in text
    assert "C22A" in text


def test_state_roundtrip(db, living_room, fixed_now):
    """Test state roundtrip."""
    db.add_device("living", living_room)
    state = LogicalState(
        power=True,
        mode=Mode.COOL,
        fan_speed=FanSpeed.HIGH,
        temperature=19,
        last_updated=fixed_now,
    )

    db.put_state("living", state)

    assert Database(db.path).get_state("living") == state


def test_add_code_replaces_same_combination(db, living_room):
    """Test add code replaces same combination."""
    db.add_device("living", living_room)
    count = len(living_room.codes)
    replacement = RecordedCode(
        power=True, mode=Mode.COOL, fan_speed=FanSpeed.AUTO, temperature=22, code="NEW"
    )

    assert db.add_code("living", replacement) is True

    codes = db.get_profile("living").codes
    assert len(codes) == count
    assert codes[1].code == "NEW"


def test_add_code_appends_new_combination(db, living_room):
    """Test add code appends new combination."""
    db.add_device("living", living_room)
    recorded = RecordedCode(
        power=True, mode=Mode.HEAT, fan_speed=FanSpeed.AUTO, temperature=28, code="H28A"
    )

    assert db.add_code("living", recorded) is False
    assert db.get_profile("living").codes[-1] == recorded


def test_add_code_unknown_device(db):
    """Test add code unknown device."""
    with pytest.raises(KeyError):
        db.add_code("attic", RecordedCode(power=False, code="OFF"))


def test_remove_code(db, living_room):
    """Test remove code by index."""
    db.add_device("living", living_room)

    removed = db.remove_code("living", 0)

    assert removed.code == "OFF1"
    assert all(code.power for code in db.get_profile("living").codes)
    with pytest.raises(IndexError):
        db.remove_code("living", 99)


def test_remove_device_drops_state(db, living_room):
    """Test remove device drops state."""
    db.add_device("living", living_room)

    assert db.remove_device("living") is True
    assert db.remove_device("living") is False
    assert db.get_state("living") is None
    assert db.available_devices() == []


def test_available_devices_requires_state(db, living_room):
    """Test available devices requires state."""
    db.add_device("living", living_room)
    db.save_states({})

    assert db.available_devices() == []


def test_invalid_yaml_raises_value_error(db):
    """Test invalid YAML raises value error."""
    db.devices_path.write_text("devices: [unclosed\n")

    with pytest.raises(ValueError, match="Invalid YAML"):
        db.load_devices()


def test_invalid_device_entry_raises_value_error(db):
    """Test invalid device entry raises value error."""
    db.devices_path.write_text("devices:\n  living:\n    friendly_name: Living\n")

    with pytest.raises(ValueError, match="Invalid devices file"):
        db.load_devices()


def test_invalid_json_raises_value_error(db):
    """Test invalid JSON raises value error."""
    db.states_path.write_text("{not json")

    with pytest.raises(ValueError, match="Invalid JSON"):
        db.load_states()


def test_duplicate_supported_modes_are_collapsed():
    """Test duplicate supported modes are collapsed."""
    profile = DeviceProfile(
        friendly_name="Den",
        ir_device_topic="ir_den",
        supported_modes=[Mode.COOL, Mode.COOL, Mode.DRY],
    )
    assert profile.supported_modes == [Mode.COOL, Mode.DRY]
