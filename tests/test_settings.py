import io
import json

import pytest

from duelsim.core.logging import Logger, logger
from duelsim.system.settings import Settings, SettingsData


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.set_level("INFO")


def test_defaults_when_file_missing(tmp_path):
    s = Settings.load(tmp_path / "settings.json")
    assert s.data == SettingsData()
    assert s.data.max_turns == 100


def test_save_and_reload(tmp_path):
    path = tmp_path / "settings.json"
    s = Settings.load(path)
    s.data.default_seed = 99
    s.data.hp_bar_width = 30
    s.save()
    again = Settings.load(path)
    assert again.data.default_seed == 99
    assert again.data.hp_bar_width == 30


def test_missing_fields_backfilled_and_bad_values_normalized(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log_level": "LOUD", "max_turns": -3, "legacy_option": True}))
    s = Settings.load(path)
    assert s.data.log_level == "INFO"
    assert s.data.max_turns == 100
    assert s.data.hp_bar_width == 20


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{oops")
    assert Settings.load(path).data == SettingsData()


def test_debug_forces_debug_level(tmp_path):
    s = Settings(SettingsData(log_level="WARN", debug=True), tmp_path / "s.json")
    s.apply()
    assert logger.is_enabled("DEBUG")


def test_update_notifies_and_persists(tmp_path):
    path = tmp_path / "s.json"
    s = Settings.load(path)
    seen = []
    s.on_change(lambda data: seen.append(data.log_level))
    s.update(log_level="ERROR")
    assert seen == ["ERROR"]
    assert not logger.is_enabled("WARN")
    assert json.loads(path.read_text())["log_level"] == "ERROR"
    with pytest.raises(AttributeError):
        s.update(volume=3)


def test_logger_threshold_and_extras():
    out = io.StringIO()
    log = Logger("INFO", stream=out)
    log.debug("Hidden")
    log.info("TurnResolved", turn=3, hp0=12)
    text = out.getvalue()
    assert "Hidden" not in text
    assert "[INFO] TurnResolved turn=3 hp0=12" in text
