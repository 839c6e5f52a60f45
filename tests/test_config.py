import json

import pytest

from mallowkit.config import (
    DEFAULT_CONFIG,
    DEFAULT_LOGGER_PORT,
    ConfigBase,
    ConfigError,
    ConfigManager,
)
from mallowkit.sinks import LogSink, add_log_sink, remove_log_sink


class _Capture(LogSink):
    def __init__(self):
        self.lines = []

    def log(self, fmt, *args):
        self.lines.append(fmt % args if args else fmt)

    def log_line(self, fmt="", *args):
        self.lines.append(fmt % args if args else fmt)

    def log_buffer_hex(self, buffer):
        self.lines.append(bytes(buffer).hex())


@pytest.fixture
def capture():
    sink = _Capture()
    add_log_sink(sink)
    yield sink
    remove_log_sink(sink)


def _manager(tmp_path, **kwargs):
    return ConfigManager(tmp_path / "mallow.json", tmp_path / "emu.json", **kwargs)


def test_calc_path_chooses_by_emulator(tmp_path):
    normal = _manager(tmp_path, emulator_check=lambda: False)
    emu = _manager(tmp_path, emulator_check=lambda: True)
    assert normal.calc_path() == str(tmp_path / "mallow.json")
    assert emu.calc_path() == str(tmp_path / "emu.json")


def test_calc_path_without_emu_path_falls_back(tmp_path):
    manager = ConfigManager(tmp_path / "a.json", None, emulator_check=lambda: True)
    assert manager.calc_path() == str(tmp_path / "a.json")


def test_json_empty_when_not_loaded(tmp_path):
    manager = _manager(tmp_path)
    assert manager.is_loaded() is False
    assert manager.json() == {}


def test_load_valid_file(tmp_path, capture):
    content = {"logger": {"enable": True, "port": 1234}}
    (tmp_path / "mallow.json").write_text(json.dumps(content))
    manager = _manager(tmp_path)
    assert manager.load() is True
    assert manager.is_loaded() is True
    assert manager.json() == content
    assert "Config loaded" in capture.lines


def test_load_missing_file_creates_it_and_fails(tmp_path):
    manager = _manager(tmp_path)
    assert manager.load() is False
    assert (tmp_path / "mallow.json").read_text() == ""
    assert manager.is_loaded() is False


def test_failed_load_needs_retry(tmp_path):
    manager = _manager(tmp_path)
    assert manager.load() is False
    (tmp_path / "mallow.json").write_text('{"a": 1}')
    assert manager.load(False) is False
    assert manager.load(True) is True
    assert manager.json() == {"a": 1}


def test_load_invalid_json(tmp_path, capture):
    (tmp_path / "mallow.json").write_text("{not json")
    manager = _manager(tmp_path)
    assert manager.load(True) is False
    assert "Failed to parse config file" in capture.lines


def test_load_in_missing_directory_fails(tmp_path, capture):
    manager = ConfigManager(tmp_path / "nope" / "mallow.json", None)
    assert manager.load(True) is False
    assert "Failed to open config file" in capture.lines


def test_use_default(tmp_path):
    manager = _manager(tmp_path)
    assert manager.use_default() is True
    assert manager.is_loaded() is True
    assert manager.json() == json.loads(DEFAULT_CONFIG)
    assert manager.json()["logger"]["ip"] == "192.168.1.110"


def test_use_default_invalid_raises(tmp_path):
    manager = _manager(tmp_path, default_config="{broken")
    with pytest.raises(ConfigError):
        manager.use_default()
    assert manager.is_loaded() is False


def test_save_and_reload_round_trip(tmp_path):
    manager = _manager(tmp_path)
    manager.use_default()
    manager.save()
    text = (tmp_path / "mallow.json").read_text()
    assert text.startswith('{\n  "logger"')
    other = _manager(tmp_path)
    assert other.load(True) is True
    assert other.json() == manager.json()


def test_save_to_missing_directory_raises(tmp_path):
    manager = ConfigManager(tmp_path / "nope" / "mallow.json", None)
    manager.use_default()
    with pytest.raises(ConfigError):
        manager.save()


def test_config_base_defaults_from_empty():
    config = ConfigBase(enable_logger=True, logger_ip="x", logger_port=1)
    config.read({})
    assert config == ConfigBase()
    assert config.logger_port == DEFAULT_LOGGER_PORT
    assert config.logger_ip is None


def test_config_base_ignores_wrong_types():
    config = ConfigBase()
    config.read({"logger": {"enable": "yes", "ip": 5, "port": "80", "reconnect": 1}})
    assert config == ConfigBase()


def test_config_base_reads_values():
    config = ConfigBase()
    config.read({"logger": {"enable": True, "ip": "localhost", "port": 9000, "reconnect": True}})
    assert config == ConfigBase(True, True, "localhost", 9000)


def test_read_into(tmp_path):
    manager = _manager(tmp_path)
    target = ConfigBase()
    assert manager.read_into(target) is False
    manager.use_default()
    assert manager.read_into(None) is False
    assert manager.read_into(target) is True
    assert target.logger_ip == "192.168.1.110"
    assert target.logger_port == DEFAULT_LOGGER_PORT
    assert target.enable_logger is False