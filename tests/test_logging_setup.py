import json
import socket

import pytest

from mallowkit.config import DEFAULT_LOGGER_PORT, ConfigBase, ConfigManager
from mallowkit.logging_setup import initialize, setup_logging
from mallowkit.sinks import DebugPrintSink, FileSink, NetworkSink, get_log_sink, remove_log_sink


@pytest.fixture(autouse=True)
def restore_chain():
    before = list(get_log_sink())
    yield
    for sink in list(get_log_sink()):
        if not any(sink is old for old in before):
            remove_log_sink(sink)
            close = getattr(sink, "close", None)
            if close is not None:
                close()


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_no_config_adds_nothing(tmp_path):
    before = len(list(get_log_sink()))
    assert setup_logging(None, tmp_path / "log.txt") == []
    assert len(list(get_log_sink())) == before


def test_disabled_logger_adds_nothing(tmp_path):
    assert setup_logging(ConfigBase(), tmp_path / "log.txt") == []
    assert not (tmp_path / "log.txt").exists()


def test_file_sink_added(tmp_path):
    path = tmp_path / "log.txt"
    added = setup_logging(ConfigBase(enable_logger=True), path)
    assert len(added) == 1
    assert isinstance(added[0], FileSink)
    assert any(sink is added[0] for sink in get_log_sink())
    assert path.exists()


def test_emulator_adds_debug_sink(tmp_path):
    added = setup_logging(ConfigBase(enable_logger=True), tmp_path / "log.txt", True)
    assert [type(sink) for sink in added] == [FileSink, DebugPrintSink]


def test_unreachable_network_sink_not_added(tmp_path):
    path = tmp_path / "log.txt"
    config = ConfigBase(enable_logger=True, logger_ip="127.0.0.1", logger_port=_free_port())
    added = setup_logging(config, path)
    assert [type(sink) for sink in added] == [FileSink]
    added[0].close()
    assert "Failed to connect to the network sink\n" in path.read_text()


def test_unreachable_network_sink_kept_with_reconnect(tmp_path):
    config = ConfigBase(
        enable_logger=True,
        try_reconnect_logger=True,
        logger_ip="127.0.0.1",
        logger_port=_free_port(),
    )
    added = setup_logging(config, tmp_path / "log.txt")
    assert [type(sink) for sink in added] == [FileSink, NetworkSink]
    assert added[1].is_successfully_connected() is False


def test_reachable_network_sink_added(tmp_path):
    with socket.socket() as server:
        server.bind(("127.0.0.1", 0))
        server.listen(1)
        port = server.getsockname()[1]
        config = ConfigBase(enable_logger=True, logger_ip="127.0.0.1", logger_port=port)
        added = setup_logging(config, tmp_path / "log.txt")
        assert [type(sink) for sink in added] == [FileSink, NetworkSink]
        assert added[1].is_successfully_connected() is True
        added[1].close()


def test_initialize_writes_default_config(tmp_path):
    manager = ConfigManager(tmp_path / "mallow.json", None)
    config = ConfigBase(enable_logger=True)
    added = initialize(manager, config, tmp_path / "log.txt")
    assert added == []
    assert config.enable_logger is False
    assert config.logger_port == DEFAULT_LOGGER_PORT
    saved = json.loads((tmp_path / "mallow.json").read_text())
    assert saved == manager.json()


def test_initialize_with_enabled_logger(tmp_path):
    (tmp_path / "mallow.json").write_text(json.dumps({"logger": {"enable": True}}))
    manager = ConfigManager(tmp_path / "mallow.json", None)
    config = ConfigBase()
    log_path = tmp_path / "log.txt"
    added = initialize(manager, config, log_path)
    assert [type(sink) for sink in added] == [FileSink]
    added[0].close()
    assert log_path.read_text().endswith("Logging and config set up!\n")