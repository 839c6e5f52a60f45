"""Start-up wiring: load the configuration and attach the configured log sinks."""

from __future__ import annotations

import os
from typing import List, Optional

from .config import ConfigBase, ConfigError, ConfigManager
from .logger import log_line
from .sinks import DebugPrintSink, FileSink, LogSink, NetworkSink, add_log_sink

__all__ = ["DEFAULT_LOG_PATH", "setup_logging", "initialize"]

DEFAULT_LOG_PATH = "sd:/mallow.log"


def setup_logging(
    config: Optional[ConfigBase],
    log_path: "str | os.PathLike[str]" = DEFAULT_LOG_PATH,
    is_emu: bool = False,
) -> List[LogSink]:
    """Attach the sinks ``config`` asks for and return them, in the order added."""
    added: List[LogSink] = []
    if config is None or not config.enable_logger:
        return added

    file_sink = FileSink(log_path)
    add_log_sink(file_sink)
    added.append(file_sink)

    if config.logger_ip:
        network_sink = NetworkSink(
            config.logger_ip, config.logger_port, config.try_reconnect_logger
        )
        if network_sink.is_successfully_connected() or config.try_reconnect_logger:
            add_log_sink(network_sink)
            added.append(network_sink)
        else:
            log_line("Failed to connect to the network sink")

    if is_emu:
        debug_sink = DebugPrintSink()
        add_log_sink(debug_sink)
        added.append(debug_sink)

    return added


def initialize(
    manager: ConfigManager,
    config: ConfigBase,
    log_path: "str | os.PathLike[str]" = DEFAULT_LOG_PATH,
) -> List[LogSink]:
    """Load the configuration, falling back to and saving the default, then set up logging."""
    if not manager.load(True):
        try:
            manager.use_default()
            manager.save()
        except ConfigError:
            pass
    manager.read_into(config)

    added = setup_logging(config, log_path, manager.is_emu())
    log_line("Logging and config set up!")
    return added