"""JSON configuration file: loading, defaults, saving and typed settings."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .logger import log_line

__all__ = [
    "PATH",
    "EMU_PATH",
    "DEFAULT_CONFIG",
    "DEFAULT_LOGGER_PORT",
    "ConfigError",
    "ConfigBase",
    "ConfigManager",
]

PATH = "sd:/atmosphere/contents/0100000000010000/mallow.json"
EMU_PATH = "sd:/mallow.json"
DEFAULT_CONFIG = """
{
    "logger": {
        "enable": false,
        "reconnect": false,
        "ip": "192.168.1.110",
        "port": 3080
    }
}
    """
DEFAULT_LOGGER_PORT = 3080


class ConfigError(Exception):
    """Raised when a configuration cannot be parsed or written."""


def _as_bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


@dataclass
class ConfigBase:
    """Logger settings read from the ``logger`` object of a configuration."""

    enable_logger: bool = False
    try_reconnect_logger: bool = False
    logger_ip: Optional[str] = None
    logger_port: int = DEFAULT_LOGGER_PORT

    def read(self, config: Any) -> None:
        """Fill the settings from ``config``; missing or mistyped values take defaults."""
        logger = config.get("logger") if isinstance(config, dict) else None
        if not isinstance(logger, dict):
            logger = {}
        self.enable_logger = _as_bool(logger.get("enable"), False)
        ip = logger.get("ip")
        self.logger_ip = ip if isinstance(ip, str) else None
        port = logger.get("port")
        if isinstance(port, int) and not isinstance(port, bool) and 0 <= port <= 0xFFFF:
            self.logger_port = port
        else:
            self.logger_port = DEFAULT_LOGGER_PORT
        self.try_reconnect_logger = _as_bool(logger.get("reconnect"), False)


class ConfigManager:
    """Holds a JSON configuration document and moves it to and from a file.

    A failed ``load`` is not tried again unless ``retry`` is set.
    """

    def __init__(
        self,
        path: "str | os.PathLike[str]" = PATH,
        emu_path: "Optional[str | os.PathLike[str]]" = EMU_PATH,
        default_config: str = DEFAULT_CONFIG,
        emulator_check: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.path = os.fspath(path)
        self.emu_path = os.fspath(emu_path) if emu_path is not None else None
        self.default_config = default_config
        self._emulator_check = emulator_check
        self._document: Any = {}
        self._loaded = False
        self._failed = False

    def is_emu(self) -> bool:
        """Whether the program runs on an emulator."""
        return bool(self._emulator_check()) if self._emulator_check is not None else False

    def calc_path(self) -> str:
        """The configuration file in use: the emulator path on an emulator, if set."""
        if self.is_emu() and self.emu_path:
            return self.emu_path
        return self.path

    def is_loaded(self) -> bool:
        """True once a configuration has been loaded or the default taken."""
        return self._loaded

    def json(self) -> dict:
        """The configuration object; empty when nothing is loaded."""
        if not self._loaded:
            self._document = {}
        return self._document if isinstance(self._document, dict) else {}

    def _fail(self, message: str) -> bool:
        log_line(message)
        self._failed = True
        return False

    def load(self, retry: bool = False) -> bool:
        """Read and parse the configuration file, creating it empty if missing."""
        if not isinstance(self._document, dict):
            self._document = {}
        if self._failed and not retry:
            return False

        path = self.calc_path()
        try:
            try:
                with open(path, "rb") as handle:
                    data = handle.read()
            except FileNotFoundError:
                with open(path, "ab"):
                    pass
                with open(path, "rb") as handle:
                    data = handle.read()
        except OSError:
            return self._fail("Failed to open config file")

        try:
            document = json.loads(data)
        except (ValueError, UnicodeDecodeError):
            self._document = {}
            return self._fail("Failed to parse config file")

        self._document = document
        self._loaded = True
        self._failed = False
        log_line("Config loaded")
        return True

    def use_default(self) -> bool:
        """Take the built-in default configuration; raise ``ConfigError`` if it is invalid."""
        try:
            self._document = json.loads(self.default_config)
        except ValueError as error:
            self._document = {}
            self._loaded = False
            log_line("Failed to deserialize default config")
            raise ConfigError("default configuration is not valid JSON") from error
        self._loaded = True
        return True

    def read_into(self, target: Optional[ConfigBase]) -> bool:
        """Fill ``target`` from the loaded configuration; False if there is none."""
        if not self._loaded or target is None:
            return False
        log_line("Reading config to struct")
        target.read(self._document if isinstance(self._document, dict) else {})
        return True

    def save(self) -> None:
        """Write the configuration to its file as indented JSON."""
        text = json.dumps(self._document, indent=2)
        try:
            with open(self.calc_path(), "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
        except OSError as error:
            log_line("Failed to open config file")
            raise ConfigError(f"cannot write {self.calc_path()}") from error