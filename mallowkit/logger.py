"""Module-level logging calls routed through the process-wide sink chain."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .sinks import get_log_sink

__all__ = ["LoggerSinks", "log", "log_line", "log_buffer_hex"]


class LoggerSinks(Enum):
    """Kinds of sink the logger can write to."""

    DEBUG_PRINT = "debug_print"
    NETWORK = "network"
    FILE = "file"


def log(fmt: str, *args: Any) -> None:
    """Send a formatted message, without a line break, to every sink."""
    get_log_sink().log(fmt, *args)


def log_line(fmt: str = "", *args: Any) -> None:
    """Send a formatted message followed by a line break to every sink."""
    get_log_sink().log_line(fmt, *args)


def log_buffer_hex(buffer: bytes) -> None:
    """Send ``buffer`` as rows of hexadecimal bytes to every sink."""
    get_log_sink().log_buffer_hex(buffer)