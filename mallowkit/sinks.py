"""Log sinks: destinations for formatted log output, chained together."""

from __future__ import annotations

import logging
import os
import re
import socket
import sys
import threading
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterator, List, Optional, TextIO

__all__ = [
    "hex_rows",
    "LogSink",
    "SinkChain",
    "DebugPrintSink",
    "ConnectResult",
    "NetworkSink",
    "FileSink",
    "get_log_sink",
    "add_log_sink",
    "remove_log_sink",
]

_debug = logging.getLogger(__name__)

_BYTES_PER_ROW = 16
_RECONNECT_INTERVAL = 4
_CONNECT_TIMEOUT = 5.0

_CONVERSION = re.compile(
    r"%([-+ #0]*(?:\d+|\*)?(?:\.(?:\d+|\*))?)(hh|h|ll|l|z|j|t|L|q)?([diouxXeEfFgGcsp%])"
)


def _convert_spec(match: "re.Match[str]") -> str:
    flags, _length, conversion = match.groups()
    if conversion == "%":
        return "%%"
    if conversion == "p":
        return f"%{flags}#x"
    return f"%{flags}{conversion}"


def _format_message(fmt: str, args: tuple) -> str:
    """Apply a printf-style format, ignoring C length modifiers such as ``ll`` or ``z``."""
    return _CONVERSION.sub(_convert_spec, fmt) % args


def hex_rows(buffer: bytes) -> Iterator[str]:
    """Yield ``buffer`` as rows of up to 16 bytes, each byte written as ``"XX "``."""
    data = bytes(buffer)
    for start in range(0, len(data), _BYTES_PER_ROW):
        yield "".join(f"{byte:02X} " for byte in data[start:start + _BYTES_PER_ROW])


class LogSink(ABC):
    """A destination for log output."""

    @abstractmethod
    def log(self, fmt: str, *args: Any) -> None:
        """Write a formatted message without a line break."""

    @abstractmethod
    def log_line(self, fmt: str = "", *args: Any) -> None:
        """Write a formatted message followed by a line break."""

    @abstractmethod
    def log_buffer_hex(self, buffer: bytes) -> None:
        """Write ``buffer`` as rows of hexadecimal bytes."""


class SinkChain(LogSink):
    """An ordered set of sinks; every message goes to each of them in turn."""

    def __init__(self) -> None:
        self._sinks: List[LogSink] = []

    def add(self, sink: LogSink) -> None:
        """Append ``sink`` to the end of the chain; a sink already present stays where it is."""
        if sink is self:
            raise ValueError("a chain cannot contain itself")
        if not any(existing is sink for existing in self._sinks):
            self._sinks.append(sink)

    def remove(self, sink: LogSink) -> None:
        """Take ``sink`` out of the chain; nothing happens if it is not there."""
        self._sinks = [existing for existing in self._sinks if existing is not sink]

    def __iter__(self) -> Iterator[LogSink]:
        return iter(list(self._sinks))

    def __len__(self) -> int:
        return len(self._sinks)

    def log(self, fmt: str, *args: Any) -> None:
        for sink in self:
            sink.log(fmt, *args)

    def log_line(self, fmt: str = "", *args: Any) -> None:
        for sink in self:
            sink.log_line(fmt, *args)

    def log_buffer_hex(self, buffer: bytes) -> None:
        for sink in self:
            sink.log_buffer_hex(buffer)


class DebugPrintSink(LogSink):
    """Writes each message as one debug-console line on a text stream.

    The console ends every message with a line break, so ``log`` and
    ``log_line`` give the same output.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def _output(self, message: str) -> None:
        self.stream.write(message + "\n")
        self.stream.flush()

    def log(self, fmt: str, *args: Any) -> None:
        self._output(_format_message(fmt, args))

    def log_line(self, fmt: str = "", *args: Any) -> None:
        self.log(fmt, *args)

    def log_buffer_hex(self, buffer: bytes) -> None:
        for row in hex_rows(buffer):
            self._output(row)


class ConnectResult(Enum):
    """Outcome of a network sink's connection attempt."""

    SUCCESS = "success"
    ALREADY_INITIALIZED = "already_initialized"
    NETWORK_FAILED = "network_failed"
    SOCKET_FAILED = "socket_failed"
    RESOLVE_FAILED = "resolve_failed"
    NO_SERVER = "no_server"


class NetworkSink(LogSink):
    """Sends log output over a TCP connection.

    Without a connection, output is dropped; if ``try_reconnect`` is set,
    a new connection is attempted at most once every few seconds.
    """

    def __init__(self, host: str, port: int, try_reconnect: bool = False) -> None:
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port must be 0..65535, got {port}")
        self.host = host
        self.port = port
        self.reconnect = try_reconnect
        self._last_reconnect = 0.0
        self._sock: Optional[socket.socket] = None
        self._lock = threading.Lock()
        self.connect()

    def connect(self) -> ConnectResult:
        """Open the connection, reporting how the attempt went."""
        if self._sock is not None:
            _debug.debug("NetworkSink: Already connected.")
            return ConnectResult.ALREADY_INITIALIZED

        try:
            address = socket.gethostbyname(self.host)
        except (OSError, UnicodeError):
            _debug.debug("NetworkSink: failed to resolve host")
            return ConnectResult.RESOLVE_FAILED

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except OSError:
            _debug.debug("NetworkSink: failed to create socket")
            return ConnectResult.SOCKET_FAILED

        _debug.debug("NetworkSink: connecting to %s:%d", self.host, self.port)
        try:
            sock.settimeout(_CONNECT_TIMEOUT)
            sock.connect((address, self.port))
            sock.settimeout(None)
        except OSError:
            _debug.debug("NetworkSink: failed to connect to server")
            sock.close()
            return ConnectResult.NO_SERVER

        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self._sock = sock
        _debug.debug("NetworkSink: connected to server")
        return ConnectResult.SUCCESS

    def is_successfully_connected(self) -> bool:
        """True while a connection is open."""
        return self._sock is not None

    def close(self) -> None:
        """Close the connection, if one is open."""
        with self._lock:
            if self._sock is not None:
                self._sock.close()
                self._sock = None

    def __enter__(self) -> "NetworkSink":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(self, data: bytes) -> None:
        if self._sock is None:
            if not self.reconnect:
                return
            now = time.time()
            if now - self._last_reconnect <= _RECONNECT_INTERVAL:
                return
            self._last_reconnect = now
            if self.connect() is not ConnectResult.SUCCESS:
                return

        with self._lock:
            sock = self._sock
            if sock is None:
                return
            try:
                sock.sendall(data)
            except OSError:
                sock.close()
                self._sock = None
                _debug.debug(
                    "Message could not be delivered! Trying to connect to server next time."
                )

    def log(self, fmt: str, *args: Any) -> None:
        self._send(_format_message(fmt, args).encode("utf-8"))

    def log_line(self, fmt: str = "", *args: Any) -> None:
        self._send((_format_message(fmt, args) + "\n").encode("utf-8"))

    def log_buffer_hex(self, buffer: bytes) -> None:
        for row in hex_rows(buffer):
            self._send(row.encode("ascii"))
            self.log_line()


class FileSink(LogSink):
    """Writes log output to a file, replacing any file already at ``path``."""

    def __init__(self, path: "str | os.PathLike[str]") -> None:
        self.path = os.fspath(path)
        self._lock = threading.Lock()
        self._offset = 0
        self._file = None
        try:
            os.remove(self.path)
        except OSError:
            pass
        try:
            self._file = open(self.path, "ab")
        except OSError:
            _debug.debug("FileSink: failed to open file")

    @property
    def offset(self) -> int:
        """Number of bytes written so far."""
        return self._offset

    def is_open(self) -> bool:
        """True while the file is open for writing."""
        return self._file is not None

    def close(self) -> None:
        """Close the file; later output is dropped."""
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> "FileSink":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _write(self, data: bytes) -> None:
        with self._lock:
            if self._file is None:
                return
            self._file.write(data)
            self._file.flush()
            self._offset += len(data)

    def log(self, fmt: str, *args: Any) -> None:
        self._write(_format_message(fmt, args).encode("utf-8"))

    def log_line(self, fmt: str = "", *args: Any) -> None:
        self._write((_format_message(fmt, args) + "\n").encode("utf-8"))

    def log_buffer_hex(self, buffer: bytes) -> None:
        for row in hex_rows(buffer):
            self._write(row.encode("ascii"))
            self.log_line()


_root_chain = SinkChain()


def get_log_sink() -> SinkChain:
    """The process-wide chain every log call goes through."""
    return _root_chain


def add_log_sink(sink: LogSink) -> None:
    """Append ``sink`` to the process-wide chain."""
    _root_chain.add(sink)


def remove_log_sink(sink: LogSink) -> None:
    """Remove ``sink`` from the process-wide chain."""
    _root_chain.remove(sink)