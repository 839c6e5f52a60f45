import io
import socket

import pytest

from mallowkit.sinks import (
    ConnectResult,
    DebugPrintSink,
    FileSink,
    LogSink,
    NetworkSink,
    SinkChain,
    add_log_sink,
    get_log_sink,
    hex_rows,
    remove_log_sink,
)


class RecordingSink(LogSink):
    def __init__(self):
        self.calls = []

    def log(self, fmt, *args):
        self.calls.append(("log", fmt, args))

    def log_line(self, fmt="", *args):
        self.calls.append(("log_line", fmt, args))

    def log_buffer_hex(self, buffer):
        self.calls.append(("hex", bytes(buffer)))


def _free_port():
    with socket.socket() as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def _read_until(conn, count):
    data = b""
    while data.count(b"\n") < count:
        chunk = conn.recv(4096)
        if not chunk:
            break
        data += chunk
    return data


def test_hex_rows_small_buffer():
    assert list(hex_rows(bytes([0x00, 0xAB, 0x10]))) == ["00 AB 10 "]


def test_hex_rows_splits_every_sixteen_bytes():
    rows = list(hex_rows(bytes(range(40))))
    assert len(rows) == 3
    assert len(rows[0]) == 16 * 3
    assert rows[2].split() == [f"{b:02X}" for b in range(32, 40)]


def test_hex_rows_empty():
    assert list(hex_rows(b"")) == []


def test_log_sink_is_abstract():
    with pytest.raises(TypeError):
        LogSink()


def test_chain_broadcasts_in_order():
    chain = SinkChain()
    first, second = RecordingSink(), RecordingSink()
    chain.add(first)
    chain.add(second)
    chain.log_line("value %d", 3)
    chain.log_buffer_hex(b"\x01")
    assert first.calls == second.calls == [("log_line", "value %d", (3,)), ("hex", b"\x01")]
    assert list(chain) == [first, second]


def test_chain_remove_and_duplicates():
    chain = SinkChain()
    sink = RecordingSink()
    chain.add(sink)
    chain.add(sink)
    assert len(chain) == 1
    chain.remove(sink)
    chain.remove(sink)
    chain.log("ignored")
    assert sink.calls == []
    assert len(chain) == 0


def test_chain_rejects_itself():
    chain = SinkChain()
    with pytest.raises(ValueError):
        chain.add(chain)


def test_global_chain_add_and_remove():
    sink = RecordingSink()
    add_log_sink(sink)
    try:
        get_log_sink().log("hi %s", "there")
        assert sink.calls == [("log", "hi %s", ("there",))]
    finally:
        remove_log_sink(sink)
    assert all(existing is not sink for existing in get_log_sink())


def test_debug_print_formats_c_specifiers():
    stream = io.StringIO()
    sink = DebugPrintSink(stream)
    sink.log("count %llu size %zx", 12, 255)
    sink.log_line("at %p", 4096)
    assert stream.getvalue().splitlines() == ["count 12 size ff", "at 0x1000"]


def test_debug_print_hex_rows():
    stream = io.StringIO()
    DebugPrintSink(stream).log_buffer_hex(bytes(range(20)))
    assert stream.getvalue().splitlines() == list(hex_rows(bytes(range(20))))


def test_file_sink_replaces_existing_file(tmp_path):
    path = tmp_path / "out.log"
    path.write_text("old contents")
    with FileSink(path) as sink:
        assert sink.is_open()
        sink.log("a=%d ", 1)
        sink.log_line("b=%s", "x")
        sink.log_line()
        assert sink.offset == len(path.read_bytes())
    assert path.read_text() == "a=1 b=x\n\n"


def test_file_sink_hex_adds_line_breaks(tmp_path):
    path = tmp_path / "hex.log"
    with FileSink(path) as sink:
        sink.log_buffer_hex(bytes(range(17)))
    assert path.read_text().splitlines() == list(hex_rows(bytes(range(17))))


def test_file_sink_unopenable_path(tmp_path):
    sink = FileSink(tmp_path / "missing" / "out.log")
    assert not sink.is_open()
    sink.log_line("dropped")
    assert sink.offset == 0


def test_file_sink_close_stops_output(tmp_path):
    path = tmp_path / "c.log"
    sink = FileSink(path)
    sink.log("kept")
    sink.close()
    sink.log("dropped")
    assert not sink.is_open()
    assert path.read_text() == "kept"


def test_network_sink_sends_lines():
    server = socket.socket()
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    port = server.getsockname()[1]
    try:
        with NetworkSink("127.0.0.1", port, False) as sink:
            assert sink.is_successfully_connected()
            assert sink.connect() is ConnectResult.ALREADY_INITIALIZED
            conn, _ = server.accept()
            with conn:
                sink.log("part ")
                sink.log_line("line %d", 7)
                sink.log_buffer_hex(b"\x0a\x0b")
                data = _read_until(conn, 2)
        assert data == b"part line 7\n" + next(hex_rows(b"\x0a\x0b")).encode() + b"\n"
        assert not sink.is_successfully_connected()
    finally:
        server.close()


def test_network_sink_without_server():
    sink = NetworkSink("127.0.0.1", _free_port(), False)
    assert not sink.is_successfully_connected()
    sink.log_line("dropped")
    assert not sink.is_successfully_connected()
    assert sink.connect() is ConnectResult.NO_SERVER


def test_network_sink_rejects_bad_port():
    with pytest.raises(ValueError):
        NetworkSink("127.0.0.1", 70000, False)