# mallowkit

Small building blocks for runtime code-patching projects on AArch64:

- **Instruction encoders** (`mallowkit.data_processing`, `mallowkit.branches`,
  `mallowkit.logical`, `mallowkit.load_store`) that build 32-bit ARMv8 words
  field by field: `AddImmediate`, `AddsImmediate`, `SubImmediate`,
  `SubsImmediate`, `CmnImmediate`, `CmpImmediate`, `Movz`, `Movn`, `Movk`,
  `Adr`, `Adrp`, `Branch`, `BranchLink`, `BranchRegister`, `Ret`, `Nop`,
  `OrrShiftedRegister`, `MovRegister`, `LdrLiteral`, `LdrRegisterOffset`,
  `StrRegisterOffset`, `LdurUnscaledImmediate`, `SturUnscaledImmediate`,
  `LdrRegisterImmediate` and `StrRegisterImmediate`.
- **Registers** (`mallowkit.register`): `x(n)` and `w(n)` for general
  registers 0..30, plus `LR`, `SP`, `NONE32` and `NONE64` (the zero register).
- **Delegates** (`mallowkit.delegate`): bound-method, plain-function and
  lambda wrappers, and an `AnyDelegate` that is falsy until something is stored.
- **Log sinks** (`mallowkit.sinks`, `mallowkit.logger`): a chain of sinks
  (debug stream, TCP network, file) with printf-style formatting and hex dumps.
- **JSON configuration** (`mallowkit.config`, `mallowkit.logging_setup`):
  loading, defaulting and saving a configuration file, and attaching log sinks
  from it.

## Installation

```
pip install .
```

With test dependencies:

```
pip install ".[test]"
```

## Encoding instructions

Every encoder is an `Instruction`; its `value` property is the encoded word and
`to_bytes()` gives it in little-endian order.

```python
from mallowkit.register import x
from mallowkit.data_processing import AddImmediate, Adrp
from mallowkit.branches import Branch, Nop, Ret

hex(AddImmediate(x(0), x(1), 12).value)   # '0x91003020'
hex(Adrp(x(0), 0x1000).value)             # '0xb0000000'
hex(Branch(0x4440).value)                 # '0x14001110'
hex(Nop().value)                          # '0xd503201f'
hex(Ret().value)                          # '0xd65f03c0'
Nop().to_bytes()                          # b'\x1f\x20\x03\xd5'
```

`mallowkit.encoding` holds the `Field` type used to read and write bit ranges,
the `ShiftType` and `ExtendType` enums and `sign_extend`.

## Delegates

```python
from mallowkit.delegate import AnyDelegate, make_lambda_delegate

slot = AnyDelegate()
bool(slot)            # False: nothing stored yet
slot()                # None: the empty slot does nothing
slot.assign(make_lambda_delegate(lambda a, b: a + b))
slot(2, 3)            # 5
```

`Delegate(instance, method)` calls `method(instance, *args)` and
`FunctionDelegate(function)` calls a plain function; either returns `None`
when not fully bound.

## Logging

```python
import sys
from mallowkit.sinks import DebugPrintSink, FileSink, add_log_sink
from mallowkit.logger import log_line, log_buffer_hex

add_log_sink(DebugPrintSink(sys.stderr))
add_log_sink(FileSink("mallow.log"))
log_line("loaded %d entries", 42)
log_buffer_hex(b"\x00\x01\x02")
```

`FileSink` replaces any file already at its path. A
`NetworkSink(host, port, try_reconnect)` sends the same output over TCP; if it
is not connected, output is dropped, and with `try_reconnect` set a new
connection is tried at most once every few seconds. `NetworkSink.connect()`
reports its outcome as a `ConnectResult`.

## Configuration

```python
from mallowkit.config import ConfigBase, ConfigManager
from mallowkit.logging_setup import initialize

manager = ConfigManager("mallow.json", emu_path=None)
config = ConfigBase()
initialize(manager, config, "mallow.log")
```

`initialize` loads the file (creating it empty if missing; if loading fails it
takes the default configuration and writes it out), reads it into `config` and
attaches the file, network and debug sinks it asks for, returning them.
`ConfigManager.save()` and `ConfigManager.use_default()` raise `ConfigError`
when they fail. The default configuration is:

```json
{
    "logger": {
        "enable": false,
        "reconnect": false,
        "ip": "192.168.1.110",
        "port": 3080
    }
}
```

## What it does not do

mallowkit only produces instruction words and bytes. It does not decode or
disassemble instructions, write them into a running process, or install hooks,
and it has no command-line tool.