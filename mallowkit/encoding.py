"""Bit fields and the top-level instruction classes of the A64 encoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    "Field",
    "ShiftType",
    "ExtendType",
    "sign_extend",
    "Instruction",
    "Op100xInstruction",
    "Op101xInstruction",
    "Opx101Instruction",
    "Opx1x0Instruction",
]

WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1


@dataclass(frozen=True)
class Field:
    """A run of bits ``[low, high)`` in a 32-bit instruction word.

    With ``high`` left out the field is the single bit ``low``.
    """

    low: int
    high: int | None = None

    def __post_init__(self) -> None:
        if self.high is None:
            object.__setattr__(self, "high", self.low + 1)
        if not 0 <= self.low < self.high <= WORD_BITS:
            raise ValueError(f"invalid bit range [{self.low}, {self.high})")

    @property
    def count(self) -> int:
        """Number of bits in the field."""
        return self.high - self.low

    @property
    def mask(self) -> int:
        """Mask of the field's bits in place within the word."""
        return ((1 << self.count) - 1) << self.low

    def get(self, word: int) -> int:
        """Extract this field from ``word``."""
        return (word & self.mask) >> self.low

    def set(self, word: int, value: int) -> int:
        """Return ``word`` with this field replaced by ``value``, truncated to fit."""
        cleared = word & ~self.mask & WORD_MASK
        return cleared | ((value << self.low) & self.mask)


class ShiftType(IntEnum):
    LSL = 0b00
    LSR = 0b01
    ASR = 0b10
    ROR = 0b11


class ExtendType(IntEnum):
    UXTB = 0b000
    UXTH = 0b001
    UXTW = 0b010
    UXTX = 0b011
    LSL = 0b011
    SXTB = 0b100
    SXTH = 0b101
    SXTW = 0b110
    SXTX = 0b111


def sign_extend(value: int, bits: int) -> int:
    """Interpret the low ``bits`` bits of ``value`` as a two's-complement number."""
    if bits <= 0:
        raise ValueError("bit count must be positive")
    truncated = value & ((1 << bits) - 1)
    if truncated & (1 << (bits - 1)):
        truncated -= 1 << bits
    return truncated


class Instruction:
    """A 32-bit A64 instruction word built field by field."""

    MAIN_OP0 = Field(25, 29)

    def __init__(self, op0: int) -> None:
        self._word = 0
        self.set(self.MAIN_OP0, op0)

    @property
    def value(self) -> int:
        """The encoded instruction word."""
        return self._word

    def get(self, field: Field) -> int:
        """Read ``field`` from the instruction word."""
        return field.get(self._word)

    def set(self, field: Field, value: int) -> None:
        """Write ``value`` into ``field`` of the instruction word."""
        self._word = field.set(self._word, int(value))

    def to_bytes(self) -> bytes:
        """The word in little-endian byte order, as it sits in memory."""
        return self._word.to_bytes(4, "little")

    def __int__(self) -> int:
        return self._word

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Instruction):
            return self._word == other._word
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._word)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0x{self._word:08X})"


class Op100xInstruction(Instruction):
    """Data processing with immediate operands."""

    OP0 = Field(23, 26)

    def __init__(self, op0: int) -> None:
        super().__init__(0b1000)
        self.set(self.OP0, op0)


class Op101xInstruction(Instruction):
    """Branches, exception generation and system instructions."""

    OP0 = Field(29, 32)
    OP1 = Field(12, 26)
    OP2 = Field(0, 5)

    def __init__(self, op0: int) -> None:
        super().__init__(0b1010)
        self.set(self.OP0, op0)


class Opx101Instruction(Instruction):
    """Data processing with register operands."""

    OP0 = Field(30)
    OP1 = Field(28)
    OP2 = Field(20, 24)
    OP3 = Field(10, 15)

    def __init__(self, op0: int, op1: int, op2: int, op3: int) -> None:
        super().__init__(0b0101)
        self.set(self.OP0, op0)
        self.set(self.OP1, op1)
        self.set(self.OP2, op2)
        self.set(self.OP3, op3)


class Opx1x0Instruction(Instruction):
    """Loads and stores."""

    OP0 = Field(28, 32)
    OP1 = Field(26)
    OP2 = Field(23, 25)
    OP3 = Field(16, 22)
    OP4 = Field(10, 12)

    def __init__(self, op0: int) -> None:
        super().__init__(0b0100)
        self.set(self.OP0, op0)