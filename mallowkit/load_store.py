"""Load and store instructions."""

from __future__ import annotations

from .encoding import ExtendType, Field, Opx1x0Instruction, sign_extend
from .register import Register

__all__ = [
    "create_option",
    "create_s",
    "LoadRegisterLiteral",
    "LdrLiteral",
    "LoadStoreRegisterOffset",
    "LdrRegisterOffset",
    "StrRegisterOffset",
    "LoadStoreRegisterUnscaledImmediate",
    "LdurUnscaledImmediate",
    "SturUnscaledImmediate",
    "LoadStoreRegisterUnsignedImmediate",
    "LdrRegisterImmediate",
    "StrRegisterImmediate",
]

_U16 = 0xFFFF
_U32 = 0xFFFFFFFF

_OPTIONS = {
    ExtendType.UXTW: 0b010,
    ExtendType.LSL: 0b011,
    ExtendType.SXTW: 0b110,
    ExtendType.SXTX: 0b111,
}


def create_option(extend: ExtendType | int) -> int:
    """The ``option`` field for an index register extended by ``extend``.

    Extensions that the register-offset form cannot encode give ``0``.
    """
    try:
        return _OPTIONS[ExtendType(extend)]
    except (KeyError, ValueError):
        return 0b000


def create_s(rt: Register, amount: int) -> bool:
    """Whether the index is scaled: shift 3 for 64-bit, 2 for 32-bit transfers."""
    if amount == 0:
        return False
    if rt.is_64() and amount == 3:
        return True
    if rt.is_32() and amount == 2:
        return True
    return False


def _transfer_size(rt: Register) -> int:
    return 0b10 | int(rt.is_64())


class LoadRegisterLiteral(Opx1x0Instruction):
    """Load register (literal) class."""

    GROUP_OP0 = 0b0001
    GROUP_OP2 = 0b00

    OPC = Field(30, 31)
    V = Field(26)
    IMM19 = Field(5, 24)
    RT = Field(0, 5)

    def __init__(self, rt: Register, imm19: int, v: int, opc: int) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.OP0, self.GROUP_OP0)
        self.set(self.OP2, self.GROUP_OP2)
        self.set(self.OPC, opc)
        self.set(self.V, v)
        self.set(self.IMM19, sign_extend(imm19, self.IMM19.count))
        self.set(self.RT, rt.index)


class LdrLiteral(LoadRegisterLiteral):
    """LDR (literal): load from a PC-relative byte distance."""

    def __init__(self, rt: Register, relative_distance: int) -> None:
        super().__init__(rt, (relative_distance & _U32) // 4, 0b0, int(rt.is_64()))


class LoadStoreRegisterOffset(Opx1x0Instruction):
    """Load/store register (register offset) class."""

    GROUP_OP0 = 0b0011
    GROUP_OP1 = 0
    GROUP_OP2 = 0b00
    GROUP_OP3 = 0b100000
    GROUP_OP4 = 0b10

    SIZE = Field(30, 32)
    V = Field(26)
    OPC = Field(22, 24)
    RM = Field(16, 21)
    OPTION = Field(13, 16)
    S = Field(12)
    RN = Field(5, 10)
    RT = Field(0, 5)

    def __init__(self, size: int, v: int, opc: int) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.SIZE, size)
        self.set(self.OPC, opc)
        self.set(self.OP1, self.GROUP_OP1)
        self.set(self.OP2, self.GROUP_OP2)
        self.set(self.OP3, self.GROUP_OP3)
        self.set(self.OP4, self.GROUP_OP4)
        self.set(self.V, v)

    def _set_operands(
        self, rt: Register, rn: Register, rm: Register, extend: ExtendType | int, amount: int
    ) -> None:
        self.set(self.SIZE, _transfer_size(rt))
        self.set(self.RM, rm.index)
        self.set(self.OPTION, create_option(extend))
        self.set(self.S, create_s(rt, amount))
        self.set(self.RT, rt.index)
        self.set(self.RN, rn.index)


class LdrRegisterOffset(LoadStoreRegisterOffset):
    """LDR (register): load from ``rn`` plus an extended, optionally scaled ``rm``."""

    def __init__(
        self,
        rt: Register,
        rn: Register,
        rm: Register,
        extend: ExtendType | int = ExtendType.LSL,
        amount: int = 0,
    ) -> None:
        super().__init__(_transfer_size(rt), 0b0, 0b01)
        self._set_operands(rt, rn, rm, extend, amount)


class StrRegisterOffset(LoadStoreRegisterOffset):
    """STR (register): store to ``rn`` plus an extended, optionally scaled ``rm``."""

    def __init__(
        self,
        rt: Register,
        rn: Register,
        rm: Register,
        extend: ExtendType | int = ExtendType.LSL,
        amount: int = 0,
    ) -> None:
        super().__init__(_transfer_size(rt), 0b0, 0b00)
        self._set_operands(rt, rn, rm, extend, amount)


class LoadStoreRegisterUnscaledImmediate(Opx1x0Instruction):
    """Load/store register (unscaled immediate) class."""

    GROUP_OP0 = 0b0011
    GROUP_OP2 = 0b00
    GROUP_OP3 = 0b000000
    GROUP_OP4 = 0b00

    SIZE = Field(30, 32)
    V = Field(26)
    OPC = Field(22, 24)
    IMM9 = Field(12, 21)
    RN = Field(5, 10)
    RT = Field(0, 5)

    def __init__(
        self, size: int, v: int, opc: int, imm9: int, rn: Register, rt: Register
    ) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.OP2, self.GROUP_OP2)
        self.set(self.OP3, self.GROUP_OP3)
        self.set(self.OP4, self.GROUP_OP4)
        self.set(self.SIZE, size)
        self.set(self.V, v)
        self.set(self.OPC, opc)
        self.set(self.IMM9, sign_extend(imm9, self.IMM9.count))
        self.set(self.RN, rn.index)
        self.set(self.RT, rt.index)


class LdurUnscaledImmediate(LoadStoreRegisterUnscaledImmediate):
    """LDUR: load from ``rn`` plus a signed byte offset."""

    def __init__(self, rt: Register, rn: Register, imm9: int = 0) -> None:
        super().__init__(_transfer_size(rt), 0b0, 0b01, imm9, rn, rt)


class SturUnscaledImmediate(LoadStoreRegisterUnscaledImmediate):
    """STUR: store to ``rn`` plus a signed byte offset."""

    def __init__(self, rt: Register, rn: Register, imm9: int = 0) -> None:
        super().__init__(_transfer_size(rt), 0b0, 0b00, imm9 & _U16, rn, rt)


class LoadStoreRegisterUnsignedImmediate(Opx1x0Instruction):
    """Load/store register (unsigned immediate) class."""

    GROUP_OP0 = 0b0011
    GROUP_OP2 = 0b10

    SIZE = Field(30, 32)
    V = Field(26)
    OPC = Field(22, 24)
    IMM12 = Field(10, 22)
    RN = Field(5, 10)
    RT = Field(0, 5)

    def __init__(
        self, size: int, v: int, opc: int, imm12: int, rn: Register, rt: Register
    ) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.OP2, self.GROUP_OP2)
        self.set(self.SIZE, size)
        self.set(self.V, v)
        self.set(self.OPC, opc)
        self.set(self.IMM12, imm12 & _U16)
        self.set(self.RN, rn.index)
        self.set(self.RT, rt.index)


class LdrRegisterImmediate(LoadStoreRegisterUnsignedImmediate):
    """LDR (immediate): load from ``rn`` plus a scaled unsigned offset."""

    def __init__(self, rt: Register, rn: Register, imm12: int = 0) -> None:
        super().__init__(_transfer_size(rt), 0b0, 0b01, imm12, rn, rt)


class StrRegisterImmediate(LoadStoreRegisterUnsignedImmediate):
    """STR (immediate): store to ``rn`` plus a scaled unsigned offset."""

    def __init__(self, rt: Register, rn: Register, imm12: int = 0) -> None:
        super().__init__(_transfer_size(rt), 0b0, 0b00, imm12, rn, rt)