"""Data-processing instructions with immediate operands."""

from __future__ import annotations

from .encoding import Field, Op100xInstruction
from .register import NONE32, NONE64, Register

__all__ = [
    "calc_sh",
    "calc_imm",
    "AddSubtractImmediate",
    "AddImmediate",
    "AddsImmediate",
    "SubImmediate",
    "SubsImmediate",
    "CmnImmediate",
    "CmpImmediate",
    "LogicalImmediate",
    "MoveWideImmediate",
    "Movk",
    "Movn",
    "Movz",
    "PcRelAddressing",
    "Adr",
    "Adrp",
]

_U32 = 0xFFFFFFFF
_IMM_SHIFT = 12
_MASK_FOR_IMM_SHIFT = (1 << _IMM_SHIFT) - 1


def calc_sh(imm: int) -> bool:
    """Whether ``imm`` is encoded with its 12-bit left shift."""
    imm &= _U32
    return imm != 0 and (imm & _MASK_FOR_IMM_SHIFT) == 0


def calc_imm(imm: int) -> int:
    """The 16-bit immediate as stored, shifted down when ``calc_sh`` holds."""
    imm &= _U32
    if calc_sh(imm):
        imm >>= _IMM_SHIFT
    return imm & 0xFFFF


def _zero_register_like(reg: Register) -> Register:
    return NONE64 if reg.is_64() else NONE32


class AddSubtractImmediate(Op100xInstruction):
    """Add/subtract (immediate) class."""

    GROUP_OP0 = 0b010

    SF = Field(31)
    OP = Field(30)
    S = Field(29)
    SH = Field(22)
    IMM12 = Field(10, 22)
    RN = Field(5, 10)
    RD = Field(0, 5)

    def __init__(self, sf: bool, op: bool, s: bool) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.SF, sf)
        self.set(self.OP, op)
        self.set(self.S, s)

    def _set_operands(self, rd: Register, rn: Register, imm: int) -> None:
        self.set(self.RD, rd.index)
        self.set(self.RN, rn.index)
        self.set(self.IMM12, calc_imm(imm))
        self.set(self.SH, calc_sh(imm))


class AddImmediate(AddSubtractImmediate):
    """ADD (immediate)."""

    def __init__(self, rd: Register, rn: Register, imm: int) -> None:
        super().__init__(rd.is_64(), False, False)
        self._set_operands(rd, rn, imm)


class AddsImmediate(AddSubtractImmediate):
    """ADDS (immediate)."""

    def __init__(self, rd: Register, rn: Register, imm: int) -> None:
        super().__init__(rd.is_64(), False, True)
        self._set_operands(rd, rn, imm)


class SubImmediate(AddSubtractImmediate):
    """SUB (immediate)."""

    def __init__(self, rd: Register, rn: Register, imm: int) -> None:
        super().__init__(rd.is_64(), True, False)
        self._set_operands(rd, rn, imm)


class SubsImmediate(AddSubtractImmediate):
    """SUBS (immediate)."""

    def __init__(self, rd: Register, rn: Register, imm: int) -> None:
        super().__init__(rd.is_64(), True, True)
        self._set_operands(rd, rn, imm)


class CmnImmediate(AddsImmediate):
    """CMN (immediate): ADDS into the zero register."""

    def __init__(self, reg: Register, imm: int) -> None:
        super().__init__(_zero_register_like(reg), reg, imm)


class CmpImmediate(SubsImmediate):
    """CMP (immediate): SUBS into the zero register."""

    def __init__(self, reg: Register, imm: int) -> None:
        super().__init__(_zero_register_like(reg), reg, imm)


class LogicalImmediate(Op100xInstruction):
    """Logical (immediate) class."""

    GROUP_OP0 = 0b100

    SF = Field(31)
    OPC = Field(29, 31)
    N = Field(22)
    IMMR = Field(16, 22)
    IMMS = Field(10, 16)
    RN = Field(5, 10)
    RD = Field(0, 5)

    def __init__(self, sf: int, opc: int) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.SF, sf)
        self.set(self.OPC, opc)


class MoveWideImmediate(Op100xInstruction):
    """Move wide (immediate) class."""

    GROUP_OP0 = 0b101

    SF = Field(31)
    OPC = Field(29, 31)
    HW = Field(21, 23)
    IMM16 = Field(5, 21)
    RD = Field(0, 5)

    def __init__(self, reg: Register, opc: int, hw: int, imm: int) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.SF, reg.is_64())
        self.set(self.OPC, opc)
        self.set(self.HW, hw)
        self.set(self.IMM16, imm & 0xFFFF)
        self.set(self.RD, reg.index)


class Movk(MoveWideImmediate):
    """MOVK with no shift."""

    def __init__(self, reg: Register, imm: int) -> None:
        super().__init__(reg, 0b11, 0b00, imm)


class Movn(MoveWideImmediate):
    """MOVN with no shift."""

    def __init__(self, reg: Register, imm: int) -> None:
        super().__init__(reg, 0b00, 0b00, imm)


class Movz(MoveWideImmediate):
    """MOVZ with no shift."""

    def __init__(self, reg: Register, imm: int) -> None:
        super().__init__(reg, 0b10, 0b00, imm)


class PcRelAddressing(Op100xInstruction):
    """PC-relative addressing class."""

    GROUP_OP0 = 0b000
    OP_ADR = 0
    OP_ADRP = 1

    OP = Field(31)
    IMMLO = Field(29, 31)
    IMMHI = Field(5, 24)
    RD = Field(0, 5)

    def __init__(self, reg: Register, imm: int, op: int) -> None:
        super().__init__(self.GROUP_OP0)
        imm &= _U32
        self.set(self.OP, op)
        self.set(self.IMMLO, imm)
        self.set(self.IMMHI, imm >> self.IMMLO.count)
        self.set(self.RD, reg.index)


class Adr(PcRelAddressing):
    """ADR: a PC-relative address."""

    def __init__(self, reg: Register, imm: int) -> None:
        super().__init__(reg, imm, self.OP_ADR)


class Adrp(PcRelAddressing):
    """ADRP: a PC-relative page address."""

    def __init__(self, reg: Register, imm: int) -> None:
        super().__init__(reg, (imm & _U32) >> 12, self.OP_ADRP)