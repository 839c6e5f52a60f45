"""Logical instructions with shifted register operands."""

from __future__ import annotations

from .encoding import Field, Opx101Instruction, ShiftType
from .register import NONE32, NONE64, Register

__all__ = [
    "LogicalShiftedRegister",
    "OrrShiftedRegister",
    "MovRegister",
]


class LogicalShiftedRegister(Opx101Instruction):
    """Logical (shifted register) class."""

    GROUP_OP0 = 0b0
    GROUP_OP1 = 0b0
    GROUP_OP2 = 0b0000
    GROUP_OP3 = 0b000000

    SF = Field(31)
    OPC = Field(29, 31)
    N = Field(21)
    IMMR = Field(16, 22)
    IMMS = Field(10, 16)
    RN = Field(5, 10)
    RD = Field(0, 5)

    def __init__(self, sf: int, opc: int) -> None:
        super().__init__(self.GROUP_OP0, self.GROUP_OP1, self.GROUP_OP2, self.GROUP_OP3)
        self.set(self.SF, sf)
        self.set(self.OPC, opc)


class OrrShiftedRegister(LogicalShiftedRegister):
    """ORR (shifted register): ``rd = rn | (rm shifted by amount)``."""

    ORR_OPC = 0b01

    SHIFT = Field(22, 24)
    RM = Field(16, 21)
    IMM6 = Field(10, 16)

    def __init__(
        self,
        rd: Register,
        rn: Register,
        rm: Register,
        shift: ShiftType = ShiftType.LSL,
        amount: int = 0,
    ) -> None:
        super().__init__(rd.is_64(), self.ORR_OPC)
        self.set(self.SHIFT, shift)
        self.set(self.N, 0)
        self.set(self.RM, rm.index)
        self.set(self.IMM6, amount & 0xFFFF)
        self.set(self.RN, rn.index)
        self.set(self.RD, rd.index)


class MovRegister(OrrShiftedRegister):
    """MOV (register): ORR with the zero register."""

    def __init__(self, rd: Register, rm: Register) -> None:
        zero = NONE64 if rd.is_64() else NONE32
        super().__init__(rd, zero, rm)