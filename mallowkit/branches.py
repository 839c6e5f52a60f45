"""Hints and unconditional branch instructions."""

from __future__ import annotations

from .encoding import Field, Op101xInstruction
from .register import LR, Register

__all__ = [
    "Hints",
    "Nop",
    "UnconditionalBranchImmediate",
    "Branch",
    "BranchLink",
    "UnconditionalBranchRegister",
    "BranchRegister",
    "Ret",
]

_U32 = 0xFFFFFFFF


class Hints(Op101xInstruction):
    """Hint instruction class (NOP, YIELD, WFE and the like)."""

    GROUP_OP0 = 0b110
    GROUP_OP1 = 0b01000000110010
    GROUP_OP2 = 0b11111

    CRM = Field(8, 12)
    LOCAL_OP2 = Field(5, 8)

    def __init__(self) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.OP1, self.GROUP_OP1)
        self.set(self.OP2, self.GROUP_OP2)


class Nop(Hints):
    """NOP."""

    def __init__(self) -> None:
        super().__init__()
        self.set(self.CRM, 0b0000)
        self.set(self.LOCAL_OP2, 0b000)


class UnconditionalBranchImmediate(Op101xInstruction):
    """Unconditional branch (immediate) class."""

    GROUP_OP0 = 0b000
    B = 0
    BL = 1

    OP = Field(31)
    IMM26 = Field(0, 26)

    def __init__(self, op: int, relative_address: int) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.OP, op)
        # The offset is taken as an unsigned 32-bit byte distance.
        self.set(self.IMM26, (relative_address & _U32) // 4)


class Branch(UnconditionalBranchImmediate):
    """B: branch by a PC-relative byte offset."""

    def __init__(self, relative_address: int) -> None:
        super().__init__(self.B, relative_address)


class BranchLink(UnconditionalBranchImmediate):
    """BL: branch with link by a PC-relative byte offset."""

    def __init__(self, relative_address: int) -> None:
        super().__init__(self.BL, relative_address)


class UnconditionalBranchRegister(Op101xInstruction):
    """Unconditional branch (register) class."""

    GROUP_OP0 = 0b110
    GROUP_OP1 = 0b10000000000000

    OPC = Field(21, 25)
    UBR_OP2 = Field(16, 21)
    OP3 = Field(10, 16)
    RN = Field(5, 10)
    OP4 = Field(0, 5)

    def __init__(self, opc: int, op2: int) -> None:
        super().__init__(self.GROUP_OP0)
        self.set(self.OP1, self.GROUP_OP1)
        self.set(self.OPC, opc)
        self.set(self.UBR_OP2, op2)

    def _set_target(self, rn: Register) -> None:
        self.set(self.OP3, 0b000000)
        self.set(self.RN, rn.index)
        self.set(self.OP4, 0b00000)


class BranchRegister(UnconditionalBranchRegister):
    """BR: branch to the address held in a register."""

    def __init__(self, rn: Register) -> None:
        super().__init__(0b0000, 0b11111)
        self._set_target(rn)


class Ret(UnconditionalBranchRegister):
    """RET: return to the address held in a register, the link register by default."""

    def __init__(self, rn: Register = LR) -> None:
        super().__init__(0b0010, 0b11111)
        self._set_target(rn)