"""General-purpose register operands for AArch64 instruction encoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "RegisterKind",
    "Register",
    "w",
    "x",
    "LR",
    "SP",
    "NONE32",
    "NONE64",
]

_MAX_GENERAL_INDEX = 30


class RegisterKind(Enum):
    """Width of a register operand."""

    W = 0
    X = 1


@dataclass(frozen=True)
class Register:
    """A register operand: its width and its index.

    The index is a 7-bit signed quantity; ``-1`` stands for the zero
    register and ``31`` for the stack pointer.
    """

    kind: RegisterKind
    index: int

    def __post_init__(self) -> None:
        if not isinstance(self.kind, RegisterKind):
            raise TypeError(f"kind must be a RegisterKind, not {self.kind!r}")
        if not -64 <= self.index < 64:
            raise ValueError(f"register index {self.index} does not fit in 7 signed bits")

    def is_32(self) -> bool:
        """True for a 32-bit (W) register."""
        return self.kind is RegisterKind.W

    def is_64(self) -> bool:
        """True for a 64-bit (X) register."""
        return self.kind is RegisterKind.X

    def __str__(self) -> str:
        return f"{self.kind.name}{self.index}"


def _general(kind: RegisterKind, index: int) -> Register:
    if not 0 <= index <= _MAX_GENERAL_INDEX:
        raise ValueError(f"general register index must be 0..{_MAX_GENERAL_INDEX}, got {index}")
    return Register(kind, index)


def w(index: int) -> Register:
    """Return the 32-bit general register ``W<index>``."""
    return _general(RegisterKind.W, index)


def x(index: int) -> Register:
    """Return the 64-bit general register ``X<index>``."""
    return _general(RegisterKind.X, index)


(
    W0, W1, W2, W3, W4, W5, W6, W7, W8, W9,
    W10, W11, W12, W13, W14, W15, W16, W17, W18, W19,
    W20, W21, W22, W23, W24, W25, W26, W27, W28, W29,
    W30,
) = tuple(w(i) for i in range(_MAX_GENERAL_INDEX + 1))

(
    X0, X1, X2, X3, X4, X5, X6, X7, X8, X9,
    X10, X11, X12, X13, X14, X15, X16, X17, X18, X19,
    X20, X21, X22, X23, X24, X25, X26, X27, X28, X29,
    X30,
) = tuple(x(i) for i in range(_MAX_GENERAL_INDEX + 1))

LR = X30
SP = Register(RegisterKind.X, 31)
NONE32 = Register(RegisterKind.W, -1)
NONE64 = Register(RegisterKind.X, -1)