"""
Instruction Set Definition
==========================

The simulator understands seven mnemonics. Operands are kept as text and
resolved against the register file only when the instruction executes.

| Mnemonic | Operands   | Micro-steps | Effect                          |
|----------|------------|-------------|---------------------------------|
| MOV      | dest, src  | 1           | dest := src                     |
| PUSH     | src        | 2           | SP -= 2; [SP] := src            |
| POP      | dest       | 2           | dest := [SP]; SP += 2           |
| ADD      | dest, src  | 1           | dest := dest + src (mod 10000H) |
| SUB      | dest, src  | 1           | dest := dest - src (mod 10000H) |
| XCHG     | reg, reg   | 1           | swap                            |
| NOP      | (none)     | 1           | nothing                         |

Operand forms: register name (AX, BX, CX, DX, SS, SP), hexadecimal literal
with H suffix (1234H) or decimal literal with optional D suffix (122, 122D).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Opcode(Enum):
    """Supported instruction mnemonics."""
    MOV = "MOV"
    PUSH = "PUSH"
    POP = "POP"
    ADD = "ADD"
    SUB = "SUB"
    XCHG = "XCHG"
    NOP = "NOP"

    @property
    def micro_steps(self) -> int:
        """Number of micro-steps needed to complete the instruction."""
        return 2 if self in STACK_OPCODES else 1

    @classmethod
    def from_mnemonic(cls, text: str) -> "Opcode":
        """Look up a mnemonic case-insensitively; unknown text maps to NOP."""
        return cls.__members__.get(text.upper(), cls.NOP)


# PUSH and POP run in two micro-steps
STACK_OPCODES = frozenset({Opcode.PUSH, Opcode.POP})


@dataclass(frozen=True)
class Instruction:
    """
    One decoded source line.

    Attributes:
        opcode: The instruction mnemonic
        operand1: First operand text, verbatim (may be None)
        operand2: Second operand text, verbatim (may be None)
        source_line: 0-based line number in the original source
        raw: The line with comment and surrounding whitespace removed
    """
    opcode: Opcode
    operand1: Optional[str] = None
    operand2: Optional[str] = None
    source_line: int = 0
    raw: str = ""

    def __str__(self) -> str:
        operands = [op for op in (self.operand1, self.operand2) if op is not None]
        if operands:
            return f"{self.opcode.value} {', '.join(operands)}"
        return self.opcode.value
