"""
CPU State Model
===============

Data shapes shared by the stepper, the history log and the presentation
layer.

The simulated CPU has:
- 16-bit general purpose registers: AX, BX, CX, DX
- 16-bit segment register SS (displayed only, never used for addressing)
- 16-bit stack pointer SP, descending from the stack base
- Flags: zero, sign, overflow (reserved, no instruction updates them)

A CpuState is never modified after it has been produced. Each step builds a
new state with its own register and memory dictionaries, so a state held in
the history log is never affected by later steps.

Copyright (c) 2026 StackSim Contributors
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from stacksim.errors import ConfigurationError


WORD_MASK = 0xFFFF
DEFAULT_STACK_SIZE = 0x100
MAX_STACK_SIZE = 0xFFFE  # Largest even value SP can hold
DEFAULT_SS = 0x1000

READY_MESSAGE = "System Ready"


class Register(str, Enum):
    """Register names as they appear in source operands."""
    AX = "AX"
    BX = "BX"
    CX = "CX"
    DX = "DX"
    SS = "SS"
    SP = "SP"

    @classmethod
    def lookup(cls, name: str) -> Optional["Register"]:
        """Return the register named by `name` (case-insensitive), or None."""
        return cls.__members__.get(name.strip().upper())


class PipelinePhase(Enum):
    """
    Micro-step pipeline phase.

    FETCH is the resting phase between instructions. STACK_PHASE_2 means a
    PUSH or POP has completed its first micro-step and pc must not advance
    until the second one runs.
    """
    FETCH = "FETCH"
    STACK_PHASE_2 = "STACK_PHASE_2"


@dataclass(frozen=True)
class Flags:
    """Condition flags. Reserved: no instruction sets them."""
    zero: bool = False
    sign: bool = False
    overflow: bool = False


@dataclass(frozen=True)
class CpuState:
    """
    Complete simulator state after one micro-step.

    Attributes:
        pc: Index into the instruction list (terminal when >= its length)
        phase: Pipeline phase of the instruction at pc
        registers: Current register values (16-bit unsigned)
        previous_registers: Register values before the most recent step
        memory: Sparse stack memory, address -> 16-bit word
        stack_base: Initial SP; the empty-stack position
        flags: Reserved condition flags
        last_action: Description of the most recent micro-step
        error: Message of the last faulting step, if any
        highlighted_address: Memory address touched by the last micro-step
    """
    pc: int
    phase: PipelinePhase
    registers: Dict[Register, int]
    previous_registers: Dict[Register, int]
    memory: Dict[int, int]
    stack_base: int
    flags: Flags = field(default_factory=Flags)
    last_action: Optional[str] = None
    error: Optional[str] = None
    highlighted_address: Optional[int] = None

    def __hash__(self) -> int:
        # Hash by content; the dict fields are hashed as sorted item tuples.
        return hash((
            self.pc,
            self.phase,
            tuple(sorted(self.registers.items())),
            tuple(sorted(self.previous_registers.items())),
            tuple(sorted(self.memory.items())),
            self.stack_base,
            self.flags,
            self.last_action,
            self.error,
            self.highlighted_address,
        ))

    @property
    def sp(self) -> int:
        """Stack pointer."""
        return self.registers[Register.SP]

    @property
    def is_mid_instruction(self) -> bool:
        """True between the two micro-steps of a PUSH or POP."""
        return self.phase is PipelinePhase.STACK_PHASE_2

    @property
    def changed_registers(self) -> List[Register]:
        """Registers whose value differs from the previous step."""
        return [
            reg for reg in Register
            if self.registers[reg] != self.previous_registers.get(reg)
        ]

    def read_word(self, address: int) -> int:
        """Read a stack word; addresses never written read as 0."""
        return self.memory.get(address, 0)


def validate_stack_size(stack_size: int) -> int:
    """
    Check that a stack size is usable as initial SP.

    Raises:
        ConfigurationError: If not a positive even integer <= FFFEH
    """
    if isinstance(stack_size, bool) or not isinstance(stack_size, int):
        raise ConfigurationError(f"Stack size must be an integer, got {stack_size!r}")
    if stack_size <= 0 or stack_size % 2:
        raise ConfigurationError(
            f"Stack size must be a positive even number of bytes, got {stack_size}"
        )
    if stack_size > MAX_STACK_SIZE:
        raise ConfigurationError(
            f"Stack size {stack_size} does not fit in SP (max {MAX_STACK_SIZE})"
        )
    return stack_size


def create_initial_state(stack_size: int = DEFAULT_STACK_SIZE) -> CpuState:
    """
    Build the power-on state for a given stack size.

    SP and the stack base both start at `stack_size`; the stack is empty.

    Args:
        stack_size: Stack size in bytes (positive, even)

    Returns:
        Fresh CpuState at pc 0 in the FETCH phase

    Raises:
        ConfigurationError: If the stack size is invalid
    """
    validate_stack_size(stack_size)
    registers = {
        Register.AX: 0x0000,
        Register.BX: 0x0000,
        Register.CX: 0x0000,
        Register.DX: 0x0000,
        Register.SS: DEFAULT_SS,
        Register.SP: stack_size,
    }
    return CpuState(
        pc=0,
        phase=PipelinePhase.FETCH,
        registers=registers,
        previous_registers=dict(registers),
        memory={},
        stack_base=stack_size,
        last_action=READY_MESSAGE,
    )
