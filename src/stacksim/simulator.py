"""
Simulator - Main Orchestrator
=============================

This module provides the `Simulator` class, which ties the parser, the
stepper and the history log together behind a small stateful API.

The Simulator:
- Owns the current source text and its parsed instruction list
- Owns the configuration (stack size, run budget)
- Keeps a History of every state produced, with back/forward navigation
- Resets the history whenever the source or the stack size changes
- Runs programs to completion with a micro-step budget

The engine itself (parse_source, step) holds no state; everything mutable
lives here.

Example usage:
    >>> from stacksim import Simulator, SimulatorConfig
    >>> sim = Simulator(SimulatorConfig(stack_size=0x100))
    >>> sim.load_source("MOV AX, 1234H\\nPUSH AX\\nPOP BX")
    >>> event = sim.run()
    >>> event.reason
    <StopReason.END_OF_PROGRAM: 1>
    >>> hex(sim.registers["BX"])
    '0x1234'

Copyright (c) 2026 StackSim Contributors
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, assert_never

from stacksim.assembler.opcodes import Instruction
from stacksim.assembler.parser import parse_source
from stacksim.config import SimulatorConfig
from stacksim.cpu.history import History
from stacksim.cpu.state import CpuState, create_initial_state

logger = logging.getLogger(__name__)


class StopReason(Enum):
    """Why Simulator.run() returned."""
    END_OF_PROGRAM = auto()  # pc ran past the last instruction
    ERROR = auto()           # A micro-step faulted
    MAX_STEPS = auto()       # Step budget exhausted


@dataclass
class StopEvent:
    """
    Information about why a run stopped.

    Attributes:
        reason: Why execution stopped
        steps: Micro-steps executed during the run
        pc: Program counter when the run stopped
        message: Human-readable description
    """
    reason: StopReason
    steps: int = 0
    pc: int = 0
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return self.message
        match self.reason:
            case StopReason.END_OF_PROGRAM:
                return f"Program finished after {self.steps} micro-steps"
            case StopReason.ERROR:
                return f"Stopped on error at instruction {self.pc}"
            case StopReason.MAX_STEPS:
                return f"Step budget of {self.steps} micro-steps exhausted"
            case _:
                assert_never(self.reason)


class Simulator:
    """
    Stateful front end over the simulation engine.

    Attributes:
        config: The SimulatorConfig in effect
        history: The timeline of produced states

    Example:
        >>> sim = Simulator(source="MOV AX, 5\\nADD AX, 7")
        >>> sim.step().last_action
        'MOV: AX <- 5H'
        >>> sim.step_back().pc
        0
    """

    def __init__(self, config: Optional[SimulatorConfig] = None, source: str = ""):
        """
        Initialize the simulator.

        Args:
            config: SimulatorConfig to use. Defaults to a 100H-byte stack.
            source: Initial program text
        """
        self.config = config or SimulatorConfig()
        self._source = source
        self._instructions: List[Instruction] = parse_source(source)
        self.history = History(create_initial_state(self.config.stack_size))

    # =========================================================================
    # Program and Configuration
    # =========================================================================

    def load_source(self, source: str) -> None:
        """Replace the program text, reparse it and reset the history."""
        self._source = source
        self._instructions = parse_source(source)
        logger.debug(f"Loaded program: {len(self._instructions)} instructions")
        self.reset()

    def set_stack_size(self, stack_size: int) -> None:
        """
        Change the stack size and reset the history.

        Raises:
            ConfigurationError: If the stack size is invalid
        """
        self.config = replace(self.config, stack_size=stack_size)
        self.reset()

    def reset(self) -> None:
        """Discard the history and start again from the initial state."""
        self.history.reset(create_initial_state(self.config.stack_size))

    # =========================================================================
    # Execution Control
    # =========================================================================

    def step(self) -> CpuState:
        """Advance one micro-step (replaying recorded history if available)."""
        return self.history.step_forward(self._instructions)

    def step_back(self) -> CpuState:
        """Go back one micro-step in the history."""
        return self.history.step_back()

    def run(
        self,
        max_steps: Optional[int] = None,
        on_step: Optional[Callable[[Instruction, CpuState], None]] = None,
    ) -> StopEvent:
        """
        Step until the program finishes, a micro-step faults, or the budget
        runs out.

        Args:
            max_steps: Micro-step budget (defaults to config.max_steps)
            on_step: Called after every micro-step with the instruction that
                ran and the resulting state

        Returns:
            StopEvent describing why execution stopped
        """
        budget = max_steps if max_steps is not None else self.config.max_steps
        steps = 0

        while not self.is_finished:
            if steps >= budget:
                logger.debug(f"Run stopped: budget of {budget} micro-steps exhausted")
                return StopEvent(StopReason.MAX_STEPS, steps=steps, pc=self.state.pc)
            instruction = self._instructions[self.state.pc]
            state = self.step()
            steps += 1
            if on_step is not None:
                on_step(instruction, state)
            if state.error:
                logger.debug(f"Run stopped on error after {steps} micro-steps: {state.error}")
                return StopEvent(
                    StopReason.ERROR,
                    steps=steps,
                    pc=state.pc,
                    message=state.error,
                )

        return StopEvent(StopReason.END_OF_PROGRAM, steps=steps, pc=self.state.pc)

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def source(self) -> str:
        return self._source

    @property
    def instructions(self) -> List[Instruction]:
        """Parsed program (a copy)."""
        return list(self._instructions)

    @property
    def state(self) -> CpuState:
        """State under the history cursor."""
        return self.history.current

    @property
    def registers(self) -> Dict[str, int]:
        """Current register values keyed by name."""
        return {reg.value: value for reg, value in self.state.registers.items()}

    @property
    def active_line(self) -> Optional[int]:
        """Source line of the instruction at pc, or None when finished."""
        if self.is_finished:
            return None
        return self._instructions[self.state.pc].source_line

    @property
    def is_finished(self) -> bool:
        return self.state.pc >= len(self._instructions)

    @property
    def can_step_back(self) -> bool:
        return self.history.can_step_back

    @property
    def can_step_forward(self) -> bool:
        return self.history.can_step_forward(self._instructions)

    def __repr__(self) -> str:
        return (
            f"Simulator(stack_size={self.config.stack_size:#x}, "
            f"instructions={len(self._instructions)}, pc={self.state.pc}, "
            f"step={self.history.index}/{len(self.history) - 1})"
        )
