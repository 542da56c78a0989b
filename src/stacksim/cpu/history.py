"""
Execution History
=================

An append-only log of CpuState snapshots with a movable cursor.

Stepping forward while the cursor is behind the end replays the stored
state instead of recomputing it, so going back and forth always shows the
same future. Stepping forward at the end asks the stepper for a new state
and appends it. Stepping back only moves the cursor; nothing is ever
discarded until `reset()`.

Example:
    >>> history = History(create_initial_state(0x100))
    >>> history.step_forward(instructions)
    >>> history.step_back()
    >>> history.step_forward(instructions)   # replayed, not recomputed

Copyright (c) 2026 StackSim Contributors
"""

import logging
from typing import List, Sequence

from stacksim.assembler.opcodes import Instruction
from stacksim.cpu.state import CpuState
from stacksim.cpu.stepper import step

logger = logging.getLogger(__name__)


class History:
    """
    Timeline of simulator states.

    Attributes:
        index: Cursor position (index of the current state)
    """

    def __init__(self, initial: CpuState):
        """
        Start a timeline holding a single snapshot.

        Args:
            initial: State at index 0
        """
        self._states: List[CpuState] = [initial]
        self.index = 0

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def current(self) -> CpuState:
        """State under the cursor."""
        return self._states[self.index]

    @property
    def states(self) -> tuple:
        """All recorded states, oldest first."""
        return tuple(self._states)

    @property
    def at_end(self) -> bool:
        """True when the cursor is on the newest state."""
        return self.index == len(self._states) - 1

    @property
    def can_step_back(self) -> bool:
        return self.index > 0

    def __len__(self) -> int:
        return len(self._states)

    def __getitem__(self, index: int) -> CpuState:
        return self._states[index]

    # =========================================================================
    # Navigation
    # =========================================================================

    def can_step_forward(self, instructions: Sequence[Instruction]) -> bool:
        """True if a recorded future exists or the program has not finished."""
        return not self.at_end or self.current.pc < len(instructions)

    def step_forward(self, instructions: Sequence[Instruction]) -> CpuState:
        """
        Move one micro-step forward.

        Replays a recorded state when the cursor is behind the end; otherwise
        computes the next state and appends it. A finished program at the
        end of the log is left as is.

        Args:
            instructions: Program the states were produced from

        Returns:
            The state under the cursor after moving
        """
        if not self.at_end:
            self.index += 1
            logger.debug(f"Replayed state {self.index}/{len(self._states) - 1}")
            return self.current

        if self.current.pc >= len(instructions):
            return self.current

        self._states.append(step(self.current, instructions))
        self.index += 1
        logger.debug(f"Recorded state {self.index} (pc={self.current.pc})")
        return self.current

    def step_back(self) -> CpuState:
        """Move the cursor one state back (no-op at the start)."""
        if self.can_step_back:
            self.index -= 1
        return self.current

    def seek(self, index: int) -> CpuState:
        """
        Move the cursor to a recorded state.

        Raises:
            IndexError: If no state is recorded at `index`
        """
        if not 0 <= index < len(self._states):
            raise IndexError(f"No recorded state at index {index}")
        self.index = index
        return self.current

    def reset(self, initial: CpuState) -> None:
        """Discard the whole log and start again from `initial`."""
        logger.debug(f"History reset ({len(self._states)} states discarded)")
        self._states = [initial]
        self.index = 0
