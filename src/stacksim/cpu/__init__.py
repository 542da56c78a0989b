"""
StackSim CPU Engine
===================

The state model, the micro-step state machine and the history log.

Module Structure
----------------
- `state.py`: Register, PipelinePhase, Flags, CpuState, create_initial_state
- `stepper.py`: step() / execute(), the state-transition function
- `history.py`: History, the replayable timeline of states
- `stack.py`: Stack window and word formatting for display

Copyright (c) 2026 StackSim Contributors
"""

from .state import (
    CpuState,
    Flags,
    PipelinePhase,
    Register,
    create_initial_state,
    validate_stack_size,
    DEFAULT_STACK_SIZE,
    READY_MESSAGE,
    WORD_MASK,
)
from .stepper import END_OF_PROGRAM, execute, parse_literal, resolve_operand, step
from .history import History
from .stack import DisplayMode, StackCell, format_address, format_word, stack_window

__all__ = [
    # State
    "CpuState",
    "Flags",
    "PipelinePhase",
    "Register",
    "create_initial_state",
    "validate_stack_size",
    "DEFAULT_STACK_SIZE",
    "READY_MESSAGE",
    "WORD_MASK",

    # Stepper
    "END_OF_PROGRAM",
    "execute",
    "parse_literal",
    "resolve_operand",
    "step",

    # History
    "History",

    # Stack view
    "DisplayMode",
    "StackCell",
    "format_address",
    "format_word",
    "stack_window",
]
