"""
StackSim - Stack Operation Visualizer Engine
============================================

This package simulates a tiny 8086-flavoured instruction subset one
micro-step at a time, for teaching how the hardware stack works.

The simulated machine has four general purpose registers (AX, BX, CX, DX),
a segment register (SS) and a stack pointer (SP) that descends from a
configurable stack base. PUSH and POP take two micro-steps each so the
stack pointer movement and the memory transfer can be watched separately.

Main Components
---------------
- **assembler**: Source parser (parse_source)
    Converts program text to an instruction list; never rejects input

- **cpu**: Simulation engine
    CpuState, the pure step() function and the replayable History

- **simulator**: Simulator
    Stateful front end owning source, configuration and history

- **cli**: Command-line tool (stacksim)

Quick Start
-----------
Step through a program:
    >>> from stacksim import Simulator
    >>> sim = Simulator(source="MOV AX, 122D\\nPUSH AX\\nPOP BX")
    >>> sim.step().last_action
    'MOV: AX <- 7AH'
    >>> sim.step().last_action
    'PUSH (Step 1/2): Decrement SP by 2'

Use the engine directly:
    >>> from stacksim import Register, create_initial_state, parse_source, step
    >>> program = parse_source("MOV AX, 0\\nSUB AX, 1")
    >>> state = create_initial_state(0x100)
    >>> state = step(step(state, program), program)
    >>> hex(state.registers[Register.AX])
    '0xffff'

Or use the command-line tool:
    $ stacksim run demo.asm --trace
    $ stacksim parse demo.asm

Version History
---------------
1.0.0 - Initial release with parser, stepper, history and CLI
"""

__version__ = "1.0.0"
__author__ = "StackSim Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from stacksim.assembler import Instruction, Opcode, parse_source
from stacksim.config import SimulatorConfig, parse_stack_size
from stacksim.cpu import (
    CpuState,
    DisplayMode,
    Flags,
    History,
    PipelinePhase,
    Register,
    StackCell,
    create_initial_state,
    execute,
    format_word,
    stack_window,
    step,
)
from stacksim.errors import (
    StackSimError,
    ConfigurationError,
    ExecutionError,
    MissingOperandError,
    InvalidOperandError,
    InvalidDestinationError,
    StackOverflowError,
    StackUnderflowError,
)
from stacksim.simulator import Simulator, StopEvent, StopReason

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Parser
    "Instruction",
    "Opcode",
    "parse_source",
    # Engine
    "CpuState",
    "Flags",
    "PipelinePhase",
    "Register",
    "create_initial_state",
    "execute",
    "step",
    "History",
    # Stack view
    "DisplayMode",
    "StackCell",
    "format_word",
    "stack_window",
    # Simulator
    "Simulator",
    "SimulatorConfig",
    "StopEvent",
    "StopReason",
    "parse_stack_size",
    # Exception hierarchy
    "StackSimError",
    "ConfigurationError",
    "ExecutionError",
    "MissingOperandError",
    "InvalidOperandError",
    "InvalidDestinationError",
    "StackOverflowError",
    "StackUnderflowError",
]
