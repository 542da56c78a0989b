"""
StackSim Error Hierarchy
========================

This module defines the exception hierarchy for the whole simulator.
All exceptions inherit from StackSimError, allowing callers to catch all
simulator-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
StackSimError (base)
├── ConfigurationError - invalid stack size, step budget or environment value
└── ExecutionError (a micro-step that cannot be carried out)
    ├── MissingOperandError - required operand absent
    ├── InvalidOperandError - operand is neither a register nor a literal
    ├── InvalidDestinationError - destination does not name a register
    ├── StackOverflowError - SP would go below 0
    └── StackUnderflowError - SP would rise above the stack base

Execution errors never escape the stepper: `stacksim.cpu.stepper.step`
catches them at its boundary and records the message in `CpuState.error`.
They are raised by `stacksim.cpu.stepper.execute`, which is the variant used
when a caller wants the exception itself.

Copyright (c) 2026 StackSim Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class StackSimError(Exception):
    """
    Base exception for all StackSim errors.

        try:
            sim = Simulator(SimulatorConfig(stack_size=3))
        except StackSimError as e:
            print(f"Error: {e}")
    """
    pass


class ConfigurationError(StackSimError):
    """
    Invalid simulator configuration.

    Raised for stack sizes that are not positive even 16-bit values, for
    non-positive step budgets, and for malformed environment overrides.
    """
    pass


# =============================================================================
# Execution Exceptions
# =============================================================================

class ExecutionError(StackSimError):
    """
    Base exception for a micro-step that cannot be carried out.

    Attributes:
        message: The error description
        pc: Index of the faulting instruction (optional)
        opcode: Mnemonic of the faulting instruction (optional)
    """

    def __init__(
        self,
        message: str,
        pc: Optional[int] = None,
        opcode: Optional[str] = None,
    ):
        self.message = message
        self.pc = pc
        self.opcode = opcode
        super().__init__(message)


class MissingOperandError(ExecutionError):
    """
    A required operand is absent.

    Examples:
        - PUSH
        - MOV AX
    """
    pass


class InvalidOperandError(ExecutionError):
    """
    Operand text resolves to neither a register nor a parseable literal.

    Examples:
        - MOV AX, FOO
        - ADD AX, 12Q
    """
    pass


class InvalidDestinationError(ExecutionError):
    """
    The destination operand must name a register but does not.

    Examples:
        - MOV 5, AX
        - POP 1234H
        - XCHG AX, 7
    """
    pass


class StackOverflowError(ExecutionError):
    """SP would move below address 0."""
    pass


class StackUnderflowError(ExecutionError):
    """SP would move above the stack base (nothing left to pop)."""
    pass
