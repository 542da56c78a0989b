"""
Micro-step Execution Engine
===========================

The state-transition function of the simulator: given a CpuState and the
instruction list, produce the state after one micro-step.

Pipeline Model
--------------
Most instructions complete in a single micro-step. PUSH and POP are split in
two so the stack pointer movement and the memory transfer can be observed
separately:

    PUSH src   FETCH         -> STACK_PHASE_2   SP := SP - 2
               STACK_PHASE_2 -> FETCH           [SP] := src, pc += 1

    POP dest   FETCH         -> STACK_PHASE_2   dest := [SP]
               STACK_PHASE_2 -> FETCH           SP := SP + 2, pc += 1

pc only moves when an instruction completes.

Error Handling
--------------
`execute()` raises an ExecutionError subclass for any fault. `step()` wraps
it: a faulting micro-step returns the input state unchanged except for
`error`, so nothing is partially applied and the same micro-step can be
retried. Neither function mutates its input.

Copyright (c) 2026 StackSim Contributors
"""

import logging
import re
from dataclasses import replace
from typing import Dict, Optional, Sequence, assert_never

from stacksim.assembler.opcodes import Instruction, Opcode
from stacksim.cpu.state import CpuState, PipelinePhase, Register, WORD_MASK
from stacksim.errors import (
    ExecutionError,
    InvalidDestinationError,
    InvalidOperandError,
    MissingOperandError,
    StackOverflowError,
    StackUnderflowError,
)

logger = logging.getLogger(__name__)

END_OF_PROGRAM = "End of program"

_HEX_LITERAL = re.compile(r"^([0-9A-F]+)H$")
_DEC_LITERAL = re.compile(r"^([0-9]+)D?$")


# =============================================================================
# Operand Resolution
# =============================================================================

def parse_literal(text: str) -> Optional[int]:
    """
    Parse an immediate literal.

    Accepts hexadecimal with an H suffix (1234H) and decimal with an optional
    D suffix (122, 122D). Case-insensitive.

    Returns:
        The integer value (not masked), or None if `text` is not a literal
    """
    token = text.strip().upper()
    if match := _HEX_LITERAL.match(token):
        return int(match.group(1), 16)
    if match := _DEC_LITERAL.match(token):
        return int(match.group(1), 10)
    return None


def resolve_operand(registers: Dict[Register, int], operand: str) -> int:
    """
    Resolve operand text to a value.

    Register names (any case) read the register; anything else must be a
    literal.

    Raises:
        InvalidOperandError: If the operand is neither
    """
    register = Register.lookup(operand)
    if register is not None:
        return registers[register]
    value = parse_literal(operand)
    if value is None:
        raise InvalidOperandError(f"Invalid operand '{operand}'")
    return value


def _require(operand: Optional[str], opcode: Opcode, what: str) -> str:
    if operand is None or not operand.strip():
        raise MissingOperandError(f"{opcode.value} requires {what}")
    return operand


def _destination(operand: str, opcode: Opcode) -> Register:
    register = Register.lookup(operand)
    if register is None:
        raise InvalidDestinationError(
            f"{opcode.value} destination '{operand}' is not a register"
        )
    return register


# =============================================================================
# Register File Writes
# =============================================================================

def _write_register(
    registers: Dict[Register, int],
    register: Register,
    value: int,
    stack_base: int,
) -> None:
    """
    Store a value into a (working copy of the) register file.

    Values are masked to 16 bits. SP is additionally kept within
    [0, stack_base].
    """
    if register is Register.SP:
        if value < 0:
            raise StackOverflowError("Stack Overflow: SP would move below 0000H")
        if value > stack_base:
            raise StackUnderflowError(
                f"Stack Underflow: SP would move above stack base {stack_base:04X}H"
            )
    registers[register] = value & WORD_MASK


def _detach(state: CpuState, **changes) -> CpuState:
    """
    Derive a new state that owns fresh copies of every mutable collection.

    All states leave the stepper through here (directly or via the working
    state), so no two states ever share a register file or memory dict.
    """
    changes.setdefault("registers", dict(state.registers))
    changes.setdefault("previous_registers", dict(state.previous_registers))
    changes.setdefault("memory", dict(state.memory))
    return replace(state, **changes)


# =============================================================================
# Opcode Handlers
# =============================================================================
# Each handler receives the prepared working state (collections copied,
# registers snapshotted, transient fields cleared) and returns the finished
# next state.

def _complete(state: CpuState, **changes) -> CpuState:
    """Finish an instruction: advance pc and return to FETCH."""
    return replace(state, pc=state.pc + 1, phase=PipelinePhase.FETCH, **changes)


def _exec_push(state: CpuState, inst: Instruction) -> CpuState:
    source = _require(inst.operand1, inst.opcode, "an operand")
    registers = dict(state.registers)

    if state.phase is PipelinePhase.FETCH:
        _write_register(registers, Register.SP, registers[Register.SP] - 2, state.stack_base)
        return replace(
            state,
            registers=registers,
            phase=PipelinePhase.STACK_PHASE_2,
            last_action="PUSH (Step 1/2): Decrement SP by 2",
        )

    # Phase 2: SP already points at the new top
    value = resolve_operand(registers, source) & WORD_MASK
    address = registers[Register.SP]
    memory = dict(state.memory)
    memory[address] = value
    return _complete(
        state,
        registers=registers,
        memory=memory,
        highlighted_address=address,
        last_action=f"PUSH (Step 2/2): Store {value:X}H at top",
    )


def _exec_pop(state: CpuState, inst: Instruction) -> CpuState:
    target = _require(inst.operand1, inst.opcode, "a destination register")
    registers = dict(state.registers)
    sp = registers[Register.SP]

    if state.phase is PipelinePhase.FETCH:
        if sp >= state.stack_base:
            raise StackUnderflowError("Stack Underflow: nothing to pop")
        dest = _destination(target, inst.opcode)
        _write_register(registers, dest, state.read_word(sp), state.stack_base)
        return replace(
            state,
            registers=registers,
            phase=PipelinePhase.STACK_PHASE_2,
            highlighted_address=sp,
            last_action=f"POP (Step 1/2): Copy data from Stack to {dest.value}",
        )

    _write_register(registers, Register.SP, sp + 2, state.stack_base)
    return _complete(
        state,
        registers=registers,
        last_action="POP (Step 2/2): Increment SP by 2",
    )


def _exec_mov(state: CpuState, inst: Instruction) -> CpuState:
    target = _require(inst.operand1, inst.opcode, "a destination")
    source = _require(inst.operand2, inst.opcode, "a source operand")
    dest = _destination(target, inst.opcode)
    registers = dict(state.registers)

    value = resolve_operand(registers, source) & WORD_MASK
    _write_register(registers, dest, value, state.stack_base)
    return _complete(
        state,
        registers=registers,
        last_action=f"MOV: {dest.value} <- {value:X}H",
    )


def _exec_arithmetic(state: CpuState, inst: Instruction) -> CpuState:
    target = _require(inst.operand1, inst.opcode, "a destination")
    source = _require(inst.operand2, inst.opcode, "a source operand")
    dest = _destination(target, inst.opcode)
    registers = dict(state.registers)

    operand = resolve_operand(registers, source)
    if inst.opcode is Opcode.ADD:
        result = (registers[dest] + operand) & WORD_MASK
        symbol = "+"
    else:
        result = (registers[dest] - operand) & WORD_MASK
        symbol = "-"
    _write_register(registers, dest, result, state.stack_base)
    return _complete(
        state,
        registers=registers,
        last_action=f"{inst.opcode.value}: {dest.value} {symbol} {operand} = {result}",
    )


def _exec_xchg(state: CpuState, inst: Instruction) -> CpuState:
    first = _destination(_require(inst.operand1, inst.opcode, "two registers"), inst.opcode)
    second = _destination(_require(inst.operand2, inst.opcode, "two registers"), inst.opcode)
    registers = dict(state.registers)

    first_value, second_value = registers[first], registers[second]
    _write_register(registers, first, second_value, state.stack_base)
    _write_register(registers, second, first_value, state.stack_base)
    return _complete(
        state,
        registers=registers,
        last_action=f"XCHG: {first.value} <-> {second.value}",
    )


def _exec_nop(state: CpuState, inst: Instruction) -> CpuState:
    return _complete(state, last_action=f"Executed {inst.opcode.value}")


# =============================================================================
# Public API
# =============================================================================

def execute(state: CpuState, instructions: Sequence[Instruction]) -> CpuState:
    """
    Run one micro-step, raising on faults.

    Args:
        state: Current state (not modified)
        instructions: Parsed program

    Returns:
        The next state

    Raises:
        ExecutionError: If the micro-step cannot be carried out. The
            exception carries the faulting pc and opcode.
    """
    if state.pc >= len(instructions):
        return _detach(state, last_action=END_OF_PROGRAM)

    inst = instructions[state.pc]
    working = _detach(
        state,
        previous_registers=dict(state.registers),
        last_action=None,
        error=None,
        highlighted_address=None,
    )

    try:
        match inst.opcode:
            case Opcode.PUSH:
                return _exec_push(working, inst)
            case Opcode.POP:
                return _exec_pop(working, inst)
            case Opcode.MOV:
                return _exec_mov(working, inst)
            case Opcode.ADD | Opcode.SUB:
                return _exec_arithmetic(working, inst)
            case Opcode.XCHG:
                return _exec_xchg(working, inst)
            case Opcode.NOP:
                return _exec_nop(working, inst)
            case _:
                assert_never(inst.opcode)
    except ExecutionError as e:
        e.pc = state.pc
        e.opcode = inst.opcode.value
        raise


def step(state: CpuState, instructions: Sequence[Instruction]) -> CpuState:
    """
    Run one micro-step.

    Never raises for execution faults: a faulting micro-step returns the
    input state with only `error` set.

    Args:
        state: Current state (not modified)
        instructions: Parsed program

    Returns:
        The next state, or the input state carrying an error message
    """
    try:
        return execute(state, instructions)
    except ExecutionError as e:
        logger.debug(f"Fault at pc={e.pc} ({e.opcode}): {e}")
        return _detach(state, error=str(e))
