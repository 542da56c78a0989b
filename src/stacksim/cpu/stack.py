"""
Stack Memory View
=================

Read-only queries over CpuState for presenting the stack: the window of
addresses around the stack base and word formatting in hex, decimal or
ASCII.

The stack grows downward. Addresses in [SP, stack_base) hold pushed words;
stack_base itself is the empty-stack position and is never written.

Copyright (c) 2026 StackSim Contributors
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from stacksim.cpu.state import CpuState


DEFAULT_WINDOW_BELOW = 0x50
DEFAULT_WINDOW_ABOVE = 4


class DisplayMode(Enum):
    """How stack words are rendered."""
    HEX = "hex"
    DEC = "dec"
    ASCII = "ascii"


@dataclass(frozen=True)
class StackCell:
    """
    One word-sized row of the stack view.

    Attributes:
        address: Word address
        value: Stored value (0 if never written)
        written: True if the address has ever been written
        allocated: True if SP <= address < stack_base
        is_top: True if SP points here
        is_base: True for the stack base
    """
    address: int
    value: int
    written: bool
    allocated: bool
    is_top: bool
    is_base: bool


def stack_window(
    state: CpuState,
    below: int = DEFAULT_WINDOW_BELOW,
    above: int = DEFAULT_WINDOW_ABOVE,
) -> List[StackCell]:
    """
    Build the stack view around the stack base.

    Args:
        state: State to inspect
        below: Bytes shown below the stack base
        above: Bytes shown above the stack base

    Returns:
        Cells for every even address in range, highest address first
    """
    sp = state.sp
    base = state.stack_base
    low = max(0, base - below)
    low += (base - low) % 2
    high = base + above - above % 2
    cells = []
    for address in range(high, low - 1, -2):
        cells.append(StackCell(
            address=address,
            value=state.read_word(address),
            written=address in state.memory,
            allocated=sp <= address < base,
            is_top=address == sp,
            is_base=address == base,
        ))
    return cells


def _printable(code: int) -> str:
    return chr(code) if 32 <= code <= 126 else "."


def format_word(value: Optional[int], mode: DisplayMode = DisplayMode.HEX) -> str:
    """
    Render a 16-bit word.

    Args:
        value: Word to render, or None for a cell never written
        mode: HEX (00FF), DEC (255) or ASCII (two characters)

    Returns:
        Display text
    """
    if value is None:
        return ".." if mode is DisplayMode.ASCII else "0000"

    match mode:
        case DisplayMode.DEC:
            return str(value)
        case DisplayMode.ASCII:
            high = (value >> 8) & 0xFF
            low = value & 0xFF
            if high == 0:
                return f".{_printable(low)}"
            return f"{_printable(high)}{_printable(low)}"
        case _:
            return f"{value:04X}"


def format_address(address: int) -> str:
    """Render an address as four hex digits."""
    return f"{address:04X}"
