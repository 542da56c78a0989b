"""
stacksim - Stack Simulator Command-Line Interface
=================================================

Runs programs written in the simulator's instruction subset and shows the
resulting registers and stack.

Usage Examples
--------------
Run a program and print the final state:
    $ stacksim run demo.asm

Show every micro-step:
    $ stacksim run demo.asm --trace

Use a bigger stack and show stack words as ASCII:
    $ stacksim run demo.asm --stack-size 200H --format ascii

List the decoded instructions:
    $ stacksim parse demo.asm

Environment
-----------
STACKSIM_STACK_SIZE and STACKSIM_MAX_STEPS provide defaults for
--stack-size and --max-steps.

Exit Codes
----------
0 - Program ran to completion
1 - Program stopped on a fault, or the step budget ran out
2 - Invalid arguments
3 - Internal error

Copyright (c) 2026 StackSim Contributors
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from stacksim import __version__
from stacksim.assembler.opcodes import Instruction
from stacksim.assembler.parser import parse_source
from stacksim.cli.errors import exit_for_stop, handle_cli_exception
from stacksim.config import STANDARD_STACK_SIZES, SimulatorConfig, parse_stack_size
from stacksim.cpu.stack import DisplayMode, format_address, format_word, stack_window
from stacksim.cpu.state import CpuState, Register
from stacksim.errors import ConfigurationError
from stacksim.simulator import Simulator

# Configure logging
logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores common options like verbosity.
    """

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def _stack_size_option(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[int]:
    """Click callback turning '256', '100H' or '0x100' into an int."""
    if value is None:
        return None
    try:
        return parse_stack_size(value)
    except ConfigurationError as e:
        raise click.BadParameter(str(e)) from None


def read_source(path: Path) -> str:
    """Read a program file as UTF-8 text."""
    return path.read_text(encoding="utf-8")


def format_registers(state: CpuState) -> str:
    """Render the register file on one line, marking changed registers."""
    changed = set(state.changed_registers)
    parts = []
    for reg in Register:
        mark = "*" if reg in changed else " "
        parts.append(f"{reg.value}={state.registers[reg]:04X}{mark}")
    return " ".join(parts)


def format_stack(state: CpuState, mode: DisplayMode, below: int) -> str:
    """Render the stack window, highest address first."""
    lines = []
    for cell in stack_window(state, below=below):
        value = format_word(cell.value if cell.written else None, mode)
        markers = []
        if cell.is_top:
            markers.append("<- SP")
        if cell.is_base:
            markers.append("(base)")
        if cell.address == state.highlighted_address:
            markers.append("*")
        used = "|" if cell.allocated else " "
        lines.append(f"  {format_address(cell.address)} {used} {value:>5}  {' '.join(markers)}".rstrip())
    return "\n".join(lines)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose (debug) output",
)
@click.version_option(version=__version__, prog_name="stacksim")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Step through stack programs (MOV, PUSH, POP, ADD, SUB, XCHG, NOP).

    Registers are AX, BX, CX, DX, SS and SP. Literals are decimal (122 or
    122D) or hexadecimal with an H suffix (7AH). Comments start with ';'.
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Run Command
# =============================================================================

@main.command()
@click.argument(
    "source_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-s", "--stack-size",
    callback=_stack_size_option,
    default=None,
    help="Stack size in bytes, also the initial SP. Accepts 256, 100H or 0x100. "
         f"Common sizes: {', '.join(f'{s:X}H' for s in STANDARD_STACK_SIZES)}. Default: 100H.",
)
@click.option(
    "-n", "--max-steps",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of micro-steps to execute (default: 10000)",
)
@click.option(
    "-t", "--trace",
    is_flag=True,
    help="Print every micro-step as it executes",
)
@click.option(
    "-f", "--format", "display_format",
    type=click.Choice([m.value for m in DisplayMode], case_sensitive=False),
    default=DisplayMode.HEX.value,
    help="How stack words are shown (default: hex)",
)
@click.option(
    "-w", "--window",
    type=click.IntRange(min=0),
    default=0x10,
    help="Bytes of stack shown below the stack base (default: 16)",
)
@pass_context
def run(
    ctx: Context,
    source_file: Path,
    stack_size: Optional[int],
    max_steps: Optional[int],
    trace: bool,
    display_format: str,
    window: int,
) -> None:
    """
    Execute SOURCE_FILE and print the final registers and stack.

    PUSH and POP take two micro-steps each; every other instruction takes
    one. Execution stops at the end of the program or at the first fault.

    \b
    Examples:
        stacksim run demo.asm
        stacksim run demo.asm --trace --stack-size 200H
    """
    try:
        config = SimulatorConfig.from_env()
        if stack_size is not None:
            config = replace(config, stack_size=stack_size)
        if max_steps is not None:
            config = replace(config, max_steps=max_steps)

        sim = Simulator(config, read_source(source_file))
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)

    logger.debug(f"Running {source_file} ({len(sim.instructions)} instructions, "
                 f"stack size {config.stack_size:04X}H)")

    event = sim.run(on_step=_print_step if trace else None)

    mode = DisplayMode(display_format.lower())
    click.echo(format_registers(sim.state))
    click.echo(format_stack(sim.state, mode, window))

    exit_for_stop(event, sim.active_line)


def _print_step(inst: Instruction, state: CpuState) -> None:
    """Trace hook: one line per micro-step."""
    if state.error:
        return
    click.echo(f"{inst.source_line + 1:4d}: {inst.raw:<20} {state.last_action}")


# =============================================================================
# Parse Command
# =============================================================================

@main.command()
@click.argument(
    "source_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def parse(ctx: Context, source_file: Path) -> None:
    """
    List the instructions decoded from SOURCE_FILE.

    Each row shows the source line number, the mnemonic, the operands and
    the number of micro-steps the instruction takes. Unknown mnemonics are
    listed as NOP.
    """
    try:
        instructions = parse_source(read_source(source_file))
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)

    if not instructions:
        click.echo("No instructions.")
        return

    for index, inst in enumerate(instructions):
        operands = ", ".join(op for op in (inst.operand1, inst.operand2) if op is not None)
        click.echo(
            f"{index:3d}  line {inst.source_line + 1:3d}  "
            f"{inst.opcode.value:<5} {operands:<16} ({inst.opcode.micro_steps} step"
            f"{'s' if inst.opcode.micro_steps > 1 else ''})"
        )
    total = sum(inst.opcode.micro_steps for inst in instructions)
    click.echo(f"{len(instructions)} instructions, {total} micro-steps")


if __name__ == "__main__":
    main()
