"""
CLI Error Handling
==================

Maps simulator outcomes and exceptions to messages and exit codes.

Two kinds of failure reach the CLI:

- Exceptions raised while setting up a run (bad configuration, unreadable
  files, bugs). These go through `handle_cli_exception`.
- Runs that stop early (a faulting micro-step or an exhausted step budget).
  These are not exceptions; `exit_for_stop` reports them from the
  simulator's StopEvent.

Copyright (c) 2026 StackSim Contributors
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn, Optional

import click

from stacksim.errors import ConfigurationError, StackSimError
from stacksim.simulator import StopEvent, StopReason


class ExitCode(IntEnum):
    """Exit codes of the stacksim command."""
    SUCCESS = 0
    EXECUTION_ERROR = 1  # Program faulted, ran out of steps, or bad config
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print the traceback for internal errors

    Raises:
        SystemExit: Always
    """
    match error:
        case ConfigurationError():
            click.echo(f"Configuration error: {error}", err=True)
            sys.exit(ExitCode.EXECUTION_ERROR)
        case StackSimError():
            click.echo(f"Error: {error}", err=True)
            sys.exit(ExitCode.EXECUTION_ERROR)
        case click.BadParameter() | FileNotFoundError() | PermissionError():
            click.echo(f"Error: {error}", err=True)
            sys.exit(ExitCode.INVALID_ARGS)
        case _:
            click.echo(f"Internal error: {error}", err=True)
            if verbose:
                traceback.print_exc()
            sys.exit(ExitCode.INTERNAL_ERROR)


def exit_for_stop(event: StopEvent, line: Optional[int] = None) -> None:
    """
    Report how a run ended, exiting non-zero unless it finished normally.

    Args:
        event: Result of Simulator.run
        line: 0-based source line of the faulting instruction, if known
    """
    match event.reason:
        case StopReason.END_OF_PROGRAM:
            click.echo(str(event))
        case StopReason.ERROR:
            where = f" (line {line + 1})" if line is not None else ""
            click.echo(f"Error{where}: {event.message}", err=True)
            sys.exit(ExitCode.EXECUTION_ERROR)
        case StopReason.MAX_STEPS:
            click.echo(str(event), err=True)
            sys.exit(ExitCode.EXECUTION_ERROR)
