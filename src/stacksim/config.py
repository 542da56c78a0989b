"""
Simulator Configuration
=======================

Configuration owned by the caller and passed into the simulator. Values can
come from:
- Default values (defined here)
- Explicit construction
- Environment variables (SimulatorConfig.from_env)

The stack size doubles as the initial SP and the stack base, so it must be a
positive even number of bytes that fits in a 16-bit register. The usual
choices are 100H, 200H and 400H.

Copyright (c) 2026 StackSim Contributors
"""

import os
from dataclasses import dataclass

from stacksim.cpu.state import DEFAULT_STACK_SIZE, validate_stack_size
from stacksim.errors import ConfigurationError


DEFAULT_MAX_STEPS = 10_000
STANDARD_STACK_SIZES = (0x100, 0x200, 0x400)


def parse_stack_size(text: str) -> int:
    """
    Parse a stack size written as 256, 256D, 100H or 0x100.

    Raises:
        ConfigurationError: If the text is not a valid stack size
    """
    token = text.strip().upper()
    try:
        if token.startswith("0X"):
            value = int(token[2:], 16)
        elif token.endswith("H"):
            value = int(token[:-1], 16)
        elif token.endswith("D"):
            value = int(token[:-1], 10)
        else:
            value = int(token, 10)
    except ValueError:
        raise ConfigurationError(f"Invalid stack size '{text}'") from None
    return validate_stack_size(value)


@dataclass(frozen=True)
class SimulatorConfig:
    """
    Configuration for a Simulator.

    Attributes:
        stack_size: Stack size in bytes; initial SP and stack base
            (default: 100H)
        max_steps: Micro-step budget for Simulator.run (default: 10,000)

    Example:
        >>> config = SimulatorConfig(stack_size=0x200)
        >>> config = SimulatorConfig.from_env()
    """
    stack_size: int = DEFAULT_STACK_SIZE
    max_steps: int = DEFAULT_MAX_STEPS

    def __post_init__(self) -> None:
        validate_stack_size(self.stack_size)
        if isinstance(self.max_steps, bool) or not isinstance(self.max_steps, int) \
                or self.max_steps <= 0:
            raise ConfigurationError(
                f"max_steps must be a positive integer, got {self.max_steps!r}"
            )

    @classmethod
    def from_env(cls) -> "SimulatorConfig":
        """
        Create SimulatorConfig from environment variables.

        Environment variables (all optional):
            STACKSIM_STACK_SIZE: Stack size (256, 100H, 0x100)
            STACKSIM_MAX_STEPS: Micro-step budget for run (integer)

        Raises:
            ConfigurationError: If a variable is set but malformed
        """
        stack_size = DEFAULT_STACK_SIZE
        max_steps = DEFAULT_MAX_STEPS

        if size := os.environ.get("STACKSIM_STACK_SIZE"):
            stack_size = parse_stack_size(size)

        if steps := os.environ.get("STACKSIM_MAX_STEPS"):
            try:
                max_steps = int(steps)
            except ValueError:
                raise ConfigurationError(
                    f"STACKSIM_MAX_STEPS must be an integer, got '{steps}'"
                ) from None

        return cls(stack_size=stack_size, max_steps=max_steps)
