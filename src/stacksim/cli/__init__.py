"""
StackSim Command-Line Interface
===============================

This package provides the `stacksim` command-line tool:

- **stacksim run**: execute a program micro-step by micro-step
- **stacksim parse**: show how a program is decoded

The tool is a Click-based CLI application with comprehensive help and
consistent exit codes (see `errors.py`).
"""

__all__ = ["stacksim"]
