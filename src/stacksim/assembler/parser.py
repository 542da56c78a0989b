"""
Source Parser
=============

Converts source text into the instruction list the stepper executes.

The parser is deliberately permissive: it never raises. An editor calls it
on every keystroke, so half-typed lines must not block anything. Lines are
handled as follows:

1. Everything from the first ';' onward is a comment and is removed.
2. Surrounding whitespace is trimmed; an empty result yields no instruction.
3. The rest is split on runs of whitespace and commas.
4. The first token selects the opcode (case-insensitive, unknown -> NOP).
5. The second and third tokens become the operands, kept verbatim.

Line numbers are 0-based and always refer to the original source, so blank
and comment-only lines leave gaps in `source_line`.

Example
-------
>>> from stacksim.assembler import parse_source
>>> for inst in parse_source("; demo\\nMOV AX, 122D\\nPUSH AX"):
...     print(inst.source_line, inst)
1 MOV AX, 122D
2 PUSH AX
"""

import re
from typing import List, Optional

from stacksim.assembler.opcodes import Instruction, Opcode


COMMENT_CHAR = ";"
_SEPARATORS = re.compile(r"[\s,]+")


def strip_comment(line: str) -> str:
    """Remove a trailing ';' comment and surrounding whitespace."""
    return line.split(COMMENT_CHAR, 1)[0].strip()


def tokenize_line(line: str) -> List[str]:
    """Split a cleaned line on whitespace and commas, dropping empties."""
    return [token for token in _SEPARATORS.split(line) if token]


def parse_line(line: str, line_number: int) -> Optional[Instruction]:
    """
    Parse a single source line.

    Args:
        line: Raw source line (may include a comment)
        line_number: 0-based index of the line in the source

    Returns:
        The decoded Instruction, or None for blank/comment-only lines
    """
    clean = strip_comment(line)
    if not clean:
        return None

    tokens = tokenize_line(clean)
    if not tokens:
        # Only separators left (e.g. a lone comma)
        return None

    return Instruction(
        opcode=Opcode.from_mnemonic(tokens[0]),
        operand1=tokens[1] if len(tokens) > 1 else None,
        operand2=tokens[2] if len(tokens) > 2 else None,
        source_line=line_number,
        raw=clean,
    )


def parse_source(source: str) -> List[Instruction]:
    """
    Parse source text into an ordered instruction list.

    Args:
        source: Program text, newline separated

    Returns:
        One Instruction per non-blank line, in program order
    """
    instructions = []
    for line_number, line in enumerate(source.split("\n")):
        instruction = parse_line(line, line_number)
        if instruction is not None:
            instructions.append(instruction)
    return instructions
