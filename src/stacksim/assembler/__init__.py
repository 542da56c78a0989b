"""
Source Parser for StackSim
==========================

Turns program text into the instruction list executed by the stepper.

Main Components
---------------
- **Opcode**: The seven supported mnemonics
- **Instruction**: One decoded source line (opcode, operand text, line number)
- **parse_source**: Permissive parser; never raises

Example Usage
-------------
>>> from stacksim.assembler import parse_source
>>> program = parse_source('''
... MOV AX, 122D   ; load
... PUSH AX
... ''')
>>> [str(inst) for inst in program]
['MOV AX, 122D', 'PUSH AX']
>>> program[0].source_line
1
"""

from stacksim.assembler.opcodes import Instruction, Opcode, STACK_OPCODES
from stacksim.assembler.parser import parse_line, parse_source, strip_comment, tokenize_line

__all__ = [
    "Instruction",
    "Opcode",
    "STACK_OPCODES",
    "parse_line",
    "parse_source",
    "strip_comment",
    "tokenize_line",
]
