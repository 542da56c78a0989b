# =============================================================================
# test_parser.py - Source Parser Unit Tests
# =============================================================================
# Tests for the permissive source parser.
#
# Test coverage includes:
#   - Comment stripping and blank lines (line numbering gaps preserved)
#   - Tokenizing on whitespace and commas
#   - Opcode lookup (case-insensitive, unknown -> NOP)
#   - Operands kept verbatim
#   - Inputs that must never raise
# =============================================================================

import dataclasses

import pytest
from stacksim.assembler import Instruction, Opcode, parse_line, parse_source
from stacksim.assembler.parser import strip_comment, tokenize_line


# =============================================================================
# Blank Lines and Comments
# =============================================================================

class TestBlankAndComments:
    """Lines that produce no instruction."""

    def test_empty_source(self):
        """Empty source yields no instructions."""
        assert parse_source("") == []

    def test_comment_only(self):
        """A comment-only line yields no instruction."""
        assert parse_source("; comment only") == []

    def test_whitespace_only(self):
        """Whitespace-only lines yield nothing."""
        assert parse_source("   \t  \n\n   ") == []

    def test_line_numbers_keep_gaps(self):
        """source_line refers to the original line even after skipped lines."""
        program = parse_source("; comment only\n\nMOV AX, 1\n   \nPUSH AX")
        assert [inst.source_line for inst in program] == [2, 4]

    def test_trailing_comment_removed(self):
        """Everything from ';' on is dropped, and raw is trimmed."""
        program = parse_source("   PUSH AX   ; save AX")
        assert program[0].raw == "PUSH AX"
        assert program[0].operand1 == "AX"

    def test_only_first_semicolon_matters(self):
        """A second ';' is part of the comment."""
        assert strip_comment("MOV AX, 1 ; a ; b") == "MOV AX, 1"

    def test_lone_separator(self):
        """A line holding only separators yields nothing."""
        assert parse_source(" , ,, ") == []


# =============================================================================
# Tokenizing
# =============================================================================

class TestTokenizing:
    """Splitting lines into mnemonic and operands."""

    def test_comma_and_space(self):
        inst = parse_source("MOV AX, BX")[0]
        assert inst.opcode is Opcode.MOV
        assert inst.operand1 == "AX"
        assert inst.operand2 == "BX"

    def test_no_space_after_comma(self):
        inst = parse_source("MOV AX,122D")[0]
        assert inst.operand1 == "AX"
        assert inst.operand2 == "122D"

    def test_runs_of_separators(self):
        """Runs of spaces and commas count as one separator."""
        inst = parse_source("MOV   AX ,, BX")[0]
        assert (inst.operand1, inst.operand2) == ("AX", "BX")

    def test_tabs(self):
        inst = parse_source("MOV\tAX,\tBX")[0]
        assert (inst.operand1, inst.operand2) == ("AX", "BX")

    def test_extra_tokens_ignored(self):
        """Only the first two operands are kept."""
        inst = parse_source("MOV AX, BX, CX")[0]
        assert inst.operand2 == "BX"

    def test_missing_operands_are_none(self):
        inst = parse_source("PUSH")[0]
        assert inst.operand1 is None
        assert inst.operand2 is None

    def test_crlf_line_endings(self):
        """Windows line endings do not leak into operands."""
        program = parse_source("MOV AX, 1\r\nPUSH AX\r\n")
        assert len(program) == 2
        assert program[0].operand2 == "1"
        assert program[1].operand1 == "AX"

    def test_tokenize_line_helper(self):
        assert tokenize_line("ADD  CX,,5") == ["ADD", "CX", "5"]


# =============================================================================
# Opcode Lookup
# =============================================================================

class TestOpcodes:
    """Mnemonic recognition."""

    @pytest.mark.parametrize("text,expected", [
        ("MOV", Opcode.MOV),
        ("push", Opcode.PUSH),
        ("Pop", Opcode.POP),
        ("add", Opcode.ADD),
        ("SUB", Opcode.SUB),
        ("xchg", Opcode.XCHG),
        ("NOP", Opcode.NOP),
    ])
    def test_case_insensitive(self, text, expected):
        assert parse_source(f"{text} AX, BX")[0].opcode is expected

    def test_unknown_mnemonic_is_nop(self):
        """Unrecognized mnemonics never fail, they become NOP."""
        inst = parse_source("JMP somewhere")[0]
        assert inst.opcode is Opcode.NOP
        assert inst.operand1 == "somewhere"

    def test_operand_case_preserved(self):
        """Operands are not normalized at parse time."""
        inst = parse_source("mov ax, 7ah")[0]
        assert inst.operand1 == "ax"
        assert inst.operand2 == "7ah"

    def test_micro_steps(self):
        assert Opcode.PUSH.micro_steps == 2
        assert Opcode.POP.micro_steps == 2
        assert Opcode.MOV.micro_steps == 1
        assert Opcode.NOP.micro_steps == 1


# =============================================================================
# Instruction Objects
# =============================================================================

class TestInstruction:
    """Instruction data class behaviour."""

    def test_immutable(self):
        inst = parse_source("MOV AX, 1")[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            inst.operand1 = "BX"

    def test_str(self):
        assert str(Instruction(Opcode.MOV, "AX", "1")) == "MOV AX, 1"
        assert str(Instruction(Opcode.PUSH, "AX")) == "PUSH AX"
        assert str(Instruction(Opcode.NOP)) == "NOP"

    def test_parse_line_blank(self):
        assert parse_line("  ; nothing", 3) is None

    def test_parse_line(self):
        inst = parse_line("xchg ax,bx", 7)
        assert inst == Instruction(Opcode.XCHG, "ax", "bx", source_line=7, raw="xchg ax,bx")

    def test_program_order(self):
        program = parse_source("MOV AX, 1\nPUSH AX\nPOP BX")
        assert [inst.opcode for inst in program] == [Opcode.MOV, Opcode.PUSH, Opcode.POP]
