"""
Opcode Classifier Tests
=======================

Tests for the shared CHIP-8 opcode classifier, covering:
- Every documented instruction family and variant
- Operand field extraction
- Undocumented opcodes (classified as UNKNOWN, never raising)
- Assembly text and the mnemonic table
"""

import pytest

from chip8_sdk.cpu import (
    CONTROL_FLOW,
    MNEMONICS,
    Instruction,
    Operation,
    classify,
    is_control_flow,
)


# =============================================================================
# Family Classification
# =============================================================================

class TestClassification:
    """Each documented opcode maps to exactly one operation."""

    @pytest.mark.parametrize("opcode,operation", [
        (0x00E0, Operation.CLS),
        (0x00EE, Operation.RET),
        (0x1208, Operation.JP),
        (0x2300, Operation.CALL),
        (0x3A12, Operation.SE_BYTE),
        (0x4A12, Operation.SNE_BYTE),
        (0x5AB0, Operation.SE_REG),
        (0x6A12, Operation.LD_BYTE),
        (0x7A05, Operation.ADD_BYTE),
        (0x8AB0, Operation.LD_REG),
        (0x8AB1, Operation.OR),
        (0x8AB2, Operation.AND),
        (0x8AB3, Operation.XOR),
        (0x8AB4, Operation.ADD_REG),
        (0x8AB5, Operation.SUB),
        (0x8AB6, Operation.SHR),
        (0x8AB7, Operation.SUBN),
        (0x8ABE, Operation.SHL),
        (0x9AB0, Operation.SNE_REG),
        (0xA2F0, Operation.LD_I),
        (0xB300, Operation.JP_V0),
        (0xC10F, Operation.RND),
        (0xD125, Operation.DRW),
        (0xE19E, Operation.SKP),
        (0xE1A1, Operation.SKNP),
        (0xF107, Operation.LD_VX_DT),
        (0xF10A, Operation.LD_VX_K),
        (0xF115, Operation.LD_DT_VX),
        (0xF118, Operation.LD_ST_VX),
        (0xF11E, Operation.ADD_I),
        (0xF129, Operation.LD_F),
        (0xF133, Operation.LD_B),
        (0xF155, Operation.LD_MEM_VX),
        (0xF165, Operation.LD_VX_MEM),
    ])
    def test_documented_opcode(self, opcode, operation):
        """Documented opcodes classify to their operation."""
        assert classify(opcode).operation is operation

    def test_every_operation_reachable(self):
        """Every Operation member is produced by some opcode."""
        seen = {classify(op).operation for op in range(0x10000)}
        assert seen == set(Operation)


class TestUnknownOpcodes:
    """Undocumented opcodes are UNKNOWN rather than errors."""

    @pytest.mark.parametrize("opcode", [
        0x0000,   # end-of-program marker
        0x0123,   # 0nnn SYS call
        0x00E1,
        0x00FF,
        0x5AB1,   # 5xy0 with a non-zero low nibble
        0x8AB8,
        0x8ABF,
        0x9AB1,
        0xE19F,
        0xE100,
        0xF100,
        0xF1FF,
    ])
    def test_unknown(self, opcode):
        """Opcodes outside the instruction set classify as UNKNOWN."""
        instr = classify(opcode)
        assert instr.operation is Operation.UNKNOWN
        assert not instr.is_known

    def test_classify_is_total(self):
        """Classifying every 16-bit value never raises."""
        for opcode in range(0x10000):
            assert isinstance(classify(opcode), Instruction)

    def test_wide_values_masked(self):
        """Values wider than 16 bits are masked to 16 bits."""
        instr = classify(0x16A12)
        assert instr.opcode == 0x6A12
        assert instr.operation is Operation.LD_BYTE


# =============================================================================
# Operand Fields
# =============================================================================

class TestOperandFields:
    """Operand extraction."""

    def test_drw_fields(self):
        """Dxyn exposes x, y and n."""
        instr = classify(0xD125)
        assert (instr.x, instr.y, instr.n) == (1, 2, 5)

    def test_byte_and_address_fields(self):
        """nn is the low byte and nnn the low 12 bits."""
        instr = classify(0xA2F0)
        assert instr.nn == 0xF0
        assert instr.nnn == 0x2F0
        assert instr.family == 0xA

    def test_instruction_is_frozen(self):
        """Decoded instructions are immutable."""
        instr = classify(0x6A12)
        with pytest.raises(AttributeError):
            instr.x = 3


# =============================================================================
# Assembly Text
# =============================================================================

class TestAssembly:
    """Mnemonic and operand rendering."""

    def test_load_byte(self):
        assert str(classify(0x6A12)) == "LD VA, 0x12"

    def test_draw(self):
        assert classify(0xD125).assembly == "DRW V1, V2, 5"

    def test_no_operands(self):
        """CLS and RET have no operand text."""
        assert classify(0x00E0).assembly == "CLS"
        assert classify(0x00EE).assembly == "RET"

    def test_unknown_as_word(self):
        """Unknown opcodes render as a data word."""
        assert classify(0x0123).assembly == ".WORD 0x0123"

    def test_mnemonic_table_complete(self):
        """Every operation has a mnemonic entry."""
        assert set(MNEMONICS) == set(Operation)

    def test_repr(self):
        assert repr(classify(0x00E0)) == "Instruction(opcode=0x00E0, operation=CLS)"


class TestControlFlow:
    """Operations that set PC themselves."""

    def test_jumps_are_control_flow(self):
        assert is_control_flow(Operation.JP)
        assert is_control_flow(Operation.CALL)
        assert is_control_flow(Operation.RET)

    def test_skips_are_control_flow(self):
        for operation in (Operation.SE_BYTE, Operation.SNE_REG, Operation.SKP, Operation.SKNP):
            assert operation in CONTROL_FLOW

    def test_alu_is_not_control_flow(self):
        assert not is_control_flow(Operation.ADD_REG)
        assert not is_control_flow(Operation.DRW)
