"""
Memory Subsystem Tests
======================

Tests for CHIP-8 memory:
- Font table placement
- Byte, word and block access
- Bounds checking
- Program loading and the size limit
"""

import pytest

from chip8_sdk.emulator import MachineState
from chip8_sdk.emulator.memory import (
    FONT_ADDRESS,
    FONT_DATA,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    Memory,
    glyph_address,
)
from chip8_sdk.errors import MemoryAccessError, RomSizeError


@pytest.fixture
def memory():
    return Memory()


class TestFont:
    """Built-in hex font."""

    def test_font_loaded_at_zero(self, memory):
        assert memory.read_block(FONT_ADDRESS, len(FONT_DATA)) == FONT_DATA

    def test_font_size(self):
        """16 glyphs of 5 bytes."""
        assert len(FONT_DATA) == 80

    def test_glyph_zero(self, memory):
        assert memory.read_block(glyph_address(0), 5) == bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])

    def test_glyph_address(self):
        assert glyph_address(0xF) == 75
        assert glyph_address(0x1F) == 75

    def test_clear_reloads_font(self, memory):
        memory.write(0, 0)
        memory.clear()
        assert memory.read(0) == 0xF0


class TestAccess:
    """Reads and writes."""

    def test_size(self, memory):
        assert len(memory) == MEMORY_SIZE == 4096

    def test_write_masks_value(self, memory):
        memory.write(0x300, 0x1AB)
        assert memory.read(0x300) == 0xAB

    def test_read_word_big_endian(self, memory):
        memory.load(PROGRAM_START, bytes([0x6A, 0x12]))
        assert memory.read_word(PROGRAM_START) == 0x6A12

    def test_block_round_trip(self, memory):
        memory.write_block(0x400, [1, 2, 3])
        assert memory.read_block(0x400, 3) == bytes([1, 2, 3])

    def test_empty_block(self, memory):
        assert memory.read_block(0xFFF, 0) == b""

    def test_dump(self, memory):
        memory.load(PROGRAM_START, bytes([0x6A, 0x12, 0x7A, 0x05]))
        assert memory.dump(4) == "6a 12 7a 05"


class TestBounds:
    """Accesses beyond 0xFFF raise."""

    def test_read_out_of_range(self, memory):
        with pytest.raises(MemoryAccessError) as exc_info:
            memory.read(0x1000)
        assert exc_info.value.target == 0x1000

    def test_write_negative(self, memory):
        with pytest.raises(MemoryAccessError):
            memory.write(-1, 0)

    def test_word_at_last_byte(self, memory):
        with pytest.raises(MemoryAccessError):
            memory.read_word(0xFFF)

    def test_block_crossing_end(self, memory):
        with pytest.raises(MemoryAccessError) as exc_info:
            memory.write_block(0xFFE, [1, 2, 3])
        assert exc_info.value.target == 0x1000

    def test_last_byte_accessible(self, memory):
        memory.write(0xFFF, 0x55)
        assert memory.read(0xFFF) == 0x55


class TestProgramLoading:
    """MachineState.load_program."""

    def test_program_at_0x200(self):
        state = MachineState()
        state.load_program(bytes([0x12, 0x34]))
        assert state.memory.read_word(0x200) == 0x1234
        assert state.pc == 0x200

    def test_largest_program(self):
        state = MachineState()
        state.load_program(bytes([0xAA]) * MAX_PROGRAM_SIZE)
        assert state.memory.read(0xFFF) == 0xAA

    def test_oversize_rejected(self):
        """A ROM larger than 3584 bytes is rejected, not truncated."""
        state = MachineState()
        with pytest.raises(RomSizeError) as exc_info:
            state.load_program(bytes(MAX_PROGRAM_SIZE + 1))
        assert exc_info.value.size == 3585

    def test_load_resets_state(self):
        state = MachineState()
        state.registers[3] = 9
        state.stack.append(0x300)
        state.memory.write(0x500, 1)
        state.load_program(bytes([0x00, 0xE0]))
        assert state.registers[3] == 0
        assert state.stack == []
        assert state.memory.read(0x500) == 0
