"""
Memory Subsystem for CHIP-8 Emulator
====================================

Flat 4KB byte-addressable memory with the built-in font.

Memory Map:
    $000-$04F  Font glyphs (16 digits x 5 bytes)
    $050-$1FF  Reserved for the interpreter (unused)
    $200-$FFF  Program (ROM loaded here) and program data

Every access is bounds-checked: an address outside $000-$FFF raises
MemoryAccessError instead of wrapping, because a program that indexes
past the end of memory is malformed.

Copyright (c) 2025 chip8-sdk Contributors
"""

from typing import Iterable

from chip8_sdk.errors import MemoryAccessError


# =============================================================================
# Memory Layout Constants
# =============================================================================

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

FONT_ADDRESS = 0x000
GLYPH_SIZE = 5

# =============================================================================
# FONT DATA
# =============================================================================
# 4x5 pixel glyphs for hex digits 0-F. Each glyph is 5 bytes (5 rows); only
# the high nibble of each byte is used (MSB = leftmost pixel).

FONT_DATA = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


def glyph_address(digit: int) -> int:
    """
    Get the address of the font glyph for a hex digit.

    Only the low nibble of digit is used, so any register value maps to
    one of the 16 glyphs.

    Args:
        digit: Digit value (0-15; higher values use the low nibble)

    Returns:
        Address of the first of the glyph's 5 bytes
    """
    return FONT_ADDRESS + GLYPH_SIZE * (digit & 0xF)


class Memory:
    """
    CHIP-8 main memory.

    4096 bytes, pre-seeded with the font glyph table at FONT_ADDRESS.

    Example:
        >>> mem = Memory()
        >>> mem.load(PROGRAM_START, bytes([0x6A, 0x12]))
        >>> hex(mem.read_word(PROGRAM_START))
        '0x6a12'
    """

    def __init__(self):
        """Initialize memory with the font loaded."""
        self._data = bytearray(MEMORY_SIZE)
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONT_DATA)] = FONT_DATA

    def __len__(self) -> int:
        return MEMORY_SIZE

    @staticmethod
    def _check(address: int, count: int = 1) -> None:
        """Raise MemoryAccessError unless address..address+count-1 is in range."""
        if address < 0 or address >= MEMORY_SIZE:
            raise MemoryAccessError(address)
        end = address + count - 1
        if end >= MEMORY_SIZE:
            raise MemoryAccessError(end)

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: 12-bit address

        Returns:
            Byte value at address

        Raises:
            MemoryAccessError: If address is outside $000-$FFF
        """
        self._check(address)
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: 12-bit address
            value: Byte value (masked to 8 bits)

        Raises:
            MemoryAccessError: If address is outside $000-$FFF
        """
        self._check(address)
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read 16-bit word from memory (big-endian)."""
        self._check(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_block(self, address: int, count: int) -> bytes:
        """
        Read a contiguous block of bytes.

        Args:
            address: Starting address
            count: Number of bytes

        Returns:
            The bytes at address..address+count-1 (empty if count is 0)
        """
        if count <= 0:
            return b""
        self._check(address, count)
        return bytes(self._data[address:address + count])

    def write_block(self, address: int, values: Iterable[int]) -> None:
        """Write a contiguous block of bytes, each masked to 8 bits."""
        data = bytes(v & 0xFF for v in values)
        if not data:
            return
        self._check(address, len(data))
        self._data[address:address + len(data)] = data

    def load(self, address: int, data: bytes) -> None:
        """
        Copy raw bytes into memory.

        Args:
            address: Starting memory address
            data: Bytes to load

        Raises:
            MemoryAccessError: If the data would extend past $FFF
        """
        self.write_block(address, data)

    def clear(self) -> None:
        """Zero all memory and reload the font."""
        self._data = bytearray(MEMORY_SIZE)
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONT_DATA)] = FONT_DATA

    def dump(self, size: int, start: int = PROGRAM_START) -> str:
        """
        Format a region of memory as space-separated hex bytes.

        Args:
            size: Number of bytes to show
            start: First address (default: program start)

        Returns:
            String like "6a 12 7a 05"
        """
        return " ".join(f"{b:02x}" for b in self.read_block(start, size))
