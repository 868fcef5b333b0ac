"""
CHIP-8 SDK Disassembler Module
==============================

Pseudocode disassembly of CHIP-8 ROM images, built on the same opcode
classifier the interpreter uses.

Usage:
    from chip8_sdk.disassembler import Chip8Disassembler

    disasm = Chip8Disassembler()
    print(disasm.disassemble_to_text(rom_bytes, with_address=True))

Copyright (c) 2025 chip8-sdk Contributors
"""

from .chip8 import Chip8Disassembler, DisassembledInstruction, describe

__all__ = [
    "Chip8Disassembler",
    "DisassembledInstruction",
    "describe",
]
