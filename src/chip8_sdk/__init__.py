"""
CHIP-8 SDK - Interpreter, Disassembler and Tools for CHIP-8
===========================================================

This package provides a CHIP-8 interpreter core together with the tools
built around it: a pseudocode disassembler, a headless debugger and a
windowed emulator.

CHIP-8 is a small interpreted virtual machine from the 1970s: 4KB of
memory, sixteen 8-bit registers, a 64 x 32 monochrome display drawn with
XOR sprites, a 16-key hex keypad and two 60 Hz timers. Programs are raw
big-endian opcode streams loaded at address 0x200.

Main Components
---------------
- **cpu**: Instruction set definition
    The Operation enumeration and the opcode classifier shared by every
    other component

- **emulator**: Interpreter and machine
    Machine state, fetch/decode/execute, run loops, pyglet window

- **disassembler**: Pseudocode listings
    One line per opcode, optionally with addresses

Quick Start
-----------
Run a ROM headlessly:
    >>> from chip8_sdk import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("maze.ch8")
    >>> emu.run(max_cycles=5_000)
    >>> print(emu.display_text)

Disassemble a ROM:
    >>> from chip8_sdk import Chip8Disassembler
    >>> disasm = Chip8Disassembler()
    >>> print(disasm.disassemble_to_text(rom_bytes, with_address=True))

Or use the command-line tool:
    $ chip8 disasm maze.ch8 --with-addr
    $ chip8 debug maze.ch8
    $ chip8 run maze.ch8

Reference Documentation
-----------------------
- Cowgod's CHIP-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
- Opcode table: https://en.wikipedia.org/wiki/CHIP-8#Opcode_table

Version History
---------------
1.0.0 - Initial release with interpreter, disassembler and chip8 CLI
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_sdk.cpu import Operation, Instruction, classify
from chip8_sdk.emulator import (
    Emulator,
    EmulatorConfig,
    HaltReason,
    RunResult,
    Interpreter,
    StepResult,
    MachineState,
)
from chip8_sdk.disassembler import Chip8Disassembler, DisassembledInstruction
from chip8_sdk.errors import (
    Chip8Error,
    RomError,
    RomLoadError,
    RomSizeError,
    MachineError,
    StackOverflowError,
    StackUnderflowError,
    MemoryAccessError,
    UnknownOpcodeError,
)

__all__ = [
    # Version info
    "__version__",
    # Instruction set
    "Operation",
    "Instruction",
    "classify",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "HaltReason",
    "RunResult",
    "Interpreter",
    "StepResult",
    "MachineState",
    # Disassembler
    "Chip8Disassembler",
    "DisassembledInstruction",
    # Exception hierarchy
    "Chip8Error",
    "RomError",
    "RomLoadError",
    "RomSizeError",
    "MachineError",
    "StackOverflowError",
    "StackUnderflowError",
    "MemoryAccessError",
    "UnknownOpcodeError",
]
