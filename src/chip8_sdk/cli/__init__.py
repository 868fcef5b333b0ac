"""
CHIP-8 SDK Command-Line Interface
=================================

This package provides the `chip8` command-line tool, a Click-based group
with these subcommands:

- **disasm**: Pseudocode disassembly listing
- **debug**: Headless run with a register dump after every cycle
- **run**: Windowed emulator (pyglet)
- **screenshot**: Headless run saved as a PNG image
"""

__all__ = ["chip8"]
