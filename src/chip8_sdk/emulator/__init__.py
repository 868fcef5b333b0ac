"""
CHIP-8 Emulator
===============

A CHIP-8 interpreter with a headless API for testing and debugging, and
an optional pyglet window for interactive play.

This package provides:

- **Interpreter**: All 35 documented instructions, with the shift quirk
  configurable
- **Memory**: 4KB with the built-in hex font at $000
- **Display**: 64 x 32 XOR sprite buffer with collision detection,
  text and PNG rendering
- **Keypad**: 16-key hex keypad with a host key map
- **Run loops**: Frame-based (60 Hz timers) and headless run-to-halt

Quick Start
-----------

Headless::

    >>> from chip8_sdk.emulator import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("maze.ch8")
    >>> result = emu.run(max_cycles=5_000)
    >>> print(emu.display_text)

Windowed (requires a display)::

    >>> from chip8_sdk.emulator.window import run_window
    >>> run_window(emu, scale=10)

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API)
- `cpu.py`: Instruction interpreter
- `state.py`: Machine state (registers, stack, timers)
- `memory.py`: Memory and font
- `display.py`: Display buffer
- `keyboard.py`: Keypad
- `config.py`: EmulatorConfig
- `window.py`: pyglet front end (imported on demand)

Copyright (c) 2025 chip8-sdk Contributors
"""

from .config import EmulatorConfig
from .emulator import Emulator, HaltReason, RunResult
from .cpu import Interpreter, StepResult
from .state import MachineState, END_OF_PROGRAM
from .memory import (
    Memory,
    MEMORY_SIZE,
    PROGRAM_START,
    MAX_PROGRAM_SIZE,
    FONT_ADDRESS,
    FONT_DATA,
    glyph_address,
)
from .display import Display, DISPLAY_WIDTH, DISPLAY_HEIGHT
from .keyboard import Keypad, DEFAULT_KEY_MAP

__all__ = [
    # Main class
    "Emulator",
    "EmulatorConfig",
    "HaltReason",
    "RunResult",
    # Interpreter
    "Interpreter",
    "StepResult",
    "MachineState",
    "END_OF_PROGRAM",
    # Memory
    "Memory",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
    "FONT_ADDRESS",
    "FONT_DATA",
    "glyph_address",
    # Display
    "Display",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    # Keypad
    "Keypad",
    "DEFAULT_KEY_MAP",
]
