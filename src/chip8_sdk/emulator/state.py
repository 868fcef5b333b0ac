"""
CHIP-8 Machine State
====================

The complete state of one CHIP-8 machine:

- 16 general registers V0-VF (8-bit); VF doubles as the carry, borrow
  and collision flag
- PC and I (12-bit addresses)
- Delay and sound timers (8-bit, decremented by an external 60 Hz driver)
- Call stack of return addresses (16 entries)
- 4KB memory with the font at $000 and the program at $200
- 64 x 32 display buffer
- 16-key keypad

One MachineState is owned by one interpreter run. Nothing here is global,
so any number of machines can coexist (e.g. one per test).

Register and address properties mask on assignment, so the bit-width
invariants hold whatever the caller writes.

Copyright (c) 2025 chip8-sdk Contributors
"""

import logging
from typing import Dict, List

from chip8_sdk.errors import RomSizeError, StackOverflowError, StackUnderflowError
from .display import Display
from .keyboard import Keypad
from .memory import MAX_PROGRAM_SIZE, PROGRAM_START, Memory

logger = logging.getLogger(__name__)


REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
DEFAULT_STACK_DEPTH = 16

# Opcode used by the tooling as an end-of-program marker
END_OF_PROGRAM = 0x0000


class MachineState:
    """
    Mutable CHIP-8 machine state.

    Attributes:
        registers: V0-VF as a 16-byte bytearray
        stack: Return addresses, most recent last
        memory: Main memory (font pre-loaded)
        display: Display buffer
        keypad: Keypad state (written by the input adapter)
        current_opcode: Most recently fetched opcode
        stack_depth: Maximum number of entries in stack

    Example:
        >>> state = MachineState()
        >>> state.load_program(bytes([0x6A, 0x12]))
        >>> f"0x{state.pc:03X}"
        '0x200'
    """

    def __init__(self, stack_depth: int = DEFAULT_STACK_DEPTH):
        """
        Initialize a machine in its power-on state.

        Args:
            stack_depth: Maximum call stack depth
        """
        self.stack_depth = stack_depth
        self.memory = Memory()
        self.display = Display()
        self.keypad = Keypad()
        self.registers = bytearray(REGISTER_COUNT)
        self.stack: List[int] = []
        self.current_opcode = 0
        self._pc = PROGRAM_START
        self._i = 0
        self._delay_timer = 0
        self._sound_timer = 0

    # ========================================
    # Register Properties
    # ========================================

    @property
    def pc(self) -> int:
        """Program counter (12-bit)."""
        return self._pc

    @pc.setter
    def pc(self, value: int) -> None:
        self._pc = value & 0xFFF

    @property
    def i(self) -> int:
        """Index register I (12-bit)."""
        return self._i

    @i.setter
    def i(self, value: int) -> None:
        self._i = value & 0xFFF

    @property
    def delay_timer(self) -> int:
        """Delay timer (8-bit)."""
        return self._delay_timer

    @delay_timer.setter
    def delay_timer(self, value: int) -> None:
        self._delay_timer = value & 0xFF

    @property
    def sound_timer(self) -> int:
        """Sound timer (8-bit)."""
        return self._sound_timer

    @sound_timer.setter
    def sound_timer(self, value: int) -> None:
        self._sound_timer = value & 0xFF

    @property
    def vf(self) -> int:
        """Flag register VF."""
        return self.registers[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.registers[FLAG_REGISTER] = value & 0xFF

    # ========================================
    # Stack Operations
    # ========================================
    # Both operations run while PC still holds the address of the
    # instruction being executed, so errors name the faulting instruction.

    def push_return(self, address: int) -> None:
        """
        Push a return address onto the call stack.

        Raises:
            StackOverflowError: If the stack already holds stack_depth entries
        """
        if len(self.stack) >= self.stack_depth:
            raise StackOverflowError(
                len(self.stack), address=self._pc, opcode=self.current_opcode
            )
        self.stack.append(address & 0xFFF)

    def pop_return(self) -> int:
        """
        Pop the most recent return address.

        Raises:
            StackUnderflowError: If the stack is empty
        """
        if not self.stack:
            raise StackUnderflowError(address=self._pc, opcode=self.current_opcode)
        return self.stack.pop()

    @property
    def stack_size(self) -> int:
        """Current call stack depth."""
        return len(self.stack)

    # ========================================
    # Lifecycle
    # ========================================

    def reset(self) -> None:
        """
        Reset to power-on state.

        Clears registers, timers, stack, memory (reloading the font),
        display and keypad, and sets PC to the program start.
        """
        self.memory.clear()
        self.display.clear()
        self.keypad.clear()
        self.registers = bytearray(REGISTER_COUNT)
        self.stack = []
        self.current_opcode = 0
        self._pc = PROGRAM_START
        self._i = 0
        self._delay_timer = 0
        self._sound_timer = 0

    def load_program(self, data: bytes) -> None:
        """
        Reset the machine and copy a program to $200.

        Args:
            data: Raw ROM bytes

        Raises:
            RomSizeError: If data is larger than 3584 bytes
        """
        if len(data) > MAX_PROGRAM_SIZE:
            logger.debug(f"Rejecting {len(data)}-byte ROM (limit {MAX_PROGRAM_SIZE})")
            raise RomSizeError(len(data), MAX_PROGRAM_SIZE)

        self.reset()
        self.memory.load(PROGRAM_START, data)
        logger.info(f"Loaded {len(data)} bytes at 0x{PROGRAM_START:03X}")

    def register_dict(self) -> Dict[str, int]:
        """
        Get all registers as a dictionary.

        Returns:
            Dict with V0-VF, PC, I, DT, ST and SP (stack depth)
        """
        regs = {f"V{n:X}": value for n, value in enumerate(self.registers)}
        regs.update({
            "PC": self._pc,
            "I": self._i,
            "DT": self._delay_timer,
            "ST": self._sound_timer,
            "SP": len(self.stack),
        })
        return regs
