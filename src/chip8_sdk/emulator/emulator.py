"""
CHIP-8 Emulator - Main Orchestrator
===================================

This module provides the main `Emulator` class that ties the machine state,
the interpreter and the disassembler together behind a high-level API for
running, debugging and testing ROMs.

The Emulator class:
- Owns one MachineState and one Interpreter
- Loads ROMs from files or raw bytes
- Supports execution control (step, run_frame, run)
- Drives the 60 Hz delay/sound timers
- Offers register, memory and display inspection for debugging

Example usage:
    >>> from chip8_sdk.emulator import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("pong.ch8")
    >>> result = emu.run(max_cycles=10_000)
    >>> print(result)
    >>> print(emu.display_text)

Frame model:
    A host presentation loop calls run_frame() once per 1/60 s. Each frame
    executes cycles_per_frame instructions and then ticks both timers once,
    so timer rate is independent of instruction rate.

Copyright (c) 2025 chip8-sdk Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import List, Optional, Union
import logging

from chip8_sdk.errors import MemoryAccessError, RomLoadError, UnknownOpcodeError
from .config import EmulatorConfig
from .cpu import Interpreter, StepResult
from .memory import PROGRAM_START
from .state import END_OF_PROGRAM, MachineState

logger = logging.getLogger(__name__)


# =============================================================================
# Run Results
# =============================================================================

class HaltReason(Enum):
    """Reason why a run loop stopped."""
    SENTINEL = auto()        # Next opcode is the 0x0000 end-of-program marker
    UNKNOWN_OPCODE = auto()  # An undocumented opcode was reported
    MAX_CYCLES = auto()      # Cycle budget exhausted


@dataclass
class RunResult:
    """
    Information about a finished run.

    Attributes:
        cycles: Number of instructions executed
        reason: Why the run stopped
        last: The last executed step (None if nothing ran)
    """
    cycles: int
    reason: HaltReason
    last: Optional[StepResult] = None

    def __str__(self) -> str:
        match self.reason:
            case HaltReason.SENTINEL:
                return f"End of program after {self.cycles} cycles"
            case HaltReason.UNKNOWN_OPCODE:
                return (
                    f"Unknown opcode 0x{self.last.opcode:04X} at "
                    f"0x{self.last.address:03X} after {self.cycles} cycles"
                )
            case HaltReason.MAX_CYCLES:
                return f"Reached max cycles ({self.cycles})"
            case _:
                return f"{self.reason.name} after {self.cycles} cycles"


class Emulator:
    """
    CHIP-8 emulator with debugging support.

    This is the main entry point for emulator usage.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        state: The machine state (registers, memory, display, keypad)
        interpreter: The instruction interpreter

    Example:
        >>> emu = Emulator()
        >>> emu.load_bytes(bytes([0x6A, 0x12, 0x7A, 0x05]))
        >>> emu.run().reason
        <HaltReason.SENTINEL: 1>
        >>> emu.registers["VA"]
        23
    """

    def __init__(self, config: Optional[EmulatorConfig] = None):
        """
        Initialize emulator.

        Args:
            config: Emulator configuration (default: EmulatorConfig())
        """
        self.config = config or EmulatorConfig()
        self.state = MachineState(stack_depth=self.config.stack_depth)
        self.interpreter = Interpreter(self.config)
        self._halted: Optional[HaltReason] = None
        self._total_cycles = 0
        self._rom_size = 0

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, path: Union[str, Path]) -> None:
        """
        Load a ROM file.

        Args:
            path: Path to the ROM image

        Raises:
            RomLoadError: If the file cannot be read
            RomSizeError: If the ROM is larger than 3584 bytes
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise RomLoadError(path, e.strerror or str(e)) from e

        logger.info(f"Loading ROM {path.name}")
        self.load_bytes(data)

    def load_bytes(self, data: bytes) -> None:
        """
        Reset the machine and load raw program bytes at 0x200.

        Args:
            data: Program bytes

        Raises:
            RomSizeError: If data is larger than 3584 bytes
        """
        self.state.load_program(bytes(data))
        self._rom_size = len(data)
        self._halted = None
        self._total_cycles = 0

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """
        Reset the machine to power-on state.

        Memory is cleared as well, so the ROM must be loaded again.
        """
        self.state.reset()
        self._halted = None
        self._total_cycles = 0
        self._rom_size = 0

    def step(self) -> StepResult:
        """
        Execute a single instruction.

        Returns:
            StepResult for the executed instruction

        Raises:
            MachineError: On stack or memory violations
        """
        result = self.interpreter.step(self.state)
        self._total_cycles += 1
        return result

    def tick_timers(self) -> None:
        """Decrement the delay and sound timers once (one 60 Hz tick)."""
        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    def run_frame(self) -> List[StepResult]:
        """
        Execute one frame: cycles_per_frame instructions, then one timer tick.

        The batch ends early at the end-of-program marker, at an unknown
        opcode, or while Fx0A is waiting for a key. Once the program has
        halted, further calls execute nothing.

        Returns:
            Steps executed during the frame
        """
        if self._halted is not None:
            return []

        results = []
        for _ in range(self.config.cycles_per_frame):
            result = self.step()
            results.append(result)
            if result.is_end_of_program:
                self._halt(HaltReason.SENTINEL)
                break
            if not result.implemented:
                self._halt(HaltReason.UNKNOWN_OPCODE)
                break
            if result.waiting:
                break

        self.tick_timers()
        return results

    def run(self, max_cycles: int = 1_000_000, strict: bool = False) -> RunResult:
        """
        Run until the end-of-program marker, an unknown opcode, or max cycles.

        The marker is checked before each instruction and is not executed.
        Timers are not ticked; headless runs have no wall clock.

        Args:
            max_cycles: Maximum instructions to execute
            strict: Raise on unknown opcodes instead of stopping

        Returns:
            RunResult describing why execution stopped

        Raises:
            UnknownOpcodeError: In strict mode, on an undocumented opcode
            MachineError: On stack or memory violations
        """
        cycles = 0
        last: Optional[StepResult] = None

        while cycles < max_cycles:
            if self.peek_opcode() == END_OF_PROGRAM:
                return self._finish(RunResult(cycles, HaltReason.SENTINEL, last))

            last = self.step()
            cycles += 1

            if not last.implemented:
                if strict:
                    raise UnknownOpcodeError(last.opcode, last.address)
                return self._finish(RunResult(cycles, HaltReason.UNKNOWN_OPCODE, last))

        return RunResult(cycles, HaltReason.MAX_CYCLES, last)

    def _halt(self, reason: HaltReason) -> None:
        self._halted = reason
        logger.info(f"Program halted: {reason.name} at 0x{self.state.pc:03X}")

    def _finish(self, result: RunResult) -> RunResult:
        self._halt(result.reason)
        return result

    def peek_opcode(self) -> int:
        """
        Get the opcode at PC without executing it.

        Raises:
            MemoryAccessError: If PC is 0xFFF
        """
        pc = self.state.pc
        try:
            return self.state.memory.read_word(pc)
        except MemoryAccessError as e:
            raise MemoryAccessError(e.target, address=pc) from e

    # =========================================================================
    # Keyboard Input
    # =========================================================================

    def press_key(self, key: Union[int, str]) -> None:
        """Press a keypad key (index 0-15 or host key name)."""
        self.state.keypad.key_down(key)

    def release_key(self, key: Union[int, str]) -> None:
        """Release a keypad key (index 0-15 or host key name)."""
        self.state.keypad.key_up(key)

    # =========================================================================
    # Display Output
    # =========================================================================

    @property
    def display_text(self) -> str:
        """Display contents as text ('#' for set pixels, '.' for clear)."""
        return self.state.display.get_text()

    def render_display(self, scale: int = 8) -> bytes:
        """
        Render the display as a PNG image.

        Args:
            scale: Pixel scale factor

        Returns:
            PNG image bytes
        """
        return self.state.display.render_image(scale=scale)

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def registers(self) -> dict:
        """
        Get current register values as a dictionary.

        Returns:
            Dictionary with keys V0-VF, PC, I, DT, ST, SP
        """
        return self.state.register_dict()

    @property
    def total_cycles(self) -> int:
        """Instructions executed since the last load or reset."""
        return self._total_cycles

    @property
    def halted(self) -> Optional[HaltReason]:
        """Why the program stopped, or None while it can still run."""
        return self._halted

    def format_registers(self, start: int = 0, end: int = 0xF) -> str:
        """
        Format registers for debug output.

        Args:
            start: First V register to show
            end: Last V register to show (inclusive)

        Returns:
            Two lines: "V0:00 V1:00 ..." and "PC:0x0200 I:0x0000"
        """
        regs = self.state.registers
        general = " ".join(f"V{n:X}:{regs[n]:02X}" for n in range(start, end + 1))
        return f"{general}\nPC:0x{self.state.pc:04X} I:0x{self.state.i:04X}"

    def format_memory(self, size: int, start: int = PROGRAM_START) -> str:
        """Format size bytes of memory from start as hex."""
        return self.state.memory.dump(size, start)

    # =========================================================================
    # Debug Helpers
    # =========================================================================

    def disassemble_at(self, address: int, count: int = 10) -> List[str]:
        """
        Disassemble instructions at the given address.

        Args:
            address: Starting address
            count: Number of instructions to disassemble

        Returns:
            Listing lines with addresses
        """
        from chip8_sdk.disassembler import Chip8Disassembler

        available = max(0, min(count * 2, len(self.state.memory) - address))
        data = self.state.memory.read_block(address, available)
        return Chip8Disassembler().disassemble_lines(
            data, with_address=True, start_address=address
        )

    def __repr__(self) -> str:
        """Return string representation of emulator state."""
        return (
            f"Emulator(pc=0x{self.state.pc:03X}, "
            f"rom_size={self._rom_size}, "
            f"cycles={self._total_cycles})"
        )
