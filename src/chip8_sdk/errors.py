"""
CHIP-8 SDK Error Hierarchy
==========================

This module defines the exception hierarchy for the entire CHIP-8 SDK.
All exceptions inherit from Chip8Error, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── RomError (ROM loading)
│   ├── RomLoadError - ROM file cannot be read
│   └── RomSizeError - ROM does not fit in program memory
├── MachineError (machine state integrity, fatal to the run)
│   ├── StackOverflowError - CALL with a full call stack
│   ├── StackUnderflowError - RET with an empty call stack
│   └── MemoryAccessError - address outside the 4KB address space
└── UnknownOpcodeError - opcode outside the documented instruction set
                         (raised only by callers running in strict mode)

Design Philosophy
-----------------
Load errors and integrity violations unwind to the caller immediately.
Decode gaps are not exceptional for the interpreter: a cycle that fetches
an unknown opcode is reported in its StepResult and leaves the machine
untouched, so batch tools (the disassembler, the headless debugger) can
continue past them. UnknownOpcodeError exists for callers that want to
turn that report into a hard failure.

Machine errors carry the address and opcode of the faulting instruction:
    StackUnderflowError: stack underflow at 0x0204 (opcode 0x00EE)
"""

from pathlib import Path
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            emulator.load_rom("pong.ch8")
            emulator.run()
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# ROM Loading Exceptions
# =============================================================================

class RomError(Chip8Error):
    """Base exception for ROM loading errors."""
    pass


class RomLoadError(RomError):
    """
    ROM file cannot be read.

    Raised when:
    - ROM file not found
    - Permission denied
    - Path is a directory
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot load ROM '{path}': {reason}")


class RomSizeError(RomError):
    """
    ROM does not fit in program memory.

    Programs are loaded at 0x200, leaving 4096 - 0x200 = 3584 bytes.
    Oversized ROMs are rejected rather than truncated, since a truncated
    program would run with part of its code or data silently missing.
    """

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"ROM is {size} bytes, but only {limit} bytes of program memory are available"
        )


# =============================================================================
# Machine State Exceptions
# =============================================================================

class MachineError(Chip8Error):
    """
    Base exception for machine state integrity violations.

    These indicate a malformed program and are fatal to the run.

    Attributes:
        message: The error description
        address: PC of the faulting instruction (optional)
        opcode: The faulting opcode (optional)
    """

    def __init__(
        self,
        message: str,
        address: Optional[int] = None,
        opcode: Optional[int] = None,
    ):
        self.message = message
        self.address = address
        self.opcode = opcode
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with the faulting location.

        Example output:
            stack underflow at 0x0204 (opcode 0x00EE)
        """
        text = self.message
        if self.address is not None:
            text += f" at 0x{self.address:04X}"
        if self.opcode is not None:
            text += f" (opcode 0x{self.opcode:04X})"
        return text


class StackOverflowError(MachineError):
    """
    CALL executed with a full call stack.

    The call stack holds 16 return addresses. Deeper nesting usually
    means runaway recursion in the program.
    """

    def __init__(
        self,
        depth: int,
        address: Optional[int] = None,
        opcode: Optional[int] = None,
    ):
        self.depth = depth
        super().__init__(
            f"stack overflow (depth {depth})", address=address, opcode=opcode
        )


class StackUnderflowError(MachineError):
    """RET executed with an empty call stack."""

    def __init__(self, address: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__("stack underflow", address=address, opcode=opcode)


class MemoryAccessError(MachineError):
    """
    Memory access outside the 4KB address space.

    Raised for instruction fetch, sprite reads, BCD stores and register
    block transfers that would touch an address above 0xFFF.
    """

    def __init__(
        self,
        target: int,
        address: Optional[int] = None,
        opcode: Optional[int] = None,
    ):
        self.target = target
        super().__init__(
            f"memory access out of range (0x{target:04X})",
            address=address,
            opcode=opcode,
        )


# =============================================================================
# Decode Exceptions
# =============================================================================

class UnknownOpcodeError(Chip8Error):
    """
    Opcode outside the documented instruction set.

    The interpreter never raises this itself; it is raised by the
    emulator's run loop in strict mode.
    """

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"unknown or unimplemented opcode 0x{opcode:04X} at 0x{address:04X}")
