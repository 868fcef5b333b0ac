"""
CHIP-8 SDK CPU Package
======================

This package contains the CHIP-8 instruction set definitions used by
multiple tools in the SDK, including the interpreter and the disassembler.

Modules:
    opcodes: Operation enumeration, mnemonic table and the opcode
             classifier that decodes a 16-bit opcode into an Instruction.

Both the interpreter (which executes instructions) and the disassembler
(which renders them) classify opcodes through the same function, so an
opcode can never mean one thing when listed and another when executed.

Usage:
    from chip8_sdk.cpu import Operation, Instruction, classify

    instr = classify(0xD125)
    assert instr.operation is Operation.DRW
    print(instr.assembly)   # DRW V1, V2, 5
"""

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_sdk.cpu.opcodes import (
    # Core types
    Operation,
    Instruction,
    # Reference tables
    MNEMONICS,
    CONTROL_FLOW,
    # Lookup functions
    classify,
    is_control_flow,
)

__all__ = [
    # Core types
    "Operation",
    "Instruction",
    # Reference tables
    "MNEMONICS",
    "CONTROL_FLOW",
    # Lookup functions
    "classify",
    "is_control_flow",
]
