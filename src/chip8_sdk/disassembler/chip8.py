"""
CHIP-8 Disassembler
===================

Turns CHIP-8 opcodes into readable pseudocode listings, one line per
16-bit word.

The disassembler uses the same classifier as the interpreter
(chip8_sdk.cpu.classify), so the two can never disagree about which
operation an opcode is. Opcodes outside the instruction set are listed as
"unknown instruction" rather than rejected, since ROMs freely mix code and
sprite data.

Listing format:
    Jump to 0x208 (0x1208)                  without addresses
    #0x006 : VA = VA + 0x05 (0x7A05)        with addresses

Addresses count from the start of the listed data (offset 0) unless a
start address is given; ROMs are normally loaded at 0x200.

Usage:
    disasm = Chip8Disassembler()

    # Disassemble a ROM image
    for line in disasm.disassemble_lines(rom_bytes, with_address=True):
        print(line)

    # Disassemble a single opcode
    instr = disasm.disassemble_one(0x6A12)
    print(instr.text)        # VA = 0x12
    print(instr.assembly)    # LD VA, 0x12

Copyright (c) 2025 chip8-sdk Contributors
"""

from dataclasses import dataclass
from typing import List, Optional

from chip8_sdk.cpu import Instruction, Operation, classify


UNKNOWN_TEXT = "unknown instruction"


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    A single disassembled CHIP-8 word.

    Attributes:
        address: Address (or offset) of the word
        instruction: The classified instruction
        text: Human-readable pseudocode (e.g. "Jump to 0x208")
        assembly: Mnemonic form (e.g. "JP 0x208")
    """
    address: int
    instruction: Instruction
    text: str
    assembly: str

    @property
    def opcode(self) -> int:
        """The raw 16-bit opcode."""
        return self.instruction.opcode

    def format(self, with_address: bool = False) -> str:
        """
        Format as a listing line.

        Args:
            with_address: Prefix the line with "#0x<addr> : "

        Returns:
            Line like "#0x200 : Clear Screen (0x00E0)"
        """
        line = f"{self.text} (0x{self.opcode:04X})"
        if with_address:
            return f"#0x{self.address:03X} : {line}"
        return line

    def __str__(self) -> str:
        return self.format()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"0x{self.address:03X}",
            "address_int": self.address,
            "opcode": f"0x{self.opcode:04X}",
            "operation": self.instruction.operation.name,
            "text": self.text,
            "assembly": self.assembly,
        }


# =============================================================================
# Pseudocode
# =============================================================================

def describe(instr: Instruction) -> str:
    """
    Render a classified instruction as pseudocode.

    Args:
        instr: Instruction from classify()

    Returns:
        Pseudocode text, "unknown instruction" for UNKNOWN
    """
    vx = f"V{instr.x:X}"
    vy = f"V{instr.y:X}"
    nn = f"0x{instr.nn:02X}"
    nnn = f"0x{instr.nnn:03X}"

    match instr.operation:
        case Operation.CLS:
            return "Clear Screen"
        case Operation.RET:
            return "Return"
        case Operation.JP:
            return f"Jump to {nnn}"
        case Operation.CALL:
            return f"Call at {nnn}"
        case Operation.SE_BYTE:
            return f"if({vx} == {nn}), skip next instr."
        case Operation.SNE_BYTE:
            return f"if({vx} != {nn}), skip next instr."
        case Operation.SE_REG:
            return f"if({vx} == {vy}), skip next instr."
        case Operation.LD_BYTE:
            return f"{vx} = {nn}"
        case Operation.ADD_BYTE:
            return f"{vx} = {vx} + {nn}"
        case Operation.LD_REG:
            return f"{vx} = {vy}"
        case Operation.OR:
            return f"{vx} OR {vy} (bitwise op)"
        case Operation.AND:
            return f"{vx} AND {vy} (bitwise op)"
        case Operation.XOR:
            return f"{vx} XOR {vy}"
        case Operation.ADD_REG:
            return f"{vx} += {vy}"
        case Operation.SUB:
            return f"{vx} -= {vy}"
        case Operation.SHR:
            return f"{vx} = {vy} = {vx} >> 1"
        case Operation.SUBN:
            return f"{vx} = {vy} - {vx}"
        case Operation.SHL:
            return f"{vx} = {vy} = {vx} << 1"
        case Operation.SNE_REG:
            return f"if({vx} != {vy}), skip next instr."
        case Operation.LD_I:
            return f"I = {nnn}"
        case Operation.JP_V0:
            return f"PC = V0 + {nnn}"
        case Operation.RND:
            return f"{vx} = rand() AND {nn} (bitwise op)"
        case Operation.DRW:
            return f"Draw at ({vx}, {vy}) with height {instr.n:X}"
        case Operation.SKP:
            return f"if(key() == {vx}), skip next instr."
        case Operation.SKNP:
            return f"if(key() != {vx}), skip next instr."
        case Operation.LD_VX_DT:
            return f"{vx} = get_delay()"
        case Operation.LD_VX_K:
            return f"{vx} = get_key() (blocking operation)"
        case Operation.LD_DT_VX:
            return f"Delay timer = {vx}"
        case Operation.LD_ST_VX:
            return f"Sound timer = {vx}"
        case Operation.ADD_I:
            return f"I += {vx}"
        case Operation.LD_F:
            return f"I = sprite_addr({vx})"
        case Operation.LD_B:
            return f"set_BCD({vx})"
        case Operation.LD_MEM_VX:
            return f"reg_dump({vx}, &I)"
        case Operation.LD_VX_MEM:
            return f"reg_load({vx}, &I)"
        case _:
            return UNKNOWN_TEXT


# =============================================================================
# CHIP-8 Disassembler
# =============================================================================

class Chip8Disassembler:
    """
    Disassembler for CHIP-8 ROM images.

    Every CHIP-8 instruction is exactly two bytes, so disassembly is a
    linear walk over big-endian words. A trailing odd byte is not a
    complete instruction and is skipped.
    """

    def disassemble_one(self, opcode: int, address: int = 0) -> DisassembledInstruction:
        """
        Disassemble a single opcode.

        Args:
            opcode: 16-bit opcode
            address: Address to record for the instruction

        Returns:
            DisassembledInstruction for the opcode
        """
        instr = classify(opcode)
        return DisassembledInstruction(
            address=address,
            instruction=instr,
            text=describe(instr),
            assembly=instr.assembly,
        )

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> List[DisassembledInstruction]:
        """
        Disassemble a block of bytes.

        Args:
            data: Raw bytes (big-endian words)
            start_address: Address of data[0]
            count: Maximum number of instructions (None = all)

        Returns:
            One DisassembledInstruction per complete word
        """
        result = []
        word_count = len(data) // 2
        if count is not None:
            word_count = min(word_count, max(count, 0))

        for index in range(word_count):
            offset = index * 2
            opcode = (data[offset] << 8) | data[offset + 1]
            result.append(self.disassemble_one(opcode, start_address + offset))

        return result

    def disassemble_lines(
        self,
        data: bytes,
        with_address: bool = False,
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> List[str]:
        """
        Disassemble a block of bytes into formatted listing lines.

        Args:
            data: Raw bytes
            with_address: Prefix each line with its address
            start_address: Address of data[0]
            count: Maximum number of instructions (None = all)

        Returns:
            List of listing lines
        """
        return [
            instr.format(with_address)
            for instr in self.disassemble(data, start_address, count)
        ]

    def disassemble_to_text(
        self,
        data: bytes,
        with_address: bool = False,
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> str:
        """
        Disassemble to a newline-separated listing.

        Returns:
            Listing text (empty string for empty input)
        """
        return "\n".join(self.disassemble_lines(data, with_address, start_address, count))
