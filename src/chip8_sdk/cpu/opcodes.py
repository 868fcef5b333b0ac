"""
CHIP-8 Instruction Set Definition
=================================

This module defines the CHIP-8 instruction set and the opcode classifier
shared by the interpreter and the disassembler. Every CHIP-8 instruction
is a 16-bit big-endian word; the top nibble selects the instruction
family and, where a family is overloaded, the low nibble or low byte
selects the variant.

Operand Fields
--------------
All operand fields are extracted bitwise from the opcode:

    x   = (opcode >> 8) & 0xF    register index
    y   = (opcode >> 4) & 0xF    register index
    n   = opcode & 0xF           4-bit immediate (sprite height, ALU variant)
    nn  = opcode & 0xFF          8-bit immediate
    nnn = opcode & 0xFFF         12-bit address

Instruction Families
--------------------
    0x0  00E0 CLS, 00EE RET
    0x1  1nnn JP addr
    0x2  2nnn CALL addr
    0x3  3xnn SE Vx, byte
    0x4  4xnn SNE Vx, byte
    0x5  5xy0 SE Vx, Vy
    0x6  6xnn LD Vx, byte
    0x7  7xnn ADD Vx, byte
    0x8  8xy0..8xyE register ALU operations
    0x9  9xy0 SNE Vx, Vy
    0xA  Annn LD I, addr
    0xB  Bnnn JP V0, addr
    0xC  Cxnn RND Vx, byte
    0xD  Dxyn DRW Vx, Vy, nibble
    0xE  Ex9E SKP Vx, ExA1 SKNP Vx
    0xF  Fx07..Fx65 timers, keypad, index and memory transfers

Anything else (including the legacy 0nnn SYS call and 0x0000, which the
tooling uses as an end-of-program sentinel) classifies as UNKNOWN.

Reference
---------
- Cowgod's CHIP-8 Technical Reference:
  http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
- https://en.wikipedia.org/wiki/CHIP-8#Opcode_table
"""

from dataclasses import dataclass
from enum import Enum, auto


# =============================================================================
# Operation Enumeration
# =============================================================================

class Operation(Enum):
    """
    CHIP-8 operations, one member per documented instruction variant.

    The classifier produces exactly one of these for every 16-bit value;
    the interpreter and disassembler both match on it.
    """
    CLS = auto()         # 00E0
    RET = auto()         # 00EE
    JP = auto()          # 1nnn
    CALL = auto()        # 2nnn
    SE_BYTE = auto()     # 3xnn
    SNE_BYTE = auto()    # 4xnn
    SE_REG = auto()      # 5xy0
    LD_BYTE = auto()     # 6xnn
    ADD_BYTE = auto()    # 7xnn
    LD_REG = auto()      # 8xy0
    OR = auto()          # 8xy1
    AND = auto()         # 8xy2
    XOR = auto()         # 8xy3
    ADD_REG = auto()     # 8xy4
    SUB = auto()         # 8xy5
    SHR = auto()         # 8xy6
    SUBN = auto()        # 8xy7
    SHL = auto()         # 8xyE
    SNE_REG = auto()     # 9xy0
    LD_I = auto()        # Annn
    JP_V0 = auto()       # Bnnn
    RND = auto()         # Cxnn
    DRW = auto()         # Dxyn
    SKP = auto()         # Ex9E
    SKNP = auto()        # ExA1
    LD_VX_DT = auto()    # Fx07
    LD_VX_K = auto()     # Fx0A
    LD_DT_VX = auto()    # Fx15
    LD_ST_VX = auto()    # Fx18
    ADD_I = auto()       # Fx1E
    LD_F = auto()        # Fx29
    LD_B = auto()        # Fx33
    LD_MEM_VX = auto()   # Fx55
    LD_VX_MEM = auto()   # Fx65
    UNKNOWN = auto()     # anything else


# =============================================================================
# Mnemonic Table
# =============================================================================
# Operation -> (mnemonic, operand template). Templates are formatted with
# the Instruction's fields, so the assembly text is derived from the same
# decoded values the interpreter executes.

MNEMONICS: dict[Operation, tuple[str, str]] = {
    Operation.CLS: ("CLS", ""),
    Operation.RET: ("RET", ""),
    Operation.JP: ("JP", "0x{nnn:03X}"),
    Operation.CALL: ("CALL", "0x{nnn:03X}"),
    Operation.SE_BYTE: ("SE", "V{x:X}, 0x{nn:02X}"),
    Operation.SNE_BYTE: ("SNE", "V{x:X}, 0x{nn:02X}"),
    Operation.SE_REG: ("SE", "V{x:X}, V{y:X}"),
    Operation.LD_BYTE: ("LD", "V{x:X}, 0x{nn:02X}"),
    Operation.ADD_BYTE: ("ADD", "V{x:X}, 0x{nn:02X}"),
    Operation.LD_REG: ("LD", "V{x:X}, V{y:X}"),
    Operation.OR: ("OR", "V{x:X}, V{y:X}"),
    Operation.AND: ("AND", "V{x:X}, V{y:X}"),
    Operation.XOR: ("XOR", "V{x:X}, V{y:X}"),
    Operation.ADD_REG: ("ADD", "V{x:X}, V{y:X}"),
    Operation.SUB: ("SUB", "V{x:X}, V{y:X}"),
    Operation.SHR: ("SHR", "V{x:X}, V{y:X}"),
    Operation.SUBN: ("SUBN", "V{x:X}, V{y:X}"),
    Operation.SHL: ("SHL", "V{x:X}, V{y:X}"),
    Operation.SNE_REG: ("SNE", "V{x:X}, V{y:X}"),
    Operation.LD_I: ("LD", "I, 0x{nnn:03X}"),
    Operation.JP_V0: ("JP", "V0, 0x{nnn:03X}"),
    Operation.RND: ("RND", "V{x:X}, 0x{nn:02X}"),
    Operation.DRW: ("DRW", "V{x:X}, V{y:X}, {n}"),
    Operation.SKP: ("SKP", "V{x:X}"),
    Operation.SKNP: ("SKNP", "V{x:X}"),
    Operation.LD_VX_DT: ("LD", "V{x:X}, DT"),
    Operation.LD_VX_K: ("LD", "V{x:X}, K"),
    Operation.LD_DT_VX: ("LD", "DT, V{x:X}"),
    Operation.LD_ST_VX: ("LD", "ST, V{x:X}"),
    Operation.ADD_I: ("ADD", "I, V{x:X}"),
    Operation.LD_F: ("LD", "F, V{x:X}"),
    Operation.LD_B: ("LD", "B, V{x:X}"),
    Operation.LD_MEM_VX: ("LD", "[I], V{x:X}"),
    Operation.LD_VX_MEM: ("LD", "V{x:X}, [I]"),
    Operation.UNKNOWN: (".WORD", "0x{opcode:04X}"),
}

# Operations that set PC themselves instead of falling through to PC + 2.
# LD_VX_K is included because it only advances once a key is pressed.
CONTROL_FLOW: frozenset[Operation] = frozenset({
    Operation.RET,
    Operation.JP,
    Operation.CALL,
    Operation.SE_BYTE,
    Operation.SNE_BYTE,
    Operation.SE_REG,
    Operation.SNE_REG,
    Operation.JP_V0,
    Operation.SKP,
    Operation.SKNP,
    Operation.LD_VX_K,
})

# Variant tables for the overloaded families
_ALU_VARIANTS = {
    0x0: Operation.LD_REG,
    0x1: Operation.OR,
    0x2: Operation.AND,
    0x3: Operation.XOR,
    0x4: Operation.ADD_REG,
    0x5: Operation.SUB,
    0x6: Operation.SHR,
    0x7: Operation.SUBN,
    0xE: Operation.SHL,
}

_KEY_VARIANTS = {
    0x9E: Operation.SKP,
    0xA1: Operation.SKNP,
}

_MISC_VARIANTS = {
    0x07: Operation.LD_VX_DT,
    0x0A: Operation.LD_VX_K,
    0x15: Operation.LD_DT_VX,
    0x18: Operation.LD_ST_VX,
    0x1E: Operation.ADD_I,
    0x29: Operation.LD_F,
    0x33: Operation.LD_B,
    0x55: Operation.LD_MEM_VX,
    0x65: Operation.LD_VX_MEM,
}

# Families with a single operation, selected by the top nibble alone
_SIMPLE_FAMILIES = {
    0x1: Operation.JP,
    0x2: Operation.CALL,
    0x3: Operation.SE_BYTE,
    0x4: Operation.SNE_BYTE,
    0x6: Operation.LD_BYTE,
    0x7: Operation.ADD_BYTE,
    0xA: Operation.LD_I,
    0xB: Operation.JP_V0,
    0xC: Operation.RND,
    0xD: Operation.DRW,
}


# =============================================================================
# Decoded Instruction
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    A classified CHIP-8 opcode with its operand fields.

    This dataclass is immutable (frozen); the same descriptor can be
    shared between the interpreter, the disassembler and test code.

    Attributes:
        opcode: The raw 16-bit opcode
        operation: The classified operation (UNKNOWN if undocumented)
        x: Second nibble (register index)
        y: Third nibble (register index)
        n: Low nibble
        nn: Low byte
        nnn: Low 12 bits (address)
    """
    opcode: int
    operation: Operation
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @property
    def family(self) -> int:
        """Top nibble of the opcode (0x0-0xF)."""
        return self.opcode >> 12

    @property
    def is_known(self) -> bool:
        """True if the opcode is part of the documented instruction set."""
        return self.operation is not Operation.UNKNOWN

    @property
    def mnemonic(self) -> str:
        """Assembly mnemonic (e.g. "ADD", "DRW")."""
        return MNEMONICS[self.operation][0]

    @property
    def operands(self) -> str:
        """Formatted operand list (e.g. "V1, 0x05"), empty if none."""
        template = MNEMONICS[self.operation][1]
        return template.format(
            opcode=self.opcode,
            x=self.x,
            y=self.y,
            n=self.n,
            nn=self.nn,
            nnn=self.nnn,
        )

    @property
    def assembly(self) -> str:
        """Mnemonic and operands as a single assembly line."""
        operands = self.operands
        return f"{self.mnemonic} {operands}" if operands else self.mnemonic

    def __str__(self) -> str:
        return self.assembly

    def __repr__(self) -> str:
        return f"Instruction(opcode=0x{self.opcode:04X}, operation={self.operation.name})"


# =============================================================================
# Classifier
# =============================================================================

def classify(opcode: int) -> Instruction:
    """
    Classify a 16-bit opcode.

    This function is pure and total: every integer produces exactly one
    Instruction, and values wider than 16 bits are masked first. Opcodes
    outside the documented instruction set produce Operation.UNKNOWN
    rather than raising.

    Args:
        opcode: The opcode to classify

    Returns:
        Instruction with the operation and all operand fields

    Example:
        >>> classify(0x8014).operation
        <Operation.ADD_REG: 14>
        >>> str(classify(0x6A12))
        'LD VA, 0x12'
    """
    opcode &= 0xFFFF
    family = opcode >> 12
    n = opcode & 0xF
    nn = opcode & 0xFF

    match family:
        case 0x0:
            if opcode == 0x00E0:
                operation = Operation.CLS
            elif opcode == 0x00EE:
                operation = Operation.RET
            else:
                operation = Operation.UNKNOWN
        case 0x5:
            operation = Operation.SE_REG if n == 0 else Operation.UNKNOWN
        case 0x8:
            operation = _ALU_VARIANTS.get(n, Operation.UNKNOWN)
        case 0x9:
            operation = Operation.SNE_REG if n == 0 else Operation.UNKNOWN
        case 0xE:
            operation = _KEY_VARIANTS.get(nn, Operation.UNKNOWN)
        case 0xF:
            operation = _MISC_VARIANTS.get(nn, Operation.UNKNOWN)
        case _:
            operation = _SIMPLE_FAMILIES[family]

    return Instruction(
        opcode=opcode,
        operation=operation,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        n=n,
        nn=nn,
        nnn=opcode & 0xFFF,
    )


def is_control_flow(operation: Operation) -> bool:
    """Check if an operation sets PC itself."""
    return operation in CONTROL_FLOW
