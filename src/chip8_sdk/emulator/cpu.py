"""
CHIP-8 Interpreter Core
=======================

Fetch/decode/execute for the 35 documented CHIP-8 instructions.

One call to Interpreter.step() performs exactly one instruction cycle:

1. Fetch the big-endian opcode at PC
2. Classify it with the shared classifier (chip8_sdk.cpu.classify)
3. Execute the operation against a MachineState
4. Advance PC by 2, unless the operation set PC itself (jumps, calls,
   returns, skips, and Fx0A while no key is pressed)

Flag Behaviour
--------------
- 8xy4 ADD:  VF = 1 if Vx + Vy > 0xFF
- 8xy5 SUB:  VF = 1 if Vx > Vy (strictly greater)
- 8xy7 SUBN: VF = 1 if Vy > Vx (strictly greater)
- 8xy6 SHR:  VF = least significant bit of Vx before the shift
- 8xyE SHL:  VF = most significant bit of Vx before the shift
- Dxyn DRW:  VF = 1 if any set pixel was erased

VF is written after the result, so an instruction whose destination is VF
leaves VF holding the flag.

Undocumented opcodes are not errors: they leave the state untouched
(PC included) and are reported through StepResult.implemented. Stack and
memory violations are errors and raise MachineError subclasses.

The interpreter holds no machine state of its own. It only carries the
configuration (quirks, stack depth) and the random generator for RND, so
one interpreter can drive several machines.

Copyright (c) 2025 chip8-sdk Contributors
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from chip8_sdk.cpu import CONTROL_FLOW, Instruction, Operation, classify
from chip8_sdk.errors import MemoryAccessError
from .config import EmulatorConfig
from .memory import glyph_address
from .state import END_OF_PROGRAM, FLAG_REGISTER, MachineState

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """
    Outcome of a single instruction cycle.

    Attributes:
        address: PC at which the instruction was fetched
        instruction: The classified instruction
        implemented: False if the opcode is outside the instruction set
        waiting: True if Fx0A found no key pressed (PC was not advanced)
        drew: True if the instruction changed the display (CLS, DRW)
    """
    address: int
    instruction: Instruction
    implemented: bool = True
    waiting: bool = False
    drew: bool = False

    @property
    def opcode(self) -> int:
        """The raw opcode executed."""
        return self.instruction.opcode

    @property
    def is_end_of_program(self) -> bool:
        """True if the opcode was the 0x0000 end-of-program sentinel."""
        return self.instruction.opcode == END_OF_PROGRAM

    def __str__(self) -> str:
        return f"0x{self.address:03X}: {self.opcode:04X}  {self.instruction.assembly}"


class Interpreter:
    """
    CHIP-8 instruction interpreter.

    Example:
        >>> state = MachineState()
        >>> state.load_program(bytes([0x6A, 0x12, 0x7A, 0x05]))
        >>> interp = Interpreter()
        >>> _ = interp.step(state)
        >>> _ = interp.step(state)
        >>> hex(state.registers[0xA])
        '0x17'
    """

    def __init__(
        self,
        config: Optional[EmulatorConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the interpreter.

        Args:
            config: Quirk and stack settings (default: EmulatorConfig())
            rng: Random source for RND (default: seeded from config.seed)
        """
        self.config = config or EmulatorConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)

    # ========================================
    # Instruction Cycle
    # ========================================

    def fetch(self, state: MachineState) -> int:
        """
        Fetch the opcode at PC and record it as the current opcode.

        Raises:
            MemoryAccessError: If PC is 0xFFF (the word crosses the end of memory)
        """
        address = state.pc
        try:
            opcode = state.memory.read_word(address)
        except MemoryAccessError as e:
            raise MemoryAccessError(e.target, address=address) from e
        state.current_opcode = opcode
        return opcode

    def step(self, state: MachineState) -> StepResult:
        """
        Execute one instruction.

        Args:
            state: Machine to advance

        Returns:
            StepResult describing the executed instruction

        Raises:
            StackOverflowError: CALL with a full stack
            StackUnderflowError: RET with an empty stack
            MemoryAccessError: Fetch or data access beyond 0xFFF
        """
        address = state.pc
        opcode = self.fetch(state)
        instruction = classify(opcode)
        result = StepResult(address=address, instruction=instruction)

        if not instruction.is_known:
            result.implemented = False
            if opcode == END_OF_PROGRAM:
                logger.debug(f"End-of-program marker at 0x{address:03X}")
            else:
                logger.warning(f"Unknown opcode 0x{opcode:04X} at 0x{address:03X}")
            return result

        logger.debug(f"0x{address:03X}: {opcode:04X}  {instruction.assembly}")

        try:
            self._execute(state, instruction, result)
        except MemoryAccessError as e:
            if e.address is not None:
                raise
            raise MemoryAccessError(e.target, address=address, opcode=opcode) from e

        if instruction.operation not in CONTROL_FLOW:
            state.pc = address + 2

        return result

    # ========================================
    # Execution
    # ========================================

    def _execute(self, state: MachineState, instr: Instruction, result: StepResult) -> None:
        """Execute a classified instruction. PC still holds its address."""
        v = state.registers
        x, y = instr.x, instr.y
        address = state.pc

        match instr.operation:
            # --- Flow control ---
            case Operation.CLS:
                state.display.clear()
                result.drew = True

            case Operation.RET:
                state.pc = state.pop_return()

            case Operation.JP:
                state.pc = instr.nnn

            case Operation.CALL:
                state.push_return(address + 2)
                state.pc = instr.nnn

            case Operation.JP_V0:
                state.pc = v[0] + instr.nnn

            # --- Conditional skips ---
            case Operation.SE_BYTE:
                self._skip_if(state, v[x] == instr.nn)

            case Operation.SNE_BYTE:
                self._skip_if(state, v[x] != instr.nn)

            case Operation.SE_REG:
                self._skip_if(state, v[x] == v[y])

            case Operation.SNE_REG:
                self._skip_if(state, v[x] != v[y])

            case Operation.SKP:
                self._skip_if(state, state.keypad.is_pressed(v[x]))

            case Operation.SKNP:
                self._skip_if(state, not state.keypad.is_pressed(v[x]))

            # --- Immediate loads ---
            case Operation.LD_BYTE:
                v[x] = instr.nn

            case Operation.ADD_BYTE:
                # No carry flag for 7xnn
                v[x] = (v[x] + instr.nn) & 0xFF

            case Operation.LD_I:
                state.i = instr.nnn

            case Operation.RND:
                v[x] = self.rng.randrange(0x100) & instr.nn

            # --- Register ALU (8xyN) ---
            case Operation.LD_REG:
                v[x] = v[y]

            case Operation.OR:
                v[x] = v[x] | v[y]

            case Operation.AND:
                v[x] = v[x] & v[y]

            case Operation.XOR:
                v[x] = v[x] ^ v[y]

            case Operation.ADD_REG:
                total = v[x] + v[y]
                v[x] = total & 0xFF
                v[FLAG_REGISTER] = 1 if total > 0xFF else 0

            case Operation.SUB:
                flag = 1 if v[x] > v[y] else 0
                v[x] = (v[x] - v[y]) & 0xFF
                v[FLAG_REGISTER] = flag

            case Operation.SUBN:
                flag = 1 if v[y] > v[x] else 0
                v[x] = (v[y] - v[x]) & 0xFF
                v[FLAG_REGISTER] = flag

            case Operation.SHR:
                before = v[x]
                self._store_shift(v, x, y, before >> 1)
                v[FLAG_REGISTER] = before & 0x01

            case Operation.SHL:
                before = v[x]
                self._store_shift(v, x, y, (before << 1) & 0xFF)
                v[FLAG_REGISTER] = (before >> 7) & 0x01

            # --- Display ---
            case Operation.DRW:
                sprite = state.memory.read_block(state.i, instr.n)
                collision = state.display.draw_sprite(v[x], v[y], sprite)
                v[FLAG_REGISTER] = 1 if collision else 0
                result.drew = True

            # --- Timers and keypad ---
            case Operation.LD_VX_DT:
                v[x] = state.delay_timer

            case Operation.LD_DT_VX:
                state.delay_timer = v[x]

            case Operation.LD_ST_VX:
                state.sound_timer = v[x]

            case Operation.LD_VX_K:
                key = state.keypad.first_pressed()
                if key is None:
                    # Re-executed next cycle until a key is down
                    result.waiting = True
                else:
                    v[x] = key
                    state.pc = address + 2

            # --- Index register and memory transfers ---
            case Operation.ADD_I:
                state.i = state.i + v[x]

            case Operation.LD_F:
                state.i = glyph_address(v[x])

            case Operation.LD_B:
                value = v[x]
                state.memory.write_block(
                    state.i, (value // 100, value // 10 % 10, value % 100 % 10)
                )

            case Operation.LD_MEM_VX:
                state.memory.write_block(state.i, v[:x + 1])
                state.i = state.i + x + 1

            case Operation.LD_VX_MEM:
                v[:x + 1] = state.memory.read_block(state.i, x + 1)
                state.i = state.i + x + 1

            case _:
                raise AssertionError(f"unhandled operation {instr.operation.name}")

    @staticmethod
    def _skip_if(state: MachineState, condition: bool) -> None:
        """Advance PC past the current instruction, and past the next one if condition holds."""
        state.pc = state.pc + (4 if condition else 2)

    def _store_shift(self, v: bytearray, x: int, y: int, value: int) -> None:
        """Write a shift result to Vx, and to Vy when the shift quirk is on."""
        v[x] = value
        if self.config.shift_quirk:
            v[y] = value
