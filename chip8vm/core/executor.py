"""Opcode execution.

The executor maps each decoded instruction type to one handler method. Each
handler is a transition on MachineState: it validates everything that can
fault before mutating anything, so a raised MachineFault leaves the state as
it was after fetch.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from chip8vm.core import decoder as isa
from chip8vm.core.state import MachineState
from chip8vm.utils.config_loader import Quirks
from chip8vm.utils.consts import ConstUtils, glyph_address

logger = logging.getLogger(__name__)

VF = ConstUtils.FLAG_REGISTER


def _all_instruction_types() -> set[type[isa.Instruction]]:
    """Every concrete instruction class defined by the decoder."""
    found: set[type[isa.Instruction]] = set()
    pending = [isa.Instruction]
    while pending:
        cls = pending.pop()
        for sub in cls.__subclasses__():
            pending.append(sub)
            if sub not in (isa.RegisterOp, isa.RegisterInstruction):
                found.add(sub)
    return found


class Executor:
    """Executes decoded instructions against a MachineState.

    Args:
        quirks: Interpreter compatibility choices (defaults to COSMAC VIP)
        rng: Source of random bytes for CXNN; injectable for tests
    """

    def __init__(self, quirks: Optional[Quirks] = None, rng: Optional[random.Random] = None):
        self.quirks = quirks or Quirks()
        self._rng = rng or random.Random()
        self._handlers: dict[type[isa.Instruction], Callable[[MachineState, isa.Instruction], None]] = {
            isa.Sys: self._sys,
            isa.ClearScreen: self._clear_screen,
            isa.Return: self._return,
            isa.Jump: self._jump,
            isa.Call: self._call,
            isa.JumpWithOffset: self._jump_with_offset,
            isa.SkipIfEqualImmediate: self._skip_if_equal_immediate,
            isa.SkipIfNotEqualImmediate: self._skip_if_not_equal_immediate,
            isa.SkipIfRegistersEqual: self._skip_if_registers_equal,
            isa.SkipIfRegistersNotEqual: self._skip_if_registers_not_equal,
            isa.SkipIfKeyPressed: self._skip_if_key_pressed,
            isa.SkipIfKeyNotPressed: self._skip_if_key_not_pressed,
            isa.LoadImmediate: self._load_immediate,
            isa.AddImmediate: self._add_immediate,
            isa.LoadRegister: self._load_register,
            isa.Or: self._or,
            isa.And: self._and,
            isa.Xor: self._xor,
            isa.AddRegisters: self._add_registers,
            isa.Subtract: self._subtract,
            isa.SubtractReverse: self._subtract_reverse,
            isa.ShiftRight: self._shift_right,
            isa.ShiftLeft: self._shift_left,
            isa.LoadIndex: self._load_index,
            isa.Random: self._random,
            isa.Draw: self._draw,
            isa.LoadFromDelay: self._load_from_delay,
            isa.WaitForKey: self._wait_for_key,
            isa.SetDelay: self._set_delay,
            isa.SetSound: self._set_sound,
            isa.AddToIndex: self._add_to_index,
            isa.LoadFontGlyph: self._load_font_glyph,
            isa.StoreBCD: self._store_bcd,
            isa.StoreRegisters: self._store_registers,
            isa.LoadRegisters: self._load_registers,
            isa.Unknown: self._unknown,
        }
        missing = _all_instruction_types() - set(self._handlers)
        if missing:
            names = sorted(cls.__name__ for cls in missing)
            raise TypeError(f"No handler for instructions: {names}")

    def execute(self, state: MachineState, instruction: isa.Instruction) -> None:
        """Apply one decoded instruction to ``state``.

        PC must already point past the instruction.

        Raises:
            MachineFault: the instruction cannot complete
        """
        self._handlers[type(instruction)](state, instruction)

    # Helpers -----------------------------------------------------------------

    @staticmethod
    def _skip_if(state: MachineState, condition: bool) -> None:
        if condition:
            state.program_counter += 2

    # Control -----------------------------------------------------------------

    def _sys(self, _state: MachineState, ins: isa.Sys) -> None:
        logger.debug("Ignoring machine-code call %s", ins)

    def _clear_screen(self, state: MachineState, _ins: isa.ClearScreen) -> None:
        state.framebuffer.clear()

    def _return(self, state: MachineState, _ins: isa.Return) -> None:
        state.program_counter = state.pop()

    def _jump(self, state: MachineState, ins: isa.Jump) -> None:
        state.program_counter = ins.nnn

    def _call(self, state: MachineState, ins: isa.Call) -> None:
        state.push(state.program_counter)
        state.program_counter = ins.nnn

    def _jump_with_offset(self, state: MachineState, ins: isa.JumpWithOffset) -> None:
        offset_reg = ins.x if self.quirks.jump_uses_vx else 0
        state.program_counter = ins.nnn + state.registers[offset_reg]

    # Conditional skips -------------------------------------------------------

    def _skip_if_equal_immediate(self, state: MachineState, ins: isa.SkipIfEqualImmediate) -> None:
        self._skip_if(state, state.registers[ins.x] == ins.nn)

    def _skip_if_not_equal_immediate(
        self, state: MachineState, ins: isa.SkipIfNotEqualImmediate
    ) -> None:
        self._skip_if(state, state.registers[ins.x] != ins.nn)

    def _skip_if_registers_equal(self, state: MachineState, ins: isa.SkipIfRegistersEqual) -> None:
        self._skip_if(state, state.registers[ins.x] == state.registers[ins.y])

    def _skip_if_registers_not_equal(
        self, state: MachineState, ins: isa.SkipIfRegistersNotEqual
    ) -> None:
        self._skip_if(state, state.registers[ins.x] != state.registers[ins.y])

    def _skip_if_key_pressed(self, state: MachineState, ins: isa.SkipIfKeyPressed) -> None:
        key = state.registers[ins.x] & ConstUtils.MASK_4_BITS
        self._skip_if(state, state.keypad.is_pressed(key))

    def _skip_if_key_not_pressed(self, state: MachineState, ins: isa.SkipIfKeyNotPressed) -> None:
        key = state.registers[ins.x] & ConstUtils.MASK_4_BITS
        self._skip_if(state, not state.keypad.is_pressed(key))

    # Arithmetic --------------------------------------------------------------

    def _load_immediate(self, state: MachineState, ins: isa.LoadImmediate) -> None:
        state.registers[ins.x] = ins.nn

    def _add_immediate(self, state: MachineState, ins: isa.AddImmediate) -> None:
        # No carry flag for the immediate form.
        state.registers[ins.x] = (state.registers[ins.x] + ins.nn) & ConstUtils.MASK_8_BITS

    def _load_register(self, state: MachineState, ins: isa.LoadRegister) -> None:
        state.registers[ins.x] = state.registers[ins.y]

    def _or(self, state: MachineState, ins: isa.Or) -> None:
        state.registers[ins.x] |= state.registers[ins.y]

    def _and(self, state: MachineState, ins: isa.And) -> None:
        state.registers[ins.x] &= state.registers[ins.y]

    def _xor(self, state: MachineState, ins: isa.Xor) -> None:
        state.registers[ins.x] ^= state.registers[ins.y]

    # VF is always written after the result so the flag wins when X is F.

    def _add_registers(self, state: MachineState, ins: isa.AddRegisters) -> None:
        total = state.registers[ins.x] + state.registers[ins.y]
        state.registers[ins.x] = total & ConstUtils.MASK_8_BITS
        state.registers[VF] = 1 if total > ConstUtils.MASK_8_BITS else 0

    def _subtract(self, state: MachineState, ins: isa.Subtract) -> None:
        vx, vy = state.registers[ins.x], state.registers[ins.y]
        state.registers[ins.x] = (vx - vy) & ConstUtils.MASK_8_BITS
        state.registers[VF] = 1 if vx >= vy else 0

    def _subtract_reverse(self, state: MachineState, ins: isa.SubtractReverse) -> None:
        vx, vy = state.registers[ins.x], state.registers[ins.y]
        state.registers[ins.x] = (vy - vx) & ConstUtils.MASK_8_BITS
        state.registers[VF] = 1 if vy >= vx else 0

    def _shift_source(self, state: MachineState, ins: isa.RegisterOp) -> int:
        return state.registers[ins.x if self.quirks.shift_uses_vx else ins.y]

    def _shift_right(self, state: MachineState, ins: isa.ShiftRight) -> None:
        value = self._shift_source(state, ins)
        state.registers[ins.x] = value >> 1
        state.registers[VF] = value & 0x1

    def _shift_left(self, state: MachineState, ins: isa.ShiftLeft) -> None:
        value = self._shift_source(state, ins)
        state.registers[ins.x] = (value << 1) & ConstUtils.MASK_8_BITS
        state.registers[VF] = (value >> 7) & 0x1

    # Index, random, draw -----------------------------------------------------

    def _load_index(self, state: MachineState, ins: isa.LoadIndex) -> None:
        state.index_register = ins.nnn

    def _random(self, state: MachineState, ins: isa.Random) -> None:
        state.registers[ins.x] = self._rng.randrange(256) & ins.nn

    def _draw(self, state: MachineState, ins: isa.Draw) -> None:
        # Raises AddressOverflowError before any pixel changes.
        rows = state.memory.read_block(state.index_register, ins.n)
        collision = state.framebuffer.draw_sprite(
            state.registers[ins.x],
            state.registers[ins.y],
            rows,
            wrap=self.quirks.sprite_wrap,
        )
        state.registers[VF] = 1 if collision else 0

    # Timers and keypad -------------------------------------------------------

    def _load_from_delay(self, state: MachineState, ins: isa.LoadFromDelay) -> None:
        state.registers[ins.x] = state.timers.get_delay()

    def _set_delay(self, state: MachineState, ins: isa.SetDelay) -> None:
        state.timers.set_delay(state.registers[ins.x])

    def _set_sound(self, state: MachineState, ins: isa.SetSound) -> None:
        state.timers.set_sound(state.registers[ins.x])

    def _wait_for_key(self, state: MachineState, ins: isa.WaitForKey) -> None:
        key = state.keypad.first_pressed()
        if key is None:
            # Repeat this instruction on the next tick.
            state.program_counter -= 2
            return
        state.registers[ins.x] = key

    # Index and memory --------------------------------------------------------

    def _add_to_index(self, state: MachineState, ins: isa.AddToIndex) -> None:
        state.index_register = state.index_register + state.registers[ins.x]

    def _load_font_glyph(self, state: MachineState, ins: isa.LoadFontGlyph) -> None:
        state.index_register = glyph_address(state.registers[ins.x])

    def _store_bcd(self, state: MachineState, ins: isa.StoreBCD) -> None:
        value = state.registers[ins.x]
        digits = bytes((value // 100, (value // 10) % 10, value % 10))
        state.memory.write_block(state.index_register, digits)

    def _store_registers(self, state: MachineState, ins: isa.StoreRegisters) -> None:
        state.memory.write_block(state.index_register, bytes(state.registers[: ins.x + 1]))
        self._advance_index(state, ins.x)

    def _load_registers(self, state: MachineState, ins: isa.LoadRegisters) -> None:
        data = state.memory.read_block(state.index_register, ins.x + 1)
        state.registers[: ins.x + 1] = data
        self._advance_index(state, ins.x)

    def _advance_index(self, state: MachineState, x: int) -> None:
        if not self.quirks.load_store_keeps_index:
            state.index_register = state.index_register + x + 1

    def _unknown(self, state: MachineState, ins: isa.Unknown) -> None:
        logger.warning(
            "Unknown opcode 0x%04X at 0x%03X; skipping",
            ins.opcode,
            state.program_counter - 2,
        )
