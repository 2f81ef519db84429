"""Machine state: register file, stack, memory, display and keypad.

MachineState is plain data. It enforces its invariants (8-bit registers,
16-bit index, bounded stack) on mutation but has no instruction semantics;
those live in the executor.
"""

from __future__ import annotations

import logging
from typing import Optional

from chip8vm.core.display import Framebuffer
from chip8vm.core.exceptions import StackOverflowError, StackUnderflowError
from chip8vm.core.keypad import Keypad
from chip8vm.core.memory import Memory
from chip8vm.core.timer import TimerClock
from chip8vm.interfaces.clock import ITimerClock
from chip8vm.interfaces.cpu import CpuSnapshot, RegisterValue
from chip8vm.utils.consts import ConstUtils

logger = logging.getLogger(__name__)


class MachineState:
    """Complete mutable state of one virtual machine."""

    def __init__(self, timers: Optional[ITimerClock] = None):
        self.memory = Memory()
        self.framebuffer = Framebuffer()
        self.keypad = Keypad()
        self.timers: ITimerClock = timers if timers is not None else TimerClock()
        self.registers = bytearray(ConstUtils.NUM_REGISTERS)
        self._index_register = 0
        self._program_counter = ConstUtils.PROGRAM_START
        self._stack: list[int] = []

    # Register file -----------------------------------------------------------

    def get_register(self, index: int) -> int:
        self._validate_register(index)
        return self.registers[index]

    def set_register(self, index: int, value: int) -> None:
        self._validate_register(index)
        self.registers[index] = value & ConstUtils.MASK_8_BITS

    @property
    def index_register(self) -> int:
        return self._index_register

    @index_register.setter
    def index_register(self, value: int) -> None:
        self._index_register = value & ConstUtils.MASK_16_BITS

    @property
    def program_counter(self) -> int:
        return self._program_counter

    @program_counter.setter
    def program_counter(self, value: int) -> None:
        # Range is validated at fetch time so faults report the bad target.
        self._program_counter = value & ConstUtils.MASK_16_BITS

    # Stack -------------------------------------------------------------------

    @property
    def stack(self) -> tuple[int, ...]:
        return tuple(self._stack)

    @property
    def stack_pointer(self) -> int:
        return len(self._stack)

    def push(self, address: int) -> None:
        if len(self._stack) >= ConstUtils.STACK_DEPTH:
            raise StackOverflowError(len(self._stack))
        self._stack.append(address & ConstUtils.MASK_16_BITS)

    def pop(self) -> int:
        if not self._stack:
            raise StackUnderflowError()
        return self._stack.pop()

    # Timers (proxied for convenience) ---------------------------------------

    @property
    def delay_timer(self) -> int:
        return self.timers.get_delay()

    @property
    def sound_timer(self) -> int:
        return self.timers.get_sound()

    # Lifecycle ---------------------------------------------------------------

    def load(self, rom: bytes) -> None:
        """Copy a ROM to 0x200 and point the program counter at it.

        Raises:
            LoadTooLargeError: ROM exceeds 3584 bytes; nothing is modified
        """
        self.memory.load_image(rom)
        self._program_counter = ConstUtils.PROGRAM_START
        logger.info("Loaded %d byte ROM at 0x%03X", len(rom), ConstUtils.PROGRAM_START)

    def reset(self) -> None:
        """Return to the just-constructed state."""
        self.memory.reset()
        self.framebuffer.reset()
        self.keypad.reset()
        self.timers.reset()
        self.registers[:] = bytes(ConstUtils.NUM_REGISTERS)
        self._index_register = 0
        self._program_counter = ConstUtils.PROGRAM_START
        self._stack.clear()

    def snapshot(self) -> CpuSnapshot:
        registers = [
            RegisterValue(f"V{i:X}", value) for i, value in enumerate(self.registers)
        ]
        registers += [
            RegisterValue("I", self._index_register, group="address", width=16),
            RegisterValue("PC", self._program_counter, group="address", width=16),
            RegisterValue("SP", len(self._stack), group="address"),
            RegisterValue("DT", self.timers.get_delay(), group="timer"),
            RegisterValue("ST", self.timers.get_sound(), group="timer"),
        ]
        flags = {
            "VF": bool(self.registers[ConstUtils.FLAG_REGISTER]),
            "sound": self.timers.is_sounding,
            "redraw": self.framebuffer.dirty,
        }
        return CpuSnapshot(registers=registers, flags=flags)

    @staticmethod
    def _validate_register(index: int) -> None:
        if not 0 <= index < ConstUtils.NUM_REGISTERS:
            raise ValueError(f"Invalid register index {index}; must be 0-15")
