"""Tick driver: one fetch-decode-execute cycle per call.

The driver owns the machine state, the executor and the timer clock. It is
the only component hosts talk to: renderers poll the redraw signal, audio
polls the sound timer and input collaborators set keypad keys.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

from chip8vm.core.decoder import decode, fetch
from chip8vm.core.exceptions import LoadTooLargeError, MachineFault
from chip8vm.core.executor import Executor
from chip8vm.core.state import MachineState
from chip8vm.core.timer import TimerClock
from chip8vm.interfaces.cpu import ICPU, CpuSnapshot, StepResult
from chip8vm.utils.config_loader import Chip8Config
from chip8vm.utils.consts import ConstUtils

logger = logging.getLogger(__name__)


class TickDriver(ICPU):
    """Runs a program one instruction at a time.

    Faults never escape step(): the driver rewinds PC to the faulting
    instruction, records the fault and halts. A halted driver refuses to
    execute until reset() or resume() is called; the host decides which.
    """

    def __init__(
        self,
        config: Optional[Chip8Config] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or Chip8Config()
        self.timers = TimerClock(frequency=self.config.machine.timer_frequency)
        self.state = MachineState(timers=self.timers)
        self.executor = Executor(quirks=self.config.quirks, rng=rng)
        self._halted = False
        self._fault: Optional[StepResult] = None
        self._instruction_count = 0
        self._rom = b""

    @property
    def halted(self) -> bool:
        return self._halted

    @property
    def fault(self) -> Optional[StepResult]:
        """The fault that halted the driver, if any."""
        return self._fault

    @property
    def instruction_count(self) -> int:
        return self._instruction_count

    @property
    def rom(self) -> bytes:
        """The program image most recently passed to load()."""
        return self._rom

    # Program entry -----------------------------------------------------------

    def load(self, rom: bytes) -> None:
        """Load program bytes at 0x200 and clear any previous fault.

        Raises:
            LoadTooLargeError: ROM exceeds program memory; nothing changes
        """
        self.state.load(rom)
        self._rom = bytes(rom)
        self.resume()

    def reload(self, rom: Optional[bytes] = None) -> None:
        """Reset the machine and load ``rom``, or the last loaded ROM if omitted.

        The size is checked before the reset so an oversized ROM leaves the
        running program untouched.

        Raises:
            LoadTooLargeError: ROM exceeds program memory; nothing changes
        """
        image = self._rom if rom is None else bytes(rom)
        if len(image) > ConstUtils.MAX_ROM_SIZE:
            raise LoadTooLargeError(len(image), ConstUtils.MAX_ROM_SIZE)
        self.reset()
        self.load(image)

    def load_file(self, path: str | Path) -> None:
        self.load(Path(path).read_bytes())

    # Execution ---------------------------------------------------------------

    def step(self) -> StepResult:
        """Execute exactly one instruction."""
        pc = self.state.program_counter
        if self._halted:
            return StepResult(reason="halted", address=pc)

        opcode = None
        try:
            opcode = fetch(self.state)
            self.executor.execute(self.state, decode(opcode))
        except MachineFault as exc:
            self.state.program_counter = pc
            self._halted = True
            self._fault = StepResult(reason="fault", address=pc, opcode=opcode, detail=str(exc))
            logger.error("Machine fault at PC=0x%03X: %s", pc, exc)
            return self._fault

        self._instruction_count += 1
        return StepResult(reason="step", address=self.state.program_counter, opcode=opcode)

    def run(self, cycles: int) -> StepResult:
        """Execute up to ``cycles`` instructions, stopping early on a fault."""
        if cycles < 0:
            raise ValueError("cycles must be >= 0")
        result = StepResult(reason="step", address=self.state.program_counter)
        for _ in range(cycles):
            result = self.step()
            if not result.ok:
                break
        return result

    def frame(self) -> StepResult:
        """Execute one display frame worth of instructions."""
        return self.run(self.config.machine.cycles_per_frame)

    def tick(self, cycles: int = 1) -> None:
        self.run(cycles)

    def resume(self) -> None:
        """Clear a recorded fault so execution may continue."""
        self._halted = False
        self._fault = None

    def reset(self) -> None:
        self.state.reset()
        self.resume()
        self._instruction_count = 0
        logger.info("Machine reset")

    # Timer clock -------------------------------------------------------------

    def start_timers(self) -> None:
        self.timers.start()

    def stop_timers(self) -> None:
        self.timers.stop()

    def __enter__(self) -> "TickDriver":
        self.start_timers()
        return self

    def __exit__(self, *_exc_info) -> None:
        self.stop_timers()

    # Collaborator boundary ---------------------------------------------------

    @property
    def redraw_needed(self) -> bool:
        return self.state.framebuffer.dirty

    def consume_redraw(self) -> bool:
        return self.state.framebuffer.consume_redraw()

    @property
    def sound_active(self) -> bool:
        return self.timers.is_sounding

    def set_key(self, key: int, pressed: bool) -> None:
        self.state.keypad.set(key, pressed)

    def get_snapshot(self) -> CpuSnapshot:
        return self.state.snapshot()
