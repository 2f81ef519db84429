"""GUI backend interfaces and adapters."""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
from typing import ContextManager, Protocol

from chip8vm.core.driver import TickDriver
from chip8vm.interfaces.cpu import CpuSnapshot, StepResult


class MachineBackend(Protocol):
    """Minimal machine backend required by the GUI."""

    def frame(self) -> StepResult:
        ...

    def reset(self) -> None:
        ...

    def set_key(self, key: int, pressed: bool) -> None:
        ...

    def take_frame(self) -> tuple[bool, ...] | None:
        ...

    def sound_active(self) -> bool:
        ...

    def instruction_count(self) -> int:
        ...

    def cpu_snapshot(self) -> CpuSnapshot:
        ...


@dataclass
class DriverBackend(MachineBackend):
    """Adapter that exposes a TickDriver through the MachineBackend interface.

    The optional lock is shared with a debug server driving the same machine.
    """

    driver: TickDriver
    lock: ContextManager | None = None

    def __post_init__(self) -> None:
        if self.lock is None:
            self.lock = nullcontext()

    def frame(self) -> StepResult:
        assert self.lock is not None
        with self.lock:
            return self.driver.frame()

    def reset(self) -> None:
        """Restart the machine with the program it was running."""
        assert self.lock is not None
        with self.lock:
            self.driver.reload()

    def reload(self, rom: bytes) -> None:
        assert self.lock is not None
        with self.lock:
            self.driver.reload(rom)

    def set_key(self, key: int, pressed: bool) -> None:
        assert self.lock is not None
        with self.lock:
            self.driver.set_key(key, pressed)

    def take_frame(self) -> tuple[bool, ...] | None:
        """Return the framebuffer if a redraw was signalled since the last call."""
        assert self.lock is not None
        with self.lock:
            if not self.driver.consume_redraw():
                return None
            return self.driver.state.framebuffer.pixels()

    def sound_active(self) -> bool:
        return self.driver.sound_active

    def instruction_count(self) -> int:
        return self.driver.instruction_count

    def cpu_snapshot(self) -> CpuSnapshot:
        assert self.lock is not None
        with self.lock:
            return self.driver.get_snapshot()
