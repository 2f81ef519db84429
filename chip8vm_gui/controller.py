"""Simulation controller (Presenter-ish, framework-agnostic)."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Protocol

from chip8vm.interfaces.cpu import CpuSnapshot, StepResult
from chip8vm_gui.backend import MachineBackend
from chip8vm_gui.keymap import KeyMap

try:
    import psutil  # type: ignore[import-untyped]
except ImportError:  # pragma: no cover - optional dependency
    psutil = None

logger = logging.getLogger(__name__)


class SimulationState(Enum):
    RUNNING = auto()
    PAUSED = auto()
    EXTERNAL = auto()
    FAULTED = auto()


class ToneOutput(Protocol):
    """Audio collaborator: plays a tone while active."""

    def set_active(self, active: bool) -> None:
        ...


@dataclass
class StatusSample:
    instructions_per_second: float | None
    cpu_percent: float | None
    memory_percent: float | None


class SystemMonitor:
    """Process-level CPU/memory monitoring."""

    def __init__(self):
        self._proc = psutil.Process() if psutil else None
        if self._proc is not None:
            self._proc.cpu_percent(interval=None)

    def sample(self) -> tuple[float | None, float | None]:
        if self._proc is None:
            return None, None
        return (
            float(self._proc.cpu_percent(interval=None)),
            float(self._proc.memory_percent()),
        )


class SimulationController:
    """Coordinator for stepping the machine and feeding its collaborators."""

    def __init__(
        self,
        backend: MachineBackend,
        keymap: KeyMap,
        tone: Optional[ToneOutput] = None,
        time_source: Callable[[], float] = time.monotonic,
    ):
        self._backend = backend
        self._keymap = keymap
        self._tone = tone
        self._time_source = time_source
        self._state = SimulationState.PAUSED
        self._monitor = SystemMonitor()
        self._last_fault: Optional[StepResult] = None
        self._rate_mark = (time_source(), backend.instruction_count())

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def last_fault(self) -> Optional[StepResult]:
        return self._last_fault

    def set_running(self, running: bool) -> None:
        if self._state == SimulationState.FAULTED:
            return
        self._state = SimulationState.RUNNING if running else SimulationState.PAUSED

    def toggle_running(self) -> None:
        self.set_running(self._state != SimulationState.RUNNING)

    def set_external(self, external: bool) -> None:
        if external:
            self._state = SimulationState.EXTERNAL
        elif self._state == SimulationState.EXTERNAL:
            self._state = SimulationState.PAUSED

    def reset(self) -> None:
        self._backend.reset()
        self._last_fault = None
        if self._state == SimulationState.FAULTED:
            self._state = SimulationState.PAUSED

    def frame(self) -> Optional[tuple[bool, ...]]:
        """Advance one frame if running and return new pixels, if any."""
        if self._state == SimulationState.RUNNING:
            result = self._backend.frame()
            if result.reason == "fault":
                self._last_fault = result
                self._state = SimulationState.FAULTED
                logger.error("Execution halted: %s", result.detail)
        self.update_audio()
        return self._backend.take_frame()

    def update_audio(self) -> None:
        if self._tone is not None:
            self._tone.set_active(
                self._state != SimulationState.PAUSED and self._backend.sound_active()
            )

    def key_event(self, char: str, pressed: bool) -> bool:
        """Forward a host key event; returns True if the key is bound."""
        key = self._keymap.lookup(char)
        if key is None:
            return False
        self._backend.set_key(key, pressed)
        return True

    def key_code_event(self, code: int, pressed: bool) -> bool:
        key = self._keymap.lookup_code(code)
        if key is None:
            return False
        self._backend.set_key(key, pressed)
        return True

    def snapshot(self) -> CpuSnapshot:
        return self._backend.cpu_snapshot()

    def status(self) -> StatusSample:
        now = self._time_source()
        count = self._backend.instruction_count()
        last_time, last_count = self._rate_mark
        elapsed = now - last_time
        rate = (count - last_count) / elapsed if elapsed > 0 else None
        self._rate_mark = (now, count)
        cpu, mem = self._monitor.sample()
        return StatusSample(instructions_per_second=rate, cpu_percent=cpu, memory_percent=mem)
