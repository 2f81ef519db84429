"""CPU interface for driver, debugger and GUI integration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Mapping


class ICPU(ABC):
    """CPU abstraction used by the debug session and the GUI backend."""

    @abstractmethod
    def step(self) -> "StepResult":
        """Execute a single instruction."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Reset CPU state."""
        ...

    @abstractmethod
    def get_snapshot(self) -> "CpuSnapshot":
        """Return a debug snapshot of CPU registers and flags."""
        ...

    def tick(self, cycles: int = 1) -> None:
        """Advance CPU by the given number of instructions."""
        for _ in range(cycles):
            self.step()


@dataclass(frozen=True)
class RegisterValue:
    """Single register value for UI/debug panels."""

    name: str
    value: int
    group: str = "core"
    width: int = 8


@dataclass(frozen=True)
class CpuSnapshot:
    """Snapshot of CPU state for UI/debug panels."""

    registers: Iterable[RegisterValue]
    flags: Mapping[str, bool]


@dataclass(frozen=True)
class StepResult:
    """Outcome of executing one instruction.

    ``reason`` is "step" for a normal instruction, "halted" when the driver
    refused to run because of an earlier fault, or "fault" when the
    instruction raised a MachineFault.
    """

    reason: str
    address: int | None = None
    opcode: int | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason == "step"
