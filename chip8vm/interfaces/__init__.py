"""Interface abstractions for the virtual machine.

Defines behavioral contracts shared by the core and its collaborators:
- ICPU: steppable CPU with debug snapshots
- ITimerClock: delay/sound counters on a fixed cadence
"""

from chip8vm.interfaces.clock import ITimerClock
from chip8vm.interfaces.cpu import ICPU, CpuSnapshot, RegisterValue, StepResult

__all__ = [
    "ICPU",
    "CpuSnapshot",
    "RegisterValue",
    "StepResult",
    "ITimerClock",
]
