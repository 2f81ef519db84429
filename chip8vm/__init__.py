"""CHIP-8 virtual machine.

This package emulates the CHIP-8 virtual computer: a 4 KiB memory, sixteen
8-bit registers, a 64x32 monochrome display, a hex keypad and two 60 Hz
timers.

Architecture:
- Machine state is plain data with invariant-preserving mutation
- Instructions decode to tagged variants; the executor dispatches on type
- Timers decay on their own thread at wall-clock rate
- Faults are reported by the tick driver instead of corrupting state

Getting started:
    from chip8vm import TickDriver

    driver = TickDriver()
    driver.load(rom_bytes)
    with driver:
        driver.frame()
"""

from chip8vm.core.driver import TickDriver
from chip8vm.core.executor import Executor
from chip8vm.core.state import MachineState
from chip8vm.core.timer import TimerClock
from chip8vm.utils.config_loader import Chip8Config, MachineConfig, Quirks, get_config, load_config

__all__ = [
    "TickDriver",
    "Executor",
    "MachineState",
    "TimerClock",
    "Chip8Config",
    "MachineConfig",
    "Quirks",
    "get_config",
    "load_config",
]
