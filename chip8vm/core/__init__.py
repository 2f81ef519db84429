"""Core modules for the virtual machine.

Core infrastructure, leaf-first:
- memory: 4 KiB address space with the protected font table
- display / keypad: framebuffer and 16-key input snapshot
- timer: 60 Hz delay/sound clock on its own thread
- state: register file, stack and the components above
- decoder: fetch and decode into tagged instruction variants
- executor: per-instruction semantics
- driver: fetch-decode-execute orchestration and fault reporting
"""

from chip8vm.core.decoder import Instruction, decode, disassemble, fetch, split_nibbles
from chip8vm.core.display import Framebuffer
from chip8vm.core.driver import TickDriver
from chip8vm.core.exceptions import (
    AddressOverflowError,
    Chip8Error,
    ConfigurationError,
    InvalidProgramCounterError,
    LoadTooLargeError,
    MachineFault,
    ProtectedMemoryError,
    StackOverflowError,
    StackUnderflowError,
)
from chip8vm.core.executor import Executor
from chip8vm.core.keypad import Keypad
from chip8vm.core.memory import AddressRange, Memory
from chip8vm.core.state import MachineState
from chip8vm.core.timer import TimerClock

__all__ = [
    # State
    "AddressRange",
    "Memory",
    "Framebuffer",
    "Keypad",
    "MachineState",
    # Timing
    "TimerClock",
    # Decode / execute
    "Instruction",
    "decode",
    "disassemble",
    "fetch",
    "split_nibbles",
    "Executor",
    "TickDriver",
    # Errors
    "Chip8Error",
    "ConfigurationError",
    "LoadTooLargeError",
    "MachineFault",
    "StackOverflowError",
    "StackUnderflowError",
    "AddressOverflowError",
    "InvalidProgramCounterError",
    "ProtectedMemoryError",
]
