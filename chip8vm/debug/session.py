"""Debug session for external debugger integration."""

from __future__ import annotations

import binascii
import threading
from dataclasses import asdict
from typing import Any, Callable

from chip8vm.core.decoder import disassemble
from chip8vm.core.driver import TickDriver
from chip8vm.interfaces.cpu import StepResult


def _bytes_to_hex(data: bytes) -> str:
    return binascii.hexlify(data).decode("ascii")


def _hex_to_bytes(data_hex: str) -> bytes:
    return binascii.unhexlify(data_hex.encode("ascii"))


# Register names accepted by read_reg/write_reg besides the indices 0-15.
_SPECIAL_REGISTERS = ("I", "PC", "DT", "ST")


class DebugSession:
    """Synchronous debug session bound to a single tick driver."""

    def __init__(self, driver: TickDriver, lock: threading.RLock | None = None):
        self.driver = driver
        self._halt_requested = False
        self._breakpoints: set[int] = set()
        self._lock = lock or threading.RLock()

    @property
    def state(self):
        return self.driver.state

    @property
    def breakpoints(self) -> frozenset[int]:
        return frozenset(self._breakpoints)

    def request_halt(self) -> None:
        self._halt_requested = True

    def clear_halt(self) -> None:
        self._halt_requested = False

    def reset(self) -> None:
        with self._lock:
            self.driver.reset()

    def load(self, rom: bytes) -> None:
        with self._lock:
            self.driver.reload(rom)

    def read_memory(self, address: int, size: int) -> bytes:
        with self._lock:
            return self.state.memory.read_block(address, size)

    def write_memory(self, address: int, data: bytes) -> None:
        with self._lock:
            self.state.memory.write_block(address, data)

    def read_register(self, name: int | str) -> int:
        with self._lock:
            if isinstance(name, int):
                return self.state.get_register(name)
            if name == "I":
                return self.state.index_register
            if name == "PC":
                return self.state.program_counter
            if name == "DT":
                return self.state.timers.get_delay()
            if name == "ST":
                return self.state.timers.get_sound()
            raise ValueError(f"Unknown register '{name}'")

    def write_register(self, name: int | str, value: int) -> None:
        with self._lock:
            if isinstance(name, int):
                self.state.set_register(name, value)
            elif name == "I":
                self.state.index_register = value
            elif name == "PC":
                self.state.program_counter = value
            elif name == "DT":
                self.state.timers.set_delay(value)
            elif name == "ST":
                self.state.timers.set_sound(value)
            else:
                raise ValueError(f"Unknown register '{name}'")

    def set_breakpoint(self, address: int) -> None:
        with self._lock:
            self._breakpoints.add(address)

    def clear_breakpoint(self, address: int) -> None:
        with self._lock:
            self._breakpoints.discard(address)

    def step(self) -> StepResult:
        self.clear_halt()
        with self._lock:
            result = self.driver.step()
            if result.ok and result.address in self._breakpoints:
                return StepResult(reason="breakpoint", address=result.address, opcode=result.opcode)
            return result

    def run(self, max_steps: int | None = None) -> StepResult:
        """Run until a breakpoint, fault, halt request or step limit."""
        self.clear_halt()
        steps = 0

        while True:
            if self._halt_requested:
                with self._lock:
                    pc = self.state.program_counter
                return StepResult(reason="halt", address=pc)

            with self._lock:
                result = self.driver.step()
                if not result.ok:
                    return result
                if result.address in self._breakpoints:
                    return StepResult(reason="breakpoint", address=result.address)

                steps += 1
                if max_steps is not None and steps >= max_steps:
                    return StepResult(reason="limit", address=result.address)

    def handle_request(self, request: dict[str, Any]) -> dict[str, Any]:
        req_id = request.get("id")
        cmd = request.get("cmd")
        if not isinstance(cmd, str):
            return {"id": req_id, "ok": False, "error": "Command must be a string"}

        handlers: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
            "hello": self._cmd_hello,
            "reset": self._cmd_reset,
            "load": self._cmd_load,
            "read_mem": self._cmd_read_mem,
            "write_mem": self._cmd_write_mem,
            "read_reg": self._cmd_read_reg,
            "write_reg": self._cmd_write_reg,
            "run": self._cmd_run,
            "step": self._cmd_step,
            "halt": self._cmd_halt,
            "set_bp": self._cmd_set_bp,
            "clear_bp": self._cmd_clear_bp,
            "key": self._cmd_key,
            "screen": self._cmd_screen,
            "disasm": self._cmd_disasm,
        }

        try:
            handler = handlers.get(cmd)
            if handler is None:
                raise ValueError(f"Unknown command '{cmd}'")
            result = handler(request)
            return {"id": req_id, "ok": True, "result": result}
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return {"id": req_id, "ok": False, "error": str(exc)}

    @staticmethod
    def _register_name(raw: Any) -> int | str:
        if isinstance(raw, str) and raw.upper() in _SPECIAL_REGISTERS:
            return raw.upper()
        return int(raw)

    def _cmd_hello(self, _request: dict[str, Any]) -> dict[str, Any]:
        return {
            "version": 1,
            "machine": "CHIP-8",
            "memory_size": self.state.memory.size,
        }

    def _cmd_reset(self, _request: dict[str, Any]) -> dict[str, Any]:
        self.reset()
        return {"status": "ok"}

    def _cmd_load(self, request: dict[str, Any]) -> dict[str, Any]:
        rom = _hex_to_bytes(request["data"])
        self.load(rom)
        return {"size": len(rom)}

    def _cmd_read_mem(self, request: dict[str, Any]) -> dict[str, Any]:
        address = int(request["address"])
        size = int(request["size"])
        data = self.read_memory(address, size)
        return {"data": _bytes_to_hex(data)}

    def _cmd_write_mem(self, request: dict[str, Any]) -> dict[str, Any]:
        address = int(request["address"])
        data = _hex_to_bytes(request["data"])
        self.write_memory(address, data)
        return {"status": "ok"}

    def _cmd_read_reg(self, request: dict[str, Any]) -> dict[str, Any]:
        name = self._register_name(request["index"])
        return {"value": self.read_register(name)}

    def _cmd_write_reg(self, request: dict[str, Any]) -> dict[str, Any]:
        name = self._register_name(request["index"])
        value = int(request["value"])
        self.write_register(name, value)
        return {"status": "ok"}

    def _cmd_run(self, request: dict[str, Any]) -> dict[str, Any]:
        max_steps = request.get("max_steps")
        stop = self.run(max_steps=max_steps if max_steps is None else int(max_steps))
        return asdict(stop)

    def _cmd_step(self, _request: dict[str, Any]) -> dict[str, Any]:
        return asdict(self.step())

    def _cmd_halt(self, _request: dict[str, Any]) -> dict[str, Any]:
        self.request_halt()
        return {"status": "ok"}

    def _cmd_set_bp(self, request: dict[str, Any]) -> dict[str, Any]:
        self.set_breakpoint(int(request["address"]))
        return {"status": "ok"}

    def _cmd_clear_bp(self, request: dict[str, Any]) -> dict[str, Any]:
        self.clear_breakpoint(int(request["address"]))
        return {"status": "ok"}

    def _cmd_key(self, request: dict[str, Any]) -> dict[str, Any]:
        key = int(request["key"])
        pressed = bool(request.get("pressed", True))
        with self._lock:
            self.driver.set_key(key, pressed)
        return {"status": "ok"}

    def _cmd_screen(self, _request: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            fb = self.state.framebuffer
            rows = ["".join("1" if p else "0" for p in row) for row in fb.rows()]
        return {"width": fb.width, "height": fb.height, "rows": rows}

    def _cmd_disasm(self, request: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            start = int(request.get("address", self.state.program_counter))
            count = int(request.get("count", 8))
            listing = disassemble(self.state.memory, start, count)
        return {
            "listing": [
                {"address": address, "opcode": f"{opcode:04X}", "text": str(ins)}
                for address, opcode, ins in listing
            ]
        }
