"""Host keyboard to keypad translation."""

from __future__ import annotations

from typing import Mapping, Optional

from chip8vm.utils.consts import ConstUtils


class KeyMap:
    """Maps single host key characters (case-insensitive) to keypad keys."""

    def __init__(self, bindings: Mapping[str, int]):
        self._bindings: dict[str, int] = {}
        for name, key in bindings.items():
            name = str(name).lower()
            if len(name) != 1:
                raise ValueError(f"Key binding '{name}' must be a single character")
            if not 0 <= int(key) < ConstUtils.NUM_KEYS:
                raise ValueError(f"Keypad key {key} for '{name}' must be 0x0-0xF")
            self._bindings[name] = int(key)

    def lookup(self, char: str) -> Optional[int]:
        if not char:
            return None
        return self._bindings.get(char.lower())

    def lookup_code(self, code: int) -> Optional[int]:
        """Translate a Qt key code; letters and digits share their ASCII codes."""
        if 0x20 <= code < 0x7F:
            return self.lookup(chr(code))
        return None

    def bindings(self) -> dict[str, int]:
        return dict(self._bindings)
