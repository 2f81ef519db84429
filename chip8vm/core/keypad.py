"""16-key hexadecimal keypad state."""

from __future__ import annotations

from typing import Optional

from chip8vm.utils.consts import ConstUtils


class Keypad:
    """Snapshot of which keypad keys (0x0-0xF) are held down.

    Input collaborators call press()/release(); the executor only reads.
    """

    def __init__(self):
        self._keys = [False] * ConstUtils.NUM_KEYS

    @staticmethod
    def _validate(key: int) -> None:
        if not 0 <= key < ConstUtils.NUM_KEYS:
            raise ValueError(f"Invalid key {key}; must be 0x0-0xF")

    def set(self, key: int, pressed: bool) -> None:
        self._validate(key)
        self._keys[key] = bool(pressed)

    def press(self, key: int) -> None:
        self.set(key, True)

    def release(self, key: int) -> None:
        self.set(key, False)

    def is_pressed(self, key: int) -> bool:
        self._validate(key)
        return self._keys[key]

    def any_pressed(self) -> bool:
        return any(self._keys)

    def first_pressed(self) -> Optional[int]:
        """Lowest-numbered held key, or None if no key is down."""
        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def reset(self) -> None:
        self._keys = [False] * ConstUtils.NUM_KEYS
