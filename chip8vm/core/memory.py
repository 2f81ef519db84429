"""Flat 4 KiB memory model.

Memory is a single bytearray with explicit bounds checks. The font table is
installed at construction and on reset(); ordinary writes into it are
rejected so a runaway program cannot corrupt the glyphs.
"""

from __future__ import annotations

from dataclasses import dataclass

from chip8vm.core.exceptions import (
    AddressOverflowError,
    LoadTooLargeError,
    ProtectedMemoryError,
)
from chip8vm.utils.consts import FONT_END, FONTSET, ConstUtils


@dataclass(frozen=True)
class AddressRange:
    """An immutable address range."""
    base: int
    size: int

    def contains(self, address: int) -> bool:
        return self.base <= address < self.base + self.size

    def contains_range(self, address: int, size: int) -> bool:
        return self.contains(address) and address + size <= self.base + self.size

    def overlaps(self, address: int, size: int) -> bool:
        return address < self.base + self.size and self.base < address + size

    def __str__(self) -> str:
        return f"0x{self.base:03X}-0x{self.base + self.size:03X}"


FONT_RANGE = AddressRange(ConstUtils.FONT_BASE, FONT_END - ConstUtils.FONT_BASE)
PROGRAM_RANGE = AddressRange(ConstUtils.PROGRAM_START, ConstUtils.MAX_ROM_SIZE)


class Memory:
    """4096 bytes of byte-addressable RAM with a protected font table."""

    def __init__(self, size: int = ConstUtils.MEMORY_SIZE):
        self.range = AddressRange(0, size)
        self._data = bytearray(size)
        self._install_font()

    @property
    def size(self) -> int:
        return self.range.size

    def _install_font(self) -> None:
        self._data[FONT_RANGE.base:FONT_RANGE.base + FONT_RANGE.size] = FONTSET

    def _check(self, address: int, size: int) -> None:
        if address < 0 or not self.range.contains_range(address, size):
            raise AddressOverflowError(address, size)

    def _check_writable(self, address: int, size: int) -> None:
        self._check(address, size)
        if FONT_RANGE.overlaps(address, size):
            raise ProtectedMemoryError(max(address, FONT_RANGE.base))

    def read_byte(self, address: int) -> int:
        self._check(address, 1)
        return self._data[address]

    def write_byte(self, address: int, value: int) -> None:
        self._check_writable(address, 1)
        self._data[address] = value & ConstUtils.MASK_8_BITS

    def read_word(self, address: int) -> int:
        """Read a big-endian 16-bit word."""
        self._check(address, 2)
        return int.from_bytes(self._data[address:address + 2], "big")

    def read_block(self, address: int, size: int) -> bytes:
        self._check(address, size)
        return bytes(self._data[address:address + size])

    def write_block(self, address: int, data: bytes) -> None:
        """Write a contiguous block; nothing is written if any byte is out of range."""
        self._check_writable(address, len(data))
        self._data[address:address + len(data)] = data

    def load_image(self, data: bytes) -> None:
        """Copy a ROM image to the start of program memory.

        The rest of program memory is zeroed so no bytes of a previously
        loaded ROM survive.
        """
        if len(data) > PROGRAM_RANGE.size:
            raise LoadTooLargeError(len(data), PROGRAM_RANGE.size)
        padded = bytes(data) + bytes(PROGRAM_RANGE.size - len(data))
        self._data[PROGRAM_RANGE.base:PROGRAM_RANGE.base + PROGRAM_RANGE.size] = padded

    def reset(self) -> None:
        """Zero all memory and reinstall the font table."""
        self._data[:] = bytes(len(self._data))
        self._install_font()
