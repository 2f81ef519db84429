"""Constants and utility values for the virtual machine."""


class ConstUtils:
    """Bitwise masks and machine layout constants."""

    # Bitwise masks for different data widths
    MASK_4_BITS = 0xF
    """4-bit mask: 0xF (one nibble)"""

    MASK_8_BITS = 0xFF
    """8-bit mask: 0xFF"""

    MASK_12_BITS = 0xFFF
    """12-bit mask: 0xFFF (address operand NNN)"""

    MASK_16_BITS = 0xFFFF
    """16-bit mask: 0xFFFF"""

    # Memory layout
    MEMORY_SIZE = 4096
    """Total addressable bytes."""

    FONT_BASE = 0x050
    """First byte of the built-in hex font."""

    GLYPH_SIZE = 5
    """Bytes per font glyph (one byte per row)."""

    PROGRAM_START = 0x200
    """Load address of every ROM and initial program counter."""

    PROGRAM_END = 0xFFE
    """Highest address an instruction may start at."""

    MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START
    """3584 bytes of program memory."""

    # Register file
    NUM_REGISTERS = 16
    FLAG_REGISTER = 0xF
    """VF holds carry, borrow and collision flags."""

    STACK_DEPTH = 16
    NUM_KEYS = 16

    # Display
    DISPLAY_WIDTH = 64
    DISPLAY_HEIGHT = 32
    SPRITE_WIDTH = 8

    TIMER_FREQUENCY = 60
    """Delay and sound timers decrement at 60 Hz."""


# 16 glyphs (0-F), 4 pixels wide and 5 rows tall, stored at FONT_BASE.
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

FONT_END = ConstUtils.FONT_BASE + len(FONTSET)


def glyph_address(digit: int) -> int:
    """Return the address of the font glyph for a hex digit (low nibble used)."""
    return ConstUtils.FONT_BASE + (digit & ConstUtils.MASK_4_BITS) * ConstUtils.GLYPH_SIZE
