"""Monochrome framebuffer with XOR sprite drawing."""

from __future__ import annotations

from chip8vm.utils.consts import ConstUtils


class Framebuffer:
    """64x32 grid of on/off pixels stored row-major.

    ``dirty`` is the level-triggered redraw signal: every clear or draw
    raises it, and a renderer lowers it with consume_redraw(). Repeated
    raises before consumption coalesce into one redraw.
    """

    def __init__(
        self,
        width: int = ConstUtils.DISPLAY_WIDTH,
        height: int = ConstUtils.DISPLAY_HEIGHT,
    ):
        self.width = width
        self.height = height
        self._pixels = [False] * (width * height)
        self.dirty = False

    def clear(self) -> None:
        self._pixels = [False] * (self.width * self.height)
        self.dirty = True

    def get(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} display")
        return self._pixels[y * self.width + x]

    def draw_sprite(self, x: int, y: int, rows: bytes, wrap: bool = False) -> bool:
        """XOR a sprite onto the display.

        Args:
            x: Left column; reduced modulo the display width
            y: Top row; reduced modulo the display height
            rows: One byte per sprite row, most significant bit leftmost
            wrap: Wrap pixels past the edge around to the other side
                instead of clipping them

        Returns:
            True if any lit pixel was turned off (collision).
        """
        x %= self.width
        y %= self.height
        collision = False

        for row_index, row in enumerate(rows):
            py = y + row_index
            if py >= self.height:
                if not wrap:
                    break
                py %= self.height

            for bit in range(ConstUtils.SPRITE_WIDTH):
                if not row & (0x80 >> bit):
                    continue
                px = x + bit
                if px >= self.width:
                    if not wrap:
                        break
                    px %= self.width

                index = py * self.width + px
                if self._pixels[index]:
                    collision = True
                self._pixels[index] = not self._pixels[index]

        self.dirty = True
        return collision

    def pixels(self) -> tuple[bool, ...]:
        """Row-major snapshot of all pixels."""
        return tuple(self._pixels)

    def rows(self) -> list[tuple[bool, ...]]:
        w = self.width
        return [tuple(self._pixels[r * w:(r + 1) * w]) for r in range(self.height)]

    def consume_redraw(self) -> bool:
        """Return the redraw signal and lower it."""
        dirty = self.dirty
        self.dirty = False
        return dirty

    def reset(self) -> None:
        self._pixels = [False] * (self.width * self.height)
        self.dirty = False

    def render_text(self, on: str = "#", off: str = ".") -> str:
        return "\n".join("".join(on if p else off for p in row) for row in self.rows())
