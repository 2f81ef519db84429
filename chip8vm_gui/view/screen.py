"""Framebuffer display widget."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from chip8vm.utils.consts import ConstUtils
from chip8vm_gui.config import ColorConfig


class ScreenView(QtWidgets.QWidget):
    """Paints the 64x32 framebuffer scaled to the widget, keeping aspect ratio."""

    def __init__(
        self,
        colors: ColorConfig,
        scale: int = 10,
        parent: QtWidgets.QWidget | None = None,
    ):
        super().__init__(parent)
        self._width = ConstUtils.DISPLAY_WIDTH
        self._height = ConstUtils.DISPLAY_HEIGHT
        self._on = QtGui.QColor(colors.foreground).rgb()
        self._off = QtGui.QColor(colors.background).rgb()
        self._image = QtGui.QImage(self._width, self._height, QtGui.QImage.Format_RGB32)
        self._image.fill(self._off)
        self.setMinimumSize(self._width * scale, self._height * scale)
        self.setFocusPolicy(QtCore.Qt.StrongFocus)

    def set_pixels(self, pixels: tuple[bool, ...]) -> None:
        for index, lit in enumerate(pixels):
            y, x = divmod(index, self._width)
            self._image.setPixel(x, y, self._on if lit else self._off)
        self.update()

    def paintEvent(self, _event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        painter = QtGui.QPainter(self)
        painter.fillRect(self.rect(), QtGui.QColor(self._off))
        scale = max(1, min(self.width() // self._width, self.height() // self._height))
        w, h = self._width * scale, self._height * scale
        target = QtCore.QRect((self.width() - w) // 2, (self.height() - h) // 2, w, h)
        painter.drawImage(target, self._image)
        painter.end()
