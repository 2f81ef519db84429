"""Sine tone output driven by the sound timer."""

from __future__ import annotations

import logging
import math
import struct

from PySide6 import QtCore, QtMultimedia

from chip8vm_gui.config import AudioConfig

logger = logging.getLogger(__name__)


class _SineSource(QtCore.QIODevice):
    """Endless 16-bit mono sine wave."""

    def __init__(self, frequency: float, volume: float, sample_rate: int, parent=None):
        super().__init__(parent)
        amplitude = int(volume * 32767)
        # One period is enough; readData() cycles through it.
        period = max(1, round(sample_rate / frequency))
        samples = (
            int(amplitude * math.sin(2 * math.pi * i / period)) for i in range(period)
        )
        self._wave = b"".join(struct.pack("<h", s) for s in samples)
        self._pos = 0

    def readData(self, maxlen: int) -> bytes:  # type: ignore[override]
        maxlen -= maxlen % 2
        out = bytearray()
        while len(out) < maxlen:
            chunk = self._wave[self._pos:self._pos + maxlen - len(out)]
            out += chunk
            self._pos = (self._pos + len(chunk)) % len(self._wave)
        return bytes(out)

    def writeData(self, _data: bytes) -> int:  # type: ignore[override]
        return -1

    def bytesAvailable(self) -> int:  # type: ignore[override]
        return len(self._wave) + super().bytesAvailable()

    def isSequential(self) -> bool:  # type: ignore[override]
        return True


class ToneGenerator(QtCore.QObject):
    """Plays a fixed-frequency tone while active.

    The sink is created paused; set_active() resumes or suspends it so the
    tone starts and stops without rebuilding the stream.
    """

    def __init__(self, config: AudioConfig, parent: QtCore.QObject | None = None):
        super().__init__(parent)
        self._active = False
        self._sink: QtMultimedia.QAudioSink | None = None
        if not config.enabled:
            return

        device = QtMultimedia.QMediaDevices.defaultAudioOutput()
        if device.isNull():
            logger.warning("No audio output device; sound disabled")
            return

        fmt = QtMultimedia.QAudioFormat()
        fmt.setSampleRate(config.sample_rate)
        fmt.setChannelCount(1)
        fmt.setSampleFormat(QtMultimedia.QAudioFormat.SampleFormat.Int16)

        self._source = _SineSource(config.frequency, config.volume, config.sample_rate, self)
        self._source.open(QtCore.QIODevice.OpenModeFlag.ReadOnly)
        self._sink = QtMultimedia.QAudioSink(device, fmt, self)
        self._sink.start(self._source)
        self._sink.suspend()

    @property
    def active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        if active == self._active:
            return
        self._active = active
        if self._sink is None:
            return
        if active:
            self._sink.resume()
        else:
            self._sink.suspend()

    def close(self) -> None:
        if self._sink is not None:
            self._sink.stop()
            self._sink = None
