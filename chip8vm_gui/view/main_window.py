"""Main GUI window."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from chip8vm_gui.config import GuiConfig
from chip8vm_gui.controller import SimulationController, SimulationState
from chip8vm_gui.view.register_panel import RegisterPanel
from chip8vm_gui.view.screen import ScreenView
from chip8vm_gui.view.status_bar import StatusBar
from chip8vm_gui.view.top_bar import TopBar


class MainWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        controller: SimulationController,
        config: GuiConfig,
        title: str,
        frame_ms: int = 16,
        external_clock: bool = False,
    ):
        super().__init__()
        self._controller = controller
        self._config = config

        self.setWindowTitle(f"{config.window.title} - {title}")

        central = QtWidgets.QWidget()
        self.setCentralWidget(central)

        self._top_bar = TopBar(title)
        self._screen = ScreenView(config.colors, scale=config.window.scale)
        self._register_panel = RegisterPanel()
        self._status_bar = StatusBar()

        splitter = QtWidgets.QSplitter()
        splitter.addWidget(self._screen)
        splitter.addWidget(self._register_panel)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)

        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._top_bar)
        layout.addWidget(splitter, 1)
        layout.addWidget(self._status_bar)

        self._top_bar.pause_clicked.connect(self._toggle_running)
        self._top_bar.reset_clicked.connect(self._reset)

        self._timer = QtCore.QTimer(self)
        self._timer.setTimerType(QtCore.Qt.PreciseTimer)
        self._timer.timeout.connect(self._tick)
        self._timer.start(frame_ms)

        self._status_timer = QtCore.QTimer(self)
        self._status_timer.timeout.connect(self._refresh_status)
        self._status_timer.start(500)

        if external_clock:
            self._controller.set_external(True)
        else:
            self._controller.set_running(True)
        self._top_bar.set_state(self._controller.state)
        self._screen.setFocus()

    def _tick(self) -> None:
        previous = self._controller.state
        pixels = self._controller.frame()
        if pixels is not None:
            self._screen.set_pixels(pixels)

        self._register_panel.update_snapshot(self._controller.snapshot())
        state = self._controller.state
        if state != previous and state == SimulationState.FAULTED:
            fault = self._controller.last_fault
            self._status_bar.show_message(f"Fault: {fault.detail}" if fault else "Fault")
        self._top_bar.set_state(state)

    def _refresh_status(self) -> None:
        self._status_bar.update_status(self._controller.status())

    def _toggle_running(self) -> None:
        self._controller.toggle_running()
        self._top_bar.set_state(self._controller.state)

    def _reset(self) -> None:
        self._controller.reset()
        self._status_bar.show_message("")
        self._top_bar.set_state(self._controller.state)

    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:  # type: ignore[override]
        if event.isAutoRepeat() or not self._controller.key_code_event(event.key(), True):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QtGui.QKeyEvent) -> None:  # type: ignore[override]
        if event.isAutoRepeat() or not self._controller.key_code_event(event.key(), False):
            super().keyReleaseEvent(event)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self._timer.stop()
        self._status_timer.stop()
        self._controller.set_running(False)
        self._controller.update_audio()
        super().closeEvent(event)
