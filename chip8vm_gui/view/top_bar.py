"""Top bar with ROM name, run state and controls."""

from __future__ import annotations

from PySide6 import QtCore, QtWidgets

from chip8vm_gui.controller import SimulationState


class TopBar(QtWidgets.QFrame):
    pause_clicked = QtCore.Signal()
    reset_clicked = QtCore.Signal()

    def __init__(self, title: str, parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.setFrameShape(QtWidgets.QFrame.NoFrame)

        self._name_label = QtWidgets.QLabel(title)
        self._state_label = QtWidgets.QLabel("Paused")
        self._pause_button = QtWidgets.QPushButton("Pause")
        self._reset_button = QtWidgets.QPushButton("Reset")
        for button in (self._pause_button, self._reset_button):
            button.setFocusPolicy(QtCore.Qt.NoFocus)
        self._pause_button.clicked.connect(self.pause_clicked)
        self._reset_button.clicked.connect(self.reset_clicked)

        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(12, 6, 12, 6)
        layout.addWidget(self._name_label)
        layout.addStretch(1)
        layout.addWidget(self._state_label)
        layout.addWidget(self._pause_button)
        layout.addWidget(self._reset_button)

    def set_state(self, state: SimulationState) -> None:
        if state == SimulationState.RUNNING:
            label = "Running"
        elif state == SimulationState.EXTERNAL:
            label = "External"
        elif state == SimulationState.FAULTED:
            label = "Faulted"
        else:
            label = "Paused"
        self._state_label.setText(label)
        self._pause_button.setText("Pause" if state == SimulationState.RUNNING else "Run")
        self._pause_button.setEnabled(state in (SimulationState.RUNNING, SimulationState.PAUSED))
