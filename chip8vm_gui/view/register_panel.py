"""Register view panel grouped into general, address and timer registers."""

from __future__ import annotations

from PySide6 import QtCore, QtWidgets

from chip8vm.interfaces.cpu import CpuSnapshot, RegisterValue

_GROUP_TITLES = {
    "core": "V0-VF",
    "address": "Address",
    "timer": "Timers",
}


def _format_value(reg: RegisterValue) -> str:
    digits = 4 if reg.width == 16 else 2
    return f"0x{reg.value:0{digits}X}"


class RegisterPanel(QtWidgets.QWidget):
    """Tree of register values under one collapsible node per group.

    Rows are created once per register name and then updated in place, so
    the expansion state survives the per-frame refresh.
    """

    def __init__(self, parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self._flags_label = QtWidgets.QLabel("")
        self._tree = QtWidgets.QTreeWidget(self)
        self._tree.setColumnCount(3)
        self._tree.setHeaderLabels(["Register", "Hex", "Dec"])
        self._tree.setRootIsDecorated(True)
        self._tree.setUniformRowHeights(True)
        self._tree.setSelectionMode(QtWidgets.QAbstractItemView.NoSelection)
        self._tree.setFocusPolicy(QtCore.Qt.NoFocus)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._tree, 1)
        layout.addWidget(self._flags_label)

        self._groups: dict[str, QtWidgets.QTreeWidgetItem] = {}
        self._rows: dict[str, QtWidgets.QTreeWidgetItem] = {}

    def _group_item(self, group: str) -> QtWidgets.QTreeWidgetItem:
        item = self._groups.get(group)
        if item is None:
            item = QtWidgets.QTreeWidgetItem([_GROUP_TITLES.get(group, group)])
            self._tree.addTopLevelItem(item)
            item.setExpanded(True)
            self._groups[group] = item
        return item

    def update_snapshot(self, snapshot: CpuSnapshot) -> None:
        for reg in snapshot.registers:
            row = self._rows.get(reg.name)
            if row is None:
                row = QtWidgets.QTreeWidgetItem([reg.name, "", ""])
                self._group_item(reg.group).addChild(row)
                self._rows[reg.name] = row
            row.setText(1, _format_value(reg))
            row.setText(2, str(reg.value))

        raised = [name for name, value in snapshot.flags.items() if value]
        self._flags_label.setText("Flags: " + (" ".join(raised) if raised else "none"))
