"""GUI application entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PySide6 import QtWidgets

from chip8vm.core.driver import TickDriver
from chip8vm.utils.config_loader import load_config
from chip8vm.utils.consts import ConstUtils
from chip8vm_gui.audio import ToneGenerator
from chip8vm_gui.backend import DriverBackend
from chip8vm_gui.config import load_gui_config
from chip8vm_gui.controller import SimulationController
from chip8vm_gui.view.main_window import MainWindow


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="CHIP-8 emulator")
    parser.add_argument("rom", nargs="?", default=None, help="Path to a CHIP-8 ROM")
    parser.add_argument("--config", default=None, help="Path to machine config YAML")
    parser.add_argument("--gui-config", default=None, help="Path to GUI config YAML")
    return parser.parse_args(argv)


def run_gui(
    argv: list[str] | None = None,
    *,
    driver: TickDriver | None = None,
    lock=None,
    external_clock: bool = False,
) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    gui_config = load_gui_config(args.gui_config)

    title = "(external)" if external_clock else "(no ROM)"
    owns_timers = driver is None
    if driver is None:
        driver = TickDriver(config=load_config(args.config))
        if args.rom:
            driver.load_file(args.rom)
            title = Path(args.rom).name

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    tone = ToneGenerator(gui_config.audio)
    backend = DriverBackend(driver, lock=lock)
    controller = SimulationController(backend, gui_config.keymap, tone=tone)

    frame_ms = max(1, round(1000 / driver.config.machine.frame_rate))
    window = MainWindow(
        controller,
        gui_config,
        title,
        frame_ms=frame_ms,
        external_clock=external_clock,
    )
    scale = gui_config.window.scale
    window.resize(ConstUtils.DISPLAY_WIDTH * scale + 260, ConstUtils.DISPLAY_HEIGHT * scale + 100)
    window.show()

    if owns_timers:
        driver.start_timers()
    try:
        return app.exec()
    finally:
        tone.close()
        if owns_timers:
            driver.stop_timers()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    raise SystemExit(run_gui())


if __name__ == "__main__":
    main()
