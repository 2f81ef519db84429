from chip8vm_gui.view.main_window import MainWindow
from chip8vm_gui.view.register_panel import RegisterPanel
from chip8vm_gui.view.screen import ScreenView
from chip8vm_gui.view.status_bar import StatusBar
from chip8vm_gui.view.top_bar import TopBar

__all__ = [
    "MainWindow",
    "RegisterPanel",
    "ScreenView",
    "StatusBar",
    "TopBar",
]
