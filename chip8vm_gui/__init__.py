"""PySide6 front end for the CHIP-8 virtual machine."""
