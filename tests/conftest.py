"""
Pytest configuration and shared fixtures for the chip8vm test suite.
"""

import random
import sys
import tempfile
from pathlib import Path

import pytest

# Ensure project root is on PYTHONPATH so 'chip8vm' can be imported
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from chip8vm.core.driver import TickDriver  # noqa: E402
from chip8vm.core.executor import Executor  # noqa: E402
from chip8vm.core.state import MachineState  # noqa: E402


def rom(*opcodes: int) -> bytes:
    """Assemble a ROM from 16-bit opcodes, big-endian."""
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


@pytest.fixture
def temp_yaml_file():
    """
    Fixture that provides a temporary YAML file.

    Yields:
        Path: Path to the temporary YAML file
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".yaml",
        delete=False,
    ) as f:
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


@pytest.fixture
def state():
    """A fresh machine state whose timers are only ticked by hand."""
    return MachineState()


@pytest.fixture
def executor():
    """Executor with default quirks and a seeded RNG."""
    return Executor(rng=random.Random(1234))


@pytest.fixture
def driver():
    """Tick driver with default config; background timers are never started."""
    return TickDriver(rng=random.Random(1234))


def pytest_configure(config):
    """
    Hook for initial pytest configuration.

    Used to add custom markers and configuration.
    """
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
