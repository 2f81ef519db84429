"""Helpers for loading and validating virtual machine configuration."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional
import threading

import yaml  # type: ignore[import-untyped]

from chip8vm.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class Quirks:
    """Named choices for opcodes whose behaviour differs between interpreters.

    Every default reproduces the original COSMAC VIP interpreter.
    """

    shift_uses_vx: bool = False
    """8XY6/8XYE shift VX in place instead of shifting VY into VX."""

    jump_uses_vx: bool = False
    """BNNN adds VX (X = high nibble of NNN) instead of V0."""

    load_store_keeps_index: bool = False
    """FX55/FX65 leave I unchanged instead of advancing it by X + 1."""

    sprite_wrap: bool = False
    """DXYN wraps pixels past the screen edge instead of clipping them."""


@dataclass(frozen=True)
class MachineConfig:
    cycles_per_frame: int = 10
    frame_rate: int = 60
    timer_frequency: int = 60


@dataclass(frozen=True)
class Chip8Config:
    machine: MachineConfig = field(default_factory=MachineConfig)
    quirks: Quirks = field(default_factory=Quirks)


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"

# Configuration cache with thread safety
_LOADER_CACHE: dict[str, Chip8Config] = {}
_CACHE_LOCK = threading.RLock()


def _load_yaml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except Exception as exc:
        raise ConfigurationError(f"Failed to parse config: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError("Config root must be a mapping")
    return raw


def _build_machine_cfg(machine_raw: dict[str, Any]) -> MachineConfig:
    known = {f.name for f in fields(MachineConfig)}
    unknown = set(machine_raw) - known
    if unknown:
        raise ConfigurationError("machine", f"unknown keys {sorted(unknown)}")
    return MachineConfig(**{k: int(v) for k, v in machine_raw.items()})


def _build_quirks(quirks_raw: dict[str, Any]) -> Quirks:
    known = {f.name for f in fields(Quirks)}
    unknown = set(quirks_raw) - known
    if unknown:
        raise ConfigurationError("quirks", f"unknown quirks {sorted(unknown)}")
    for name, value in quirks_raw.items():
        if not isinstance(value, bool):
            raise ConfigurationError(f"quirks.{name}", "must be true or false")
    return Quirks(**quirks_raw)


def _parse_chip8_cfg_from_dict(raw: dict[str, Any]) -> Chip8Config:
    try:
        machine_raw = raw.get("machine") or {}
        quirks_raw = raw.get("quirks") or {}
        cfg = Chip8Config(
            machine=_build_machine_cfg(machine_raw),
            quirks=_build_quirks(quirks_raw),
        )
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigurationError(f"Invalid config schema: {exc}") from exc

    _validate_machine_config(cfg.machine)
    return cfg


def _validate_machine_config(machine: MachineConfig) -> None:
    """Basic sanity checks to fail fast on bad configs."""
    if machine.cycles_per_frame <= 0:
        raise ConfigurationError("machine.cycles_per_frame", "must be positive")
    if machine.frame_rate <= 0:
        raise ConfigurationError("machine.frame_rate", "must be positive")
    if machine.timer_frequency <= 0:
        raise ConfigurationError("machine.timer_frequency", "must be positive")


def load_config(path: Optional[str] = None) -> Chip8Config:
    """Load and validate configuration from a YAML file.

    Args:
        path: Optional path to YAML config. If None, load the bundled chip8vm/config.yaml.

    Returns:
        Chip8Config instance

    Raises:
        ConfigurationError: on parse or validation errors
    """

    p = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    raw = _load_yaml_file(p)

    return _parse_chip8_cfg_from_dict(raw=raw)


def get_config(path: Optional[str] = None) -> Chip8Config:
    """Return the loaded config for path, loading and caching if necessary.

    THREAD SAFETY: This function is thread-safe. Multiple threads can
    safely call this concurrently.
    """
    key = str(path) if path is not None else str(DEFAULT_CONFIG_PATH)
    with _CACHE_LOCK:
        if key not in _LOADER_CACHE:
            _LOADER_CACHE[key] = load_config(path=path)
        return _LOADER_CACHE[key]


def clear_config_cache() -> None:
    """Clear all cached configurations.

    All subsequent calls to get_config() will reload from disk.
    """
    with _CACHE_LOCK:
        _LOADER_CACHE.clear()
