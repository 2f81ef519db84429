"""GUI configuration loader and data models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from chip8vm.core.exceptions import ConfigurationError
from chip8vm_gui.keymap import KeyMap

DEFAULT_GUI_CONFIG = Path(__file__).parent / "default.yaml"


@dataclass(frozen=True)
class WindowConfig:
    title: str = "CHIP-8"
    scale: int = 10


@dataclass(frozen=True)
class ColorConfig:
    foreground: str = "#00FF00"
    background: str = "#000000"


@dataclass(frozen=True)
class AudioConfig:
    enabled: bool = True
    frequency: float = 440.0
    volume: float = 0.25
    sample_rate: int = 44100


@dataclass(frozen=True)
class GuiConfig:
    window: WindowConfig
    colors: ColorConfig
    audio: AudioConfig
    keymap: KeyMap


def _parse_window(value: dict[str, Any]) -> WindowConfig:
    scale = int(value.get("scale", 10))
    if scale <= 0:
        raise ConfigurationError("window.scale", "must be positive")
    return WindowConfig(title=str(value.get("title", "CHIP-8")), scale=scale)


def _parse_colors(value: dict[str, Any]) -> ColorConfig:
    return ColorConfig(
        foreground=str(value.get("foreground", "#00FF00")),
        background=str(value.get("background", "#000000")),
    )


def _parse_audio(value: dict[str, Any]) -> AudioConfig:
    audio = AudioConfig(
        enabled=bool(value.get("enabled", True)),
        frequency=float(value.get("frequency", 440.0)),
        volume=float(value.get("volume", 0.25)),
        sample_rate=int(value.get("sample_rate", 44100)),
    )
    if audio.frequency <= 0 or audio.sample_rate <= 0:
        raise ConfigurationError("audio", "frequency and sample_rate must be positive")
    if not 0.0 <= audio.volume <= 1.0:
        raise ConfigurationError("audio.volume", "must be between 0 and 1")
    return audio


def parse_gui_config(raw: dict[str, Any]) -> GuiConfig:
    try:
        return GuiConfig(
            window=_parse_window(raw.get("window") or {}),
            colors=_parse_colors(raw.get("colors") or {}),
            audio=_parse_audio(raw.get("audio") or {}),
            keymap=KeyMap(raw.get("keymap") or {}),
        )
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigurationError(f"Invalid GUI config: {exc}") from exc


def load_gui_config(path: str | Path | None = None) -> GuiConfig:
    config_path = Path(path) if path is not None else DEFAULT_GUI_CONFIG
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except Exception as exc:
        raise ConfigurationError(f"Failed to parse GUI config: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError("GUI config root must be a mapping")
    return parse_gui_config(raw)
