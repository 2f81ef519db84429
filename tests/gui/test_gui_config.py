import pytest
import yaml

from chip8vm.core.exceptions import ConfigurationError
from chip8vm_gui.config import DEFAULT_GUI_CONFIG, load_gui_config, parse_gui_config


def test_bundled_default_uses_canonical_layout():
    assert DEFAULT_GUI_CONFIG.exists()
    cfg = load_gui_config()
    assert cfg.window.scale == 10
    assert cfg.colors.foreground == "#00FF00"
    assert cfg.audio.frequency == 440.0
    rows = ["1234", "qwer", "asdf", "zxcv"]
    expected = [[0x1, 0x2, 0x3, 0xC], [0x4, 0x5, 0x6, 0xD], [0x7, 0x8, 0x9, 0xE], [0xA, 0x0, 0xB, 0xF]]
    for chars, keys in zip(rows, expected):
        assert [cfg.keymap.lookup(c) for c in chars] == keys


def test_defaults_for_missing_sections():
    cfg = parse_gui_config({})
    assert cfg.window.title == "CHIP-8"
    assert cfg.audio.enabled is True
    assert cfg.keymap.bindings() == {}


@pytest.mark.parametrize(
    "raw",
    [
        {"window": {"scale": 0}},
        {"audio": {"volume": 1.5}},
        {"audio": {"frequency": 0}},
        {"audio": {"sample_rate": "lots"}},
        {"keymap": {"a": 99}},
    ],
)
def test_invalid_values(raw):
    with pytest.raises(ConfigurationError):
        parse_gui_config(raw)


def test_load_custom_file(temp_yaml_file):
    with open(temp_yaml_file, "w", encoding="utf-8") as f:
        yaml.dump({"window": {"scale": 4}, "audio": {"enabled": False}}, f)
    cfg = load_gui_config(temp_yaml_file)
    assert cfg.window.scale == 4
    assert cfg.audio.enabled is False


def test_non_mapping_root(temp_yaml_file):
    temp_yaml_file.write_text("just text\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_gui_config(temp_yaml_file)
