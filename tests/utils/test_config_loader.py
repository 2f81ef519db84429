import pytest
import yaml

from chip8vm.core.exceptions import ConfigurationError
from chip8vm.utils.config_loader import (
    DEFAULT_CONFIG_PATH,
    Chip8Config,
    MachineConfig,
    Quirks,
    _load_yaml_file,
    _parse_chip8_cfg_from_dict,
    clear_config_cache,
    get_config,
    load_config,
)


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_config_cache()
    yield
    clear_config_cache()


def _write(path, data):
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f)
    return path


class TestDataclasses:
    def test_quirk_defaults_match_cosmac_vip(self):
        quirks = Quirks()
        assert quirks.shift_uses_vx is False
        assert quirks.jump_uses_vx is False
        assert quirks.load_store_keeps_index is False
        assert quirks.sprite_wrap is False

    def test_machine_defaults(self):
        cfg = Chip8Config()
        assert cfg.machine == MachineConfig(cycles_per_frame=10, frame_rate=60, timer_frequency=60)

    def test_immutable(self):
        with pytest.raises(AttributeError):
            Quirks().sprite_wrap = True  # type: ignore[misc]


class TestLoadYamlFile:
    def test_empty_file_is_empty_mapping(self, temp_yaml_file):
        temp_yaml_file.write_text("", encoding="utf-8")
        assert _load_yaml_file(temp_yaml_file) == {}

    def test_non_mapping_root(self, temp_yaml_file):
        temp_yaml_file.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            _load_yaml_file(temp_yaml_file)

    def test_invalid_yaml(self, temp_yaml_file):
        temp_yaml_file.write_text("machine: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Failed to parse"):
            _load_yaml_file(temp_yaml_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            _load_yaml_file(tmp_path / "missing.yaml")


class TestParse:
    def test_empty_dict_gives_defaults(self):
        assert _parse_chip8_cfg_from_dict({}) == Chip8Config()

    def test_partial_sections(self):
        cfg = _parse_chip8_cfg_from_dict(
            {"machine": {"cycles_per_frame": 20}, "quirks": {"sprite_wrap": True}}
        )
        assert cfg.machine.cycles_per_frame == 20
        assert cfg.machine.frame_rate == 60
        assert cfg.quirks.sprite_wrap is True
        assert cfg.quirks.shift_uses_vx is False

    def test_unknown_machine_key(self):
        with pytest.raises(ConfigurationError, match="unknown keys"):
            _parse_chip8_cfg_from_dict({"machine": {"turbo": 1}})

    def test_unknown_quirk(self):
        with pytest.raises(ConfigurationError, match="unknown quirks"):
            _parse_chip8_cfg_from_dict({"quirks": {"vf_reset": True}})

    def test_quirk_must_be_bool(self):
        with pytest.raises(ConfigurationError, match="quirks.sprite_wrap"):
            _parse_chip8_cfg_from_dict({"quirks": {"sprite_wrap": "yes"}})

    def test_non_numeric_machine_value(self):
        with pytest.raises(ConfigurationError, match="Invalid config schema"):
            _parse_chip8_cfg_from_dict({"machine": {"frame_rate": "fast"}})

    @pytest.mark.parametrize("key", ["cycles_per_frame", "frame_rate", "timer_frequency"])
    def test_non_positive_values_rejected(self, key):
        with pytest.raises(ConfigurationError, match=key):
            _parse_chip8_cfg_from_dict({"machine": {key: 0}})

    def test_section_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            _parse_chip8_cfg_from_dict({"quirks": ["sprite_wrap"]})


class TestLoadConfig:
    def test_bundled_default(self):
        assert DEFAULT_CONFIG_PATH.exists()
        assert load_config() == Chip8Config()

    def test_custom_file(self, temp_yaml_file):
        _write(temp_yaml_file, {"machine": {"cycles_per_frame": 15}, "quirks": {"jump_uses_vx": True}})
        cfg = load_config(str(temp_yaml_file))
        assert cfg.machine.cycles_per_frame == 15
        assert cfg.quirks.jump_uses_vx is True

    def test_get_config_caches_by_path(self, temp_yaml_file):
        _write(temp_yaml_file, {"machine": {"cycles_per_frame": 15}})
        first = get_config(str(temp_yaml_file))
        _write(temp_yaml_file, {"machine": {"cycles_per_frame": 30}})
        assert get_config(str(temp_yaml_file)) is first

        clear_config_cache()
        assert get_config(str(temp_yaml_file)).machine.cycles_per_frame == 30
