import pytest

from chip8vm_gui.keymap import KeyMap


def test_lookup_is_case_insensitive():
    keymap = KeyMap({"Q": 0x4})
    assert keymap.lookup("q") == 0x4
    assert keymap.lookup("Q") == 0x4


def test_lookup_unbound_and_empty():
    keymap = KeyMap({"x": 0})
    assert keymap.lookup("p") is None
    assert keymap.lookup("") is None


def test_lookup_code_uses_ascii():
    keymap = KeyMap({"x": 0x0, "1": 0x1})
    assert keymap.lookup_code(ord("X")) == 0x0
    assert keymap.lookup_code(ord("1")) == 0x1
    assert keymap.lookup_code(0x01000000) is None


@pytest.mark.parametrize("bindings", [{"ab": 1}, {"": 1}, {"a": 16}, {"a": -1}])
def test_invalid_bindings(bindings):
    with pytest.raises(ValueError):
        KeyMap(bindings)


def test_bindings_returns_copy():
    keymap = KeyMap({"a": 7})
    copy = keymap.bindings()
    copy["b"] = 1
    assert keymap.bindings() == {"a": 7}
