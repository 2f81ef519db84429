import pytest

from chip8vm.core.exceptions import LoadTooLargeError, StackOverflowError, StackUnderflowError
from chip8vm.core.state import MachineState
from chip8vm.core.timer import TimerClock
from chip8vm.utils.consts import FONTSET


class TestRegisters:
    def test_initial_values(self, state):
        assert list(state.registers) == [0] * 16
        assert state.index_register == 0
        assert state.program_counter == 0x200
        assert state.stack_pointer == 0

    def test_register_write_masks_to_byte(self, state):
        state.set_register(3, 0x1FF)
        assert state.get_register(3) == 0xFF

    @pytest.mark.parametrize("index", [-1, 16])
    def test_invalid_register_index(self, state, index):
        with pytest.raises(ValueError):
            state.get_register(index)
        with pytest.raises(ValueError):
            state.set_register(index, 0)

    def test_index_register_wraps_at_16_bits(self, state):
        state.index_register = 0x10005
        assert state.index_register == 0x0005

    def test_program_counter_masked(self, state):
        state.program_counter = 0x1_0202
        assert state.program_counter == 0x0202


class TestStack:
    def test_push_pop_lifo(self, state):
        state.push(0x202)
        state.push(0x304)
        assert state.stack == (0x202, 0x304)
        assert state.pop() == 0x304
        assert state.pop() == 0x202

    def test_overflow_at_depth_sixteen(self, state):
        for i in range(16):
            state.push(0x200 + 2 * i)
        with pytest.raises(StackOverflowError) as exc_info:
            state.push(0x400)
        assert exc_info.value.depth == 16
        assert state.stack_pointer == 16

    def test_underflow(self, state):
        with pytest.raises(StackUnderflowError):
            state.pop()


class TestLifecycle:
    def test_timers_default_and_shared(self):
        timers = TimerClock()
        state = MachineState(timers=timers)
        timers.set_delay(7)
        assert state.timers is timers
        assert state.delay_timer == 7
        assert state.sound_timer == 0

    def test_load_sets_pc(self, state):
        state.program_counter = 0x300
        state.load(b"\x00\xE0")
        assert state.program_counter == 0x200
        assert state.memory.read_word(0x200) == 0x00E0

    def test_load_too_large_changes_nothing(self, state):
        state.load(b"\x12\x00")
        state.program_counter = 0x204
        with pytest.raises(LoadTooLargeError):
            state.load(bytes(3585))
        assert state.program_counter == 0x204
        assert state.memory.read_word(0x200) == 0x1200

    def test_reset(self, state):
        state.load(b"\xA2\x22")
        state.set_register(0, 9)
        state.index_register = 0x300
        state.program_counter = 0x208
        state.push(0x202)
        state.framebuffer.draw_sprite(0, 0, b"\xFF")
        state.keypad.press(4)
        state.timers.set_sound(10)

        state.reset()

        assert list(state.registers) == [0] * 16
        assert state.index_register == 0
        assert state.program_counter == 0x200
        assert state.stack == ()
        assert not any(state.framebuffer.pixels())
        assert not state.keypad.any_pressed()
        assert state.sound_timer == 0
        assert state.memory.read_word(0x200) == 0
        assert state.memory.read_block(0x050, len(FONTSET)) == FONTSET

    def test_snapshot(self, state):
        state.set_register(0xF, 1)
        state.index_register = 0x123
        state.timers.set_sound(3)
        snap = state.snapshot()
        regs = {r.name: r for r in snap.registers}
        assert regs["VF"].value == 1
        assert regs["I"].value == 0x123
        assert regs["I"].width == 16
        assert regs["PC"].value == 0x200
        assert regs["ST"].value == 3
        assert snap.flags["VF"] is True
        assert snap.flags["sound"] is True
        assert snap.flags["redraw"] is False
