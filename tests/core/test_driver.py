import pytest

from conftest import rom

from chip8vm.core.driver import TickDriver
from chip8vm.core.exceptions import LoadTooLargeError
from chip8vm.utils.config_loader import Chip8Config, MachineConfig


class TestScenarios:
    def test_load_immediate(self, driver):
        driver.load(bytes([0x60, 0x05]))
        result = driver.step()
        assert result.ok
        assert result.address == 0x202
        assert result.opcode == 0x6005
        assert driver.state.get_register(0) == 5
        assert driver.state.program_counter == 0x202

    def test_load_index(self, driver):
        driver.load(bytes([0xA2, 0x0A]))
        driver.step()
        assert driver.state.index_register == 0x20A

    def test_call_then_return(self, driver):
        driver.load(bytes([0x22, 0x04, 0x00, 0x00, 0x00, 0xEE]))
        driver.step()
        assert driver.state.stack_pointer == 1
        driver.step()
        assert driver.state.program_counter == 0x202
        assert driver.state.stack_pointer == 0

    def test_sound_timer_drains_without_underflow(self, driver):
        driver.load(rom(0x6003, 0xF018))
        driver.run(2)
        assert driver.sound_active
        driver.timers.tick(3)
        assert driver.state.sound_timer == 0
        driver.timers.tick()
        assert driver.state.sound_timer == 0
        assert not driver.sound_active


class TestFaults:
    def test_fault_rewinds_pc_and_halts(self, driver):
        driver.load(rom(0x6001, 0x00EE))
        driver.step()
        result = driver.step()
        assert result.reason == "fault"
        assert result.address == 0x202
        assert result.opcode == 0x00EE
        assert "underflow" in result.detail.lower()
        assert driver.halted
        assert driver.fault == result
        assert driver.state.program_counter == 0x202
        assert driver.instruction_count == 1

    def test_halted_driver_refuses_to_step(self, driver):
        driver.load(rom(0x00EE))
        driver.step()
        result = driver.step()
        assert result.reason == "halted"
        assert driver.state.program_counter == 0x200

    def test_resume_retries_faulting_instruction(self, driver):
        driver.load(rom(0x00EE))
        driver.step()
        driver.resume()
        assert not driver.halted
        driver.state.push(0x300)
        assert driver.step().ok
        assert driver.state.program_counter == 0x300

    def test_jump_out_of_program_memory_faults_on_next_fetch(self, driver):
        driver.load(rom(0x1100))
        assert driver.step().ok
        result = driver.step()
        assert result.reason == "fault"
        assert result.address == 0x100
        assert result.opcode is None

    def test_stack_overflow_is_fault(self, driver):
        driver.load(rom(0x2200))
        result = driver.run(20)
        assert result.reason == "fault"
        assert driver.state.stack_pointer == 16
        assert driver.instruction_count == 16

    def test_fault_is_logged(self, driver, caplog):
        driver.load(rom(0x00EE))
        with caplog.at_level("ERROR"):
            driver.step()
        assert "Machine fault at PC=0x200" in caplog.text


class TestRun:
    def test_run_counts_instructions(self, driver):
        driver.load(rom(0x7001, 0x1200))
        result = driver.run(10)
        assert result.ok
        assert driver.instruction_count == 10
        assert driver.state.get_register(0) == 5

    def test_run_zero(self, driver):
        driver.load(rom(0x7001))
        result = driver.run(0)
        assert result.ok
        assert driver.instruction_count == 0

    def test_run_negative(self, driver):
        with pytest.raises(ValueError):
            driver.run(-1)

    def test_frame_uses_configured_cycles(self):
        driver = TickDriver(config=Chip8Config(machine=MachineConfig(cycles_per_frame=4)))
        driver.load(rom(0x7001, 0x1200))
        driver.frame()
        assert driver.instruction_count == 4

    def test_tick_interface(self, driver):
        driver.load(rom(0x7001, 0x7001, 0x7001))
        driver.tick(3)
        assert driver.state.get_register(0) == 3


class TestLoad:
    def test_load_too_large_leaves_memory_unchanged(self, driver):
        driver.load(rom(0x6005))
        with pytest.raises(LoadTooLargeError):
            driver.load(bytes(3585))
        assert driver.state.memory.read_word(0x200) == 0x6005

    def test_load_clears_fault(self, driver):
        driver.load(rom(0x00EE))
        driver.step()
        driver.load(rom(0x6005))
        assert not driver.halted
        assert driver.fault is None

    def test_load_file(self, driver, tmp_path):
        path = tmp_path / "prog.ch8"
        path.write_bytes(rom(0x6042))
        driver.load_file(path)
        driver.step()
        assert driver.state.get_register(0) == 0x42

    def test_reset(self, driver):
        driver.load(rom(0x6042, 0x00EE))
        driver.run(2)
        driver.reset()
        assert not driver.halted
        assert driver.instruction_count == 0
        assert driver.state.get_register(0) == 0
        assert driver.state.memory.read_word(0x200) == 0


class TestCollaboratorBoundary:
    def test_redraw_signal_coalesces(self, driver):
        driver.load(rom(0x00E0, 0x00E0, 0x00E0))
        assert not driver.redraw_needed
        driver.run(3)
        assert driver.redraw_needed
        assert driver.consume_redraw() is True
        assert driver.consume_redraw() is False

    def test_set_key_feeds_wait_for_key(self, driver):
        driver.load(rom(0xF50A))
        driver.run(5)
        assert driver.state.program_counter == 0x200
        driver.set_key(0x7, True)
        driver.step()
        assert driver.state.get_register(5) == 0x7
        assert driver.state.program_counter == 0x202

    def test_get_snapshot(self, driver):
        driver.load(rom(0x6A33))
        driver.step()
        regs = {r.name: r.value for r in driver.get_snapshot().registers}
        assert regs["VA"] == 0x33
        assert regs["PC"] == 0x202

    @pytest.mark.slow
    def test_context_manager_runs_timers(self):
        with TickDriver() as driver:
            assert driver.timers.running
        assert not driver.timers.running


class TestReload:
    def test_reload_restarts_last_rom(self, driver):
        driver.load(rom(0x6105, 0x1202))
        driver.run(3)
        driver.state.set_register(2, 9)
        driver.reload()
        assert driver.rom == rom(0x6105, 0x1202)
        assert driver.state.memory.read_word(0x200) == 0x6105
        assert driver.state.program_counter == 0x200
        assert driver.state.get_register(2) == 0
        assert driver.instruction_count == 0

    def test_reload_clears_fault(self, driver):
        driver.load(rom(0x00EE))
        driver.step()
        driver.reload()
        assert not driver.halted
        assert driver.state.memory.read_word(0x200) == 0x00EE

    def test_reload_new_rom(self, driver):
        driver.load(rom(0x6105))
        driver.reload(rom(0x6207))
        driver.step()
        assert driver.state.get_register(2) == 7
        assert driver.rom == rom(0x6207)

    def test_oversized_reload_leaves_machine_untouched(self, driver):
        driver.load(rom(0x6105, 0x1202))
        driver.step()
        with pytest.raises(LoadTooLargeError):
            driver.reload(bytes(3585))
        assert driver.state.get_register(1) == 5
        assert driver.state.program_counter == 0x202
        assert driver.state.memory.read_word(0x200) == 0x6105
        assert driver.instruction_count == 1
        assert driver.rom == rom(0x6105, 0x1202)


class TestTimerDecoupling:
    def test_instruction_ticks_never_decrement_timers(self, driver):
        driver.load(rom(0x6030, 0xF015, 0xF018, 0x1206))
        driver.run(3)
        result = driver.run(5000)
        assert result.ok
        assert driver.instruction_count == 5003
        assert driver.state.delay_timer == 0x30
        assert driver.state.sound_timer == 0x30
        assert driver.timers.interval_count == 0

    def test_only_clock_intervals_decrement(self, driver):
        driver.load(rom(0x6030, 0xF015, 0x1204))
        driver.run(2)
        driver.timers.tick()
        driver.run(1000)
        assert driver.state.delay_timer == 0x2F
