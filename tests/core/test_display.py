import pytest

from chip8vm.core.display import Framebuffer


class TestFramebuffer:
    def test_initial_state(self):
        fb = Framebuffer()
        assert fb.width == 64
        assert fb.height == 32
        assert not any(fb.pixels())
        assert len(fb.pixels()) == 2048
        assert fb.dirty is False

    def test_draw_sets_pixels_msb_first(self):
        fb = Framebuffer()
        collision = fb.draw_sprite(0, 0, b"\x80\x01")
        assert collision is False
        assert fb.get(0, 0)
        assert not fb.get(1, 0)
        assert fb.get(7, 1)
        assert fb.dirty

    def test_redraw_twice_erases_and_reports_collision(self):
        fb = Framebuffer()
        fb.draw_sprite(10, 5, b"\xF0\x90\xF0")
        collision = fb.draw_sprite(10, 5, b"\xF0\x90\xF0")
        assert collision is True
        assert not any(fb.pixels())

    def test_partial_overlap_collision(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 0, b"\xC0")
        assert fb.draw_sprite(1, 0, b"\x80") is True
        assert fb.get(0, 0)
        assert not fb.get(1, 0)

    def test_no_collision_when_only_setting_pixels(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 0, b"\x80")
        assert fb.draw_sprite(1, 0, b"\x80") is False

    def test_start_coordinates_wrap(self):
        fb = Framebuffer()
        fb.draw_sprite(64 + 3, 32 + 2, b"\x80")
        assert fb.get(3, 2)

    def test_clip_at_right_and_bottom_edges(self):
        fb = Framebuffer()
        fb.draw_sprite(60, 30, b"\xFF\xFF\xFF")
        lit = [(x, y) for y in range(32) for x in range(64) if fb.get(x, y)]
        assert len(lit) == 8
        assert all(60 <= x < 64 and 30 <= y < 32 for x, y in lit)

    def test_wrap_at_right_and_bottom_edges(self):
        fb = Framebuffer()
        fb.draw_sprite(62, 31, b"\xF0\xF0", wrap=True)
        assert fb.get(62, 31)
        assert fb.get(63, 31)
        assert fb.get(0, 31)
        assert fb.get(1, 31)
        assert fb.get(62, 0)
        assert fb.get(1, 0)

    def test_empty_sprite_still_signals_redraw(self):
        fb = Framebuffer()
        assert fb.draw_sprite(0, 0, b"") is False
        assert fb.dirty

    def test_clear(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 0, b"\xFF")
        fb.consume_redraw()
        fb.clear()
        assert not any(fb.pixels())
        assert fb.dirty

    def test_consume_redraw_coalesces(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 0, b"\x80")
        fb.draw_sprite(8, 0, b"\x80")
        fb.clear()
        assert fb.consume_redraw() is True
        assert fb.consume_redraw() is False

    def test_get_out_of_range(self):
        fb = Framebuffer()
        with pytest.raises(IndexError):
            fb.get(64, 0)
        with pytest.raises(IndexError):
            fb.get(0, -1)

    def test_rows_and_render_text(self):
        fb = Framebuffer(width=4, height=2)
        fb.draw_sprite(1, 1, b"\x80")
        assert fb.rows() == [(False,) * 4, (False, True, False, False)]
        assert fb.render_text() == "....\n.#.."

    def test_reset_lowers_signal(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 0, b"\x80")
        fb.reset()
        assert not any(fb.pixels())
        assert fb.dirty is False
