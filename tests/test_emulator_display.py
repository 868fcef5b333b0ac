"""
Display Buffer Tests
====================

Tests for the 64 x 32 XOR display:
- Sprite drawing and collision detection
- Coordinate wrap-around
- Snapshot and dirty tracking
- Text and PNG rendering
"""

import io

import pytest

from chip8_sdk.emulator.display import DISPLAY_HEIGHT, DISPLAY_SIZE, DISPLAY_WIDTH, Display


@pytest.fixture
def display():
    return Display()


class TestDrawing:
    """Sprite XOR drawing."""

    def test_initially_clear(self, display):
        assert display.lit_count() == 0
        assert (display.width, display.height) == (64, 32)

    def test_draw_row(self, display):
        """MSB is the leftmost pixel."""
        collision = display.draw_sprite(0, 0, bytes([0x80 | 0x01]))
        assert not collision
        assert display.get_pixel(0, 0) == 1
        assert display.get_pixel(7, 0) == 1
        assert display.lit_count() == 2

    def test_redraw_erases_and_collides(self, display):
        display.draw_sprite(10, 5, bytes([0xFF, 0x81]))
        collision = display.draw_sprite(10, 5, bytes([0xFF, 0x81]))
        assert collision
        assert display.lit_count() == 0

    def test_partial_overlap_collides(self, display):
        display.draw_sprite(0, 0, bytes([0x80]))
        assert display.draw_sprite(0, 0, bytes([0xC0]))
        assert display.get_pixel(0, 0) == 0
        assert display.get_pixel(1, 0) == 1

    def test_no_collision_on_adjacent(self, display):
        display.draw_sprite(0, 0, bytes([0x80]))
        assert not display.draw_sprite(1, 0, bytes([0x80]))

    def test_wrap_horizontal(self, display):
        """A sprite at x=62 continues at x=0."""
        display.draw_sprite(62, 0, bytes([0xF0]))
        assert display.get_pixel(62, 0) == 1
        assert display.get_pixel(63, 0) == 1
        assert display.get_pixel(0, 0) == 1
        assert display.get_pixel(1, 0) == 1

    def test_wrap_vertical(self, display):
        display.draw_sprite(0, 31, bytes([0x80, 0x80]))
        assert display.get_pixel(0, 31) == 1
        assert display.get_pixel(0, 0) == 1

    def test_large_coordinates_wrap(self, display):
        """Register values above the screen size wrap."""
        display.draw_sprite(64 + 3, 32 + 2, bytes([0x80]))
        assert display.get_pixel(3, 2) == 1

    def test_empty_sprite(self, display):
        assert not display.draw_sprite(0, 0, b"")
        assert display.lit_count() == 0

    def test_clear(self, display):
        display.draw_sprite(0, 0, bytes([0xFF]))
        display.clear()
        assert display.lit_count() == 0

    def test_get_pixel_out_of_range(self, display):
        with pytest.raises(ValueError):
            display.get_pixel(DISPLAY_WIDTH, 0)


class TestSnapshot:
    """Snapshot and dirty tracking."""

    def test_snapshot_clears_dirty(self, display):
        assert display.dirty
        snap = display.snapshot()
        assert len(snap) == DISPLAY_SIZE
        assert not display.dirty

    def test_draw_sets_dirty(self, display):
        display.snapshot()
        display.draw_sprite(0, 0, bytes([0x80]))
        assert display.dirty

    def test_snapshot_is_a_copy(self, display):
        snap = display.snapshot()
        display.draw_sprite(0, 0, bytes([0x80]))
        assert snap[0] == 0
        assert display.pixels[0] == 1


class TestRendering:
    """Text and image output."""

    def test_text_grid(self, display):
        display.draw_sprite(0, 0, bytes([0xC0]))
        grid = display.get_text_grid()
        assert len(grid) == DISPLAY_HEIGHT
        assert grid[0].startswith("##.")
        assert all(len(row) == DISPLAY_WIDTH for row in grid)

    def test_text_custom_chars(self, display):
        display.draw_sprite(0, 0, bytes([0x80]))
        assert display.get_text(on="X", off=" ").splitlines()[0].rstrip() == "X"

    def test_render_png(self, display):
        from PIL import Image

        display.draw_sprite(0, 0, bytes([0x80]))
        png = display.render_image(scale=4)
        assert png.startswith(b"\x89PNG")

        img = Image.open(io.BytesIO(png))
        assert img.size == (DISPLAY_WIDTH * 4, DISPLAY_HEIGHT * 4)
        assert img.getpixel((0, 0)) == 255
        assert img.getpixel((4, 0)) == 0

    def test_render_invalid_scale(self, display):
        with pytest.raises(ValueError):
            display.render_image(scale=0)
