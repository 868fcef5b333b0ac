"""
Display Buffer for CHIP-8 Emulator
==================================

The CHIP-8 display is a 64 x 32 monochrome bitmap. Programs draw on it
exclusively through sprites: each sprite row is one byte (MSB = leftmost
pixel) that is XORed into the buffer. A pixel that goes from set to unset
during a draw is a collision, which the interpreter reports in VF.

Coordinates wrap per pixel: a sprite drawn at x=62 continues at x=0 on
the same row, and likewise vertically.

The display is written only by the interpreter. Presentation layers read
it through snapshot(), which returns an immutable copy and clears the
dirty flag, so a renderer never sees a half-drawn frame.

Copyright (c) 2025 chip8-sdk Contributors
"""

from typing import List, Optional


# =============================================================================
# Display Dimensions
# =============================================================================

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_SIZE = DISPLAY_WIDTH * DISPLAY_HEIGHT

# Characters used by the text rendering
PIXEL_ON = "#"
PIXEL_OFF = "."


class Display:
    """
    64 x 32 monochrome display buffer.

    Pixels are stored row-major, one byte per pixel (0 or 1).

    Example:
        >>> display = Display()
        >>> display.draw_sprite(0, 0, bytes([0xF0]))
        False
        >>> display.get_pixel(3, 0), display.get_pixel(4, 0)
        (1, 0)
        >>> display.draw_sprite(0, 0, bytes([0xF0]))  # erase again
        True
    """

    def __init__(self):
        """Initialize a cleared display."""
        self._pixels = bytearray(DISPLAY_SIZE)

        # Track if display needs refresh (for external rendering)
        self._dirty = True

    @property
    def width(self) -> int:
        """Display width in pixels (64)."""
        return DISPLAY_WIDTH

    @property
    def height(self) -> int:
        """Display height in pixels (32)."""
        return DISPLAY_HEIGHT

    @property
    def dirty(self) -> bool:
        """True if display content has changed since the last snapshot."""
        return self._dirty

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = bytearray(DISPLAY_SIZE)
        self._dirty = True

    def get_pixel(self, x: int, y: int) -> int:
        """
        Get a single pixel.

        Args:
            x: Column (0-63)
            y: Row (0-31)

        Returns:
            1 if the pixel is set, 0 otherwise
        """
        if not (0 <= x < DISPLAY_WIDTH and 0 <= y < DISPLAY_HEIGHT):
            raise ValueError(f"Pixel ({x}, {y}) out of range")
        return self._pixels[y * DISPLAY_WIDTH + x]

    def draw_sprite(self, x: int, y: int, sprite: bytes) -> bool:
        """
        XOR a sprite into the buffer.

        Each byte of sprite is one row, drawn from (x, y) downwards. Only
        set bits are drawn; each toggles the pixel at
        ((x + col) % 64, (y + row) % 32).

        Args:
            x: Starting column
            y: Starting row
            sprite: Sprite rows (up to 15 bytes)

        Returns:
            True if any pixel was turned off (collision)
        """
        collision = False

        for row, bits in enumerate(sprite):
            if bits == 0:
                continue
            base = ((y + row) % DISPLAY_HEIGHT) * DISPLAY_WIDTH
            for col in range(8):
                if (bits >> (7 - col)) & 1:
                    index = base + (x + col) % DISPLAY_WIDTH
                    if self._pixels[index]:
                        collision = True
                    self._pixels[index] ^= 1

        self._dirty = True
        return collision

    def snapshot(self) -> bytes:
        """
        Get an immutable copy of the buffer and clear the dirty flag.

        Returns:
            DISPLAY_SIZE bytes, row-major, 1 for set pixels
        """
        self._dirty = False
        return bytes(self._pixels)

    @property
    def pixels(self) -> bytes:
        """Copy of the buffer without touching the dirty flag."""
        return bytes(self._pixels)

    # =========================================================================
    # Text API (for headless debugging)
    # =========================================================================

    def get_text_grid(self, on: str = PIXEL_ON, off: str = PIXEL_OFF) -> List[str]:
        """
        Render the display as one string per row.

        Args:
            on: Character for set pixels
            off: Character for clear pixels

        Returns:
            32 strings of 64 characters each
        """
        rows = []
        for y in range(DISPLAY_HEIGHT):
            row = self._pixels[y * DISPLAY_WIDTH:(y + 1) * DISPLAY_WIDTH]
            rows.append("".join(on if p else off for p in row))
        return rows

    def get_text(self, on: str = PIXEL_ON, off: str = PIXEL_OFF) -> str:
        """Render the display as a single newline-separated string."""
        return "\n".join(self.get_text_grid(on, off))

    def lit_count(self) -> int:
        """Number of set pixels."""
        return sum(self._pixels)

    # =========================================================================
    # Image Rendering
    # =========================================================================

    def render_image(
        self,
        scale: int = 8,
        foreground: int = 255,
        background: int = 0,
        pixels: Optional[bytes] = None,
    ) -> bytes:
        """
        Render the display as a PNG image.

        Args:
            scale: Pixel scale factor (default 8, giving 512 x 256)
            foreground: Grey level for set pixels
            background: Grey level for clear pixels
            pixels: Buffer to render (default: current contents)

        Returns:
            PNG image bytes
        """
        from PIL import Image
        import io

        if scale < 1:
            raise ValueError(f"scale must be >= 1, got {scale}")

        source = self._pixels if pixels is None else pixels

        img = Image.new("L", (DISPLAY_WIDTH, DISPLAY_HEIGHT), color=background)
        img.putdata([foreground if p else background for p in source])
        if scale > 1:
            img = img.resize(
                (DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale),
                resample=Image.NEAREST,
            )

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()
