"""
Windowed Front End for the CHIP-8 Emulator
==========================================

A pyglet window that presents an Emulator: it runs one frame per 60 Hz
tick, draws the display and forwards host key events to the keypad.

Host keys use the conventional layout (see chip8_sdk.emulator.keyboard):

    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F

ESC closes the window. The sound timer is counted down but no audio is
produced.

Everything runs on pyglet's event-loop thread: the clock callback
advances the machine, and on_draw reads the display only through
snapshot().

Copyright (c) 2025 chip8-sdk Contributors
"""

import logging
from typing import Dict, Optional

import pyglet
from pyglet.window import key

from chip8_sdk.errors import MachineError
from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH
from .emulator import Emulator
from .keyboard import DEFAULT_KEY_MAP

logger = logging.getLogger(__name__)


PIXEL_COLOR = (255, 255, 255, 255)


def build_symbol_map(key_map: Dict[str, int]) -> Dict[int, int]:
    """
    Translate a host key name map into pyglet key symbols.

    Digit names map to pyglet's underscore constants ("1" -> key._1).

    Args:
        key_map: Host key name -> keypad key

    Returns:
        pyglet key symbol -> keypad key
    """
    symbols = {}
    for name, index in key_map.items():
        attr = f"_{name}" if name.isdigit() else name.upper()
        symbol = getattr(key, attr, None)
        if symbol is not None:
            symbols[symbol] = index
    return symbols


class Chip8Window(pyglet.window.Window):
    """
    pyglet window running a CHIP-8 emulator.

    Attributes:
        emulator: The emulator being presented
        scale: Host pixels per CHIP-8 pixel
        error: Machine error that stopped the run, if any
    """

    def __init__(
        self,
        emulator: Emulator,
        scale: Optional[int] = None,
        caption: str = "CHIP-8",
        key_map: Optional[Dict[str, int]] = None,
    ):
        """
        Create the window and start the frame clock.

        Args:
            emulator: Emulator with a ROM loaded
            scale: Pixel scale (default: emulator.config.scale)
            caption: Window title
            key_map: Host key name -> keypad key (default: the keypad's map)
        """
        self.emulator = emulator
        self.scale = scale or emulator.config.scale
        self.error: Optional[MachineError] = None

        super().__init__(
            DISPLAY_WIDTH * self.scale,
            DISPLAY_HEIGHT * self.scale,
            caption=caption,
            resizable=False,
        )

        self._symbols = build_symbol_map(key_map or DEFAULT_KEY_MAP)
        self._pixels = emulator.state.display.snapshot()
        self._pixel = pyglet.image.SolidColorImagePattern(PIXEL_COLOR).create_image(
            self.scale, self.scale
        )

        pyglet.clock.schedule_interval(self._frame, 1.0 / emulator.config.timer_hz)

    # =========================================================================
    # Clock
    # =========================================================================

    def _frame(self, dt: float) -> None:
        """Advance the machine by one frame."""
        if self.error is not None or self.emulator.halted is not None:
            return
        try:
            self.emulator.run_frame()
        except MachineError as e:
            logger.error(f"Emulation stopped: {e}")
            self.error = e
            self.close()
            return

        if self.emulator.halted is not None:
            logger.info(f"Program halted ({self.emulator.halted.name}); close the window to exit")

    # =========================================================================
    # Input
    # =========================================================================

    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.close()
            return pyglet.event.EVENT_HANDLED
        if symbol in self._symbols:
            self.emulator.press_key(self._symbols[symbol])

    def on_key_release(self, symbol, modifiers):
        if symbol in self._symbols:
            self.emulator.release_key(self._symbols[symbol])

    # =========================================================================
    # Drawing
    # =========================================================================

    def on_draw(self):
        self.clear()

        display = self.emulator.state.display
        if display.dirty:
            self._pixels = display.snapshot()

        # pyglet's origin is bottom-left; CHIP-8 row 0 is the top
        for index, lit in enumerate(self._pixels):
            if lit:
                x = (index % DISPLAY_WIDTH) * self.scale
                y = (DISPLAY_HEIGHT - 1 - index // DISPLAY_WIDTH) * self.scale
                self._pixel.blit(x, y)

    def close(self):
        pyglet.clock.unschedule(self._frame)
        super().close()


def run_window(emulator: Emulator, scale: Optional[int] = None, caption: str = "CHIP-8") -> None:
    """
    Open a window for emulator and block until it is closed.

    Args:
        emulator: Emulator with a ROM loaded
        scale: Pixel scale (default: emulator.config.scale)
        caption: Window title

    Raises:
        MachineError: If the program failed while running
    """
    window = Chip8Window(emulator, scale=scale, caption=caption)
    pyglet.app.run()
    if window.error is not None:
        raise window.error
