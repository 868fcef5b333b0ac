"""
Keypad for CHIP-8 Emulator
==========================

The CHIP-8 keypad has 16 keys labelled with the hex digits 0-F, in a
4 x 4 arrangement:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

Host keyboards conventionally map the left-hand 4 x 4 block onto it:

    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F

The keypad is written only by the input adapter and read by the
key-dependent opcodes (Ex9E, ExA1, Fx0A).

Copyright (c) 2025 chip8-sdk Contributors
"""

from typing import Dict, Iterable, List, Optional, Union


KEY_COUNT = 16

# Host key name -> keypad key
DEFAULT_KEY_MAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


class Keypad:
    """
    16-key hex keypad state.

    Keys can be addressed by keypad index (0-15) or by host key name
    from the key map ("Q", "x", ...). Unknown host key names are ignored,
    so an adapter can forward every key event without filtering.

    Example:
        >>> keypad = Keypad()
        >>> keypad.key_down("W")      # host key W is keypad 5
        >>> keypad.first_pressed()
        5
        >>> keypad.key_up(5)
        >>> keypad.first_pressed() is None
        True
    """

    def __init__(self, key_map: Optional[Dict[str, int]] = None):
        """
        Initialize keypad with no keys pressed.

        Args:
            key_map: Host key name -> keypad key (default: DEFAULT_KEY_MAP)
        """
        self._key_map = dict(DEFAULT_KEY_MAP if key_map is None else key_map)
        self._pressed = [False] * KEY_COUNT

    def _resolve(self, key: Union[int, str]) -> Optional[int]:
        """Translate a key index or host key name to a keypad index."""
        if isinstance(key, str):
            return self._key_map.get(key.upper())
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Keypad key must be 0-15, got {key}")
        return key

    # =========================================================================
    # Key Input API
    # =========================================================================

    def key_down(self, key: Union[int, str]) -> None:
        """
        Press a key.

        Args:
            key: Keypad index (0-15) or host key name
        """
        index = self._resolve(key)
        if index is not None:
            self._pressed[index] = True

    def key_up(self, key: Union[int, str]) -> None:
        """
        Release a key.

        Args:
            key: Keypad index (0-15) or host key name
        """
        index = self._resolve(key)
        if index is not None:
            self._pressed[index] = False

    def is_pressed(self, key: int) -> bool:
        """Check if keypad key (0-15) is currently pressed."""
        return self._pressed[key & 0xF]

    def first_pressed(self) -> Optional[int]:
        """
        Get the lowest-numbered pressed key.

        Returns:
            Key index, or None if no key is pressed
        """
        for index, pressed in enumerate(self._pressed):
            if pressed:
                return index
        return None

    @property
    def pressed_keys(self) -> List[int]:
        """Indices of all pressed keys, ascending."""
        return [i for i, pressed in enumerate(self._pressed) if pressed]

    def set_state(self, states: Iterable[bool]) -> None:
        """
        Replace the whole keypad state.

        Args:
            states: 16 booleans, one per key 0x0-0xF
        """
        values = [bool(s) for s in states]
        if len(values) != KEY_COUNT:
            raise ValueError(f"Expected {KEY_COUNT} key states, got {len(values)}")
        self._pressed = values

    def clear(self) -> None:
        """Release all keys."""
        self._pressed = [False] * KEY_COUNT

    def key_for_name(self, name: str) -> Optional[int]:
        """Look up the keypad key for a host key name."""
        return self._key_map.get(name.upper())
