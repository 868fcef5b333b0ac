"""
CHIP-8 Emulator - Configuration
===============================

Emulator configuration: instruction-set quirks, run-loop pacing and
presentation settings. Configuration can come from:
- Default values (defined here)
- Environment variables (EmulatorConfig.from_env)
- Command-line options (applied by the CLI over either of the above)

Environment variables:
    CHIP8_SHIFT_QUIRK       "0"/"false" writes shift results to Vx only
    CHIP8_SEED              integer seed for the RND instruction
    CHIP8_CYCLES_PER_FRAME  instructions executed per 60 Hz frame
    CHIP8_SCALE             window pixel scale

Copyright (c) 2025 chip8-sdk Contributors
"""

from dataclasses import dataclass, replace
from typing import Optional
import os


_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        shift_quirk: When True (default), SHR/SHL (8xy6/8xyE) store the
                     shifted value in both Vx and Vy. When False, only Vx
                     is written, matching later interpreters.
        stack_depth: Maximum call stack depth (default 16)
        cycles_per_frame: Instructions executed per frame by the run loops
        timer_hz: Delay/sound timer rate and frame rate (default 60)
        scale: Window pixel scale for the windowed adapter
        seed: Seed for the RND instruction's generator (None = random)

    Example:
        >>> config = EmulatorConfig(shift_quirk=False, seed=1234)
        >>> config.stack_depth
        16
    """
    shift_quirk: bool = True
    stack_depth: int = 16
    cycles_per_frame: int = 10
    timer_hz: int = 60
    scale: int = 10
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.stack_depth < 1:
            raise ValueError(f"stack_depth must be >= 1, got {self.stack_depth}")
        if self.cycles_per_frame < 1:
            raise ValueError(f"cycles_per_frame must be >= 1, got {self.cycles_per_frame}")
        if self.timer_hz < 1:
            raise ValueError(f"timer_hz must be >= 1, got {self.timer_hz}")
        if self.scale < 1:
            raise ValueError(f"scale must be >= 1, got {self.scale}")

    @classmethod
    def from_env(cls) -> "EmulatorConfig":
        """
        Create EmulatorConfig from environment variables.

        Unset variables keep their defaults.

        Returns:
            EmulatorConfig with values from environment variables

        Raises:
            ValueError: If a numeric variable is not an integer
        """
        config = cls()

        if quirk := os.environ.get("CHIP8_SHIFT_QUIRK"):
            config = replace(config, shift_quirk=quirk.strip().lower() not in _FALSE_VALUES)

        if seed := os.environ.get("CHIP8_SEED"):
            config = replace(config, seed=int(seed))

        if cycles := os.environ.get("CHIP8_CYCLES_PER_FRAME"):
            config = replace(config, cycles_per_frame=int(cycles))

        if scale := os.environ.get("CHIP8_SCALE"):
            config = replace(config, scale=int(scale))

        return config

    def with_overrides(self, **overrides) -> "EmulatorConfig":
        """
        Return a copy with the given fields replaced.

        None values are skipped, so CLI options that were not given leave
        the configured value in place.
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values) if values else self
