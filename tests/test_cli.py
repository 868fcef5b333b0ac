"""
chip8 CLI Tests
===============

Tests for the `chip8` command group:
- disasm listing and options
- debug register trace and stop conditions
- screenshot export
- run (window creation is replaced by a recording stub)
- Argument errors and exit codes
"""

import sys
import types
from pathlib import Path

import pytest
from click.testing import CliRunner

from chip8_sdk import __version__
from chip8_sdk.cli.chip8 import main
from chip8_sdk.cli.errors import ExitCode


def program(*opcodes: int) -> bytes:
    """Encode opcodes as big-endian program bytes."""
    return b"".join(bytes([op >> 8, op & 0xFF]) for op in opcodes)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def rom(tmp_path) -> Path:
    """Small ROM: load, add, then the end-of-program marker."""
    path = tmp_path / "test.ch8"
    path.write_bytes(program(0x6A12, 0x7A05))
    return path


# =============================================================================
# Group
# =============================================================================

class TestGroup:
    """Top-level options."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("disasm", "debug", "run", "screenshot"):
            assert command in result.output

    def test_unknown_subcommand(self, runner):
        """Unknown subcommands fail with the usage exit code."""
        result = runner.invoke(main, ["--bogus-flag-command"])
        assert result.exit_code == ExitCode.INVALID_ARGS
        result = runner.invoke(main, ["emulate", "x.ch8"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_rom(self, runner, tmp_path):
        result = runner.invoke(main, ["disasm", str(tmp_path / "missing.ch8")])
        assert result.exit_code == ExitCode.INVALID_ARGS


# =============================================================================
# disasm
# =============================================================================

class TestDisasm:
    """chip8 disasm."""

    def test_listing(self, runner, rom):
        result = runner.invoke(main, ["disasm", str(rom)])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "VA = 0x12 (0x6A12)",
            "VA = VA + 0x05 (0x7A05)",
        ]

    def test_with_addr(self, runner, rom):
        result = runner.invoke(main, ["disasm", str(rom), "--with-addr"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "#0x000 : VA = 0x12 (0x6A12)"
        assert lines[1] == "#0x002 : VA = VA + 0x05 (0x7A05)"

    def test_base_address(self, runner, rom):
        result = runner.invoke(main, ["disasm", str(rom), "--with-addr", "-a", "0x200"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0].startswith("#0x200 : ")

    def test_invalid_address(self, runner, rom):
        result = runner.invoke(main, ["disasm", str(rom), "-a", "zz"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_count(self, runner, rom):
        result = runner.invoke(main, ["disasm", str(rom), "-c", "1"])
        assert result.exit_code == 0, result.output
        assert len(result.output.splitlines()) == 1

    def test_odd_length(self, runner, tmp_path):
        path = tmp_path / "odd.ch8"
        path.write_bytes(b"\x00\xE0\x12")
        result = runner.invoke(main, ["disasm", str(path)])
        assert result.output.splitlines() == ["Clear Screen (0x00E0)"]

    def test_output_file(self, runner, rom, tmp_path):
        out = tmp_path / "listing.txt"
        result = runner.invoke(main, ["disasm", str(rom), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text().splitlines()[1] == "VA = VA + 0x05 (0x7A05)"


# =============================================================================
# debug
# =============================================================================

class TestDebug:
    """chip8 debug."""

    def test_trace(self, runner, rom):
        result = runner.invoke(main, ["debug", str(rom)])
        assert result.exit_code == 0, result.output
        out = result.output
        assert "Init state" in out
        assert "6a 12 7a 05 00 00 00 00 00 00" in out
        assert "Result for cycle 0" in out
        assert "Executed 0x6A12" in out
        assert "Result for cycle 1" in out
        assert "Executed 0x7A05" in out
        assert "VA:17" in out
        assert "Result for cycle 2" not in out

    def test_max_cycles(self, runner, tmp_path):
        path = tmp_path / "loop.ch8"
        path.write_bytes(program(0x1200))
        result = runner.invoke(main, ["debug", str(path), "--max-cycles", "3"])
        assert result.exit_code == 0, result.output
        assert "Result for cycle 2" in result.output
        assert "Result for cycle 3" not in result.output

    def test_unknown_opcode_stops(self, runner, tmp_path):
        path = tmp_path / "bad.ch8"
        path.write_bytes(program(0x5121))
        result = runner.invoke(main, ["debug", str(path)])
        assert result.exit_code == 0, result.output
        assert "unknown opcode 0x5121" in result.output

    def test_unknown_opcode_strict(self, runner, tmp_path):
        path = tmp_path / "bad.ch8"
        path.write_bytes(program(0x5121))
        result = runner.invoke(main, ["debug", str(path), "--strict"])
        assert result.exit_code == ExitCode.RUN_ERROR
        assert "0x5121" in result.output

    def test_machine_error(self, runner, tmp_path):
        path = tmp_path / "ret.ch8"
        path.write_bytes(program(0x00EE))
        result = runner.invoke(main, ["debug", str(path)])
        assert result.exit_code == ExitCode.RUN_ERROR
        assert "stack underflow" in result.output

    def test_oversize_rom(self, runner, tmp_path):
        path = tmp_path / "big.ch8"
        path.write_bytes(bytes(4000))
        result = runner.invoke(main, ["debug", str(path)])
        assert result.exit_code == ExitCode.RUN_ERROR

    def test_no_shift_quirk(self, runner, tmp_path):
        path = tmp_path / "shift.ch8"
        path.write_bytes(program(0x6006, 0x6111, 0x8016))
        result = runner.invoke(main, ["--no-shift-quirk", "debug", str(path)])
        assert result.exit_code == 0, result.output
        final = result.output.rsplit("Result for cycle 2", 1)[1]
        assert "V0:03 V1:11" in final


# =============================================================================
# screenshot
# =============================================================================

class TestScreenshot:
    """chip8 screenshot."""

    def test_png_written(self, runner, tmp_path):
        path = tmp_path / "draw.ch8"
        path.write_bytes(program(0xA000, 0xD005))
        out = tmp_path / "screen.png"
        result = runner.invoke(main, ["screenshot", str(path), str(out), "--scale", "2"])
        assert result.exit_code == 0, result.output
        assert out.read_bytes().startswith(b"\x89PNG")
        assert "after 2 cycles" in result.output


# =============================================================================
# run
# =============================================================================

class TestRun:
    """chip8 run, with the pyglet window replaced."""

    def test_run_opens_window(self, runner, rom, monkeypatch):
        calls = []

        def fake_run_window(emulator, scale=None, caption="CHIP-8"):
            calls.append((emulator, caption))

        window_module = types.ModuleType("chip8_sdk.emulator.window")
        window_module.run_window = fake_run_window
        monkeypatch.setitem(sys.modules, "chip8_sdk.emulator.window", window_module)

        result = runner.invoke(main, ["run", str(rom), "--scale", "4"])
        assert result.exit_code == 0, result.output
        assert len(calls) == 1
        emulator, caption = calls[0]
        assert emulator.config.scale == 4
        assert emulator.peek_opcode() == 0x6A12
        assert "test.ch8" in caption
