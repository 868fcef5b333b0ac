"""
chip8 - CHIP-8 Emulator Command-Line Interface
==============================================

This module implements the `chip8` command, which groups the SDK's tools
for working with CHIP-8 ROM images.

Usage Examples
--------------
Disassemble a ROM:
    $ chip8 disasm pong.ch8

With addresses, to a file:
    $ chip8 disasm pong.ch8 --with-addr -o pong.txt

Step through a ROM headlessly, dumping registers after every cycle:
    $ chip8 debug test.ch8 --max-cycles 100

Play a ROM in a window:
    $ chip8 run pong.ch8 --scale 12

Run headlessly and save the screen:
    $ chip8 screenshot maze.ch8 maze.png --cycles 2000

Configuration
-------------
Emulator settings are read from CHIP8_* environment variables (see
chip8_sdk.emulator.config); command-line options override them.

Exit Codes
----------
0 - Success
1 - ROM or emulation error
2 - Invalid arguments (including unknown subcommands)
3 - Internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from chip8_sdk import __version__
from chip8_sdk.cli.errors import handle_cli_exception
from chip8_sdk.disassembler import Chip8Disassembler
from chip8_sdk.emulator import END_OF_PROGRAM, Emulator, EmulatorConfig, HaltReason
from chip8_sdk.errors import UnknownOpcodeError

# Configure logging
logger = logging.getLogger(__name__)


# Bytes of program memory shown before a debug run
DEBUG_MEMORY_SAMPLE = 10


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores verbosity and the quirk override from the group options.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.shift_quirk: Optional[bool] = None

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )

    def make_config(self, **overrides) -> EmulatorConfig:
        """
        Build the emulator configuration.

        Environment variables first, then group options, then the
        subcommand's own overrides.
        """
        return EmulatorConfig.from_env().with_overrides(
            shift_quirk=self.shift_quirk, **overrides
        )

    def load_emulator(self, rom: Path, **overrides) -> Emulator:
        """Create an emulator and load rom into it."""
        emulator = Emulator(self.make_config(**overrides))
        emulator.load_rom(rom)
        return emulator


pass_context = click.make_pass_decorator(Context, ensure=True)


def parse_address(value: str) -> int:
    """Parse an address given as 0x-prefixed hex, $-prefixed hex or decimal."""
    try:
        if value.lower().startswith("0x"):
            return int(value, 16)
        if value.startswith("$"):
            return int(value[1:], 16)
        return int(value)
    except ValueError:
        raise click.BadParameter(f"Invalid address '{value}'")


# =============================================================================
# Command Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output (per-instruction trace)",
)
@click.option(
    "--shift-quirk/--no-shift-quirk",
    default=None,
    help="Store 8xy6/8xyE shift results in both Vx and Vy (default: on)",
)
@click.version_option(version=__version__, prog_name="chip8")
@pass_context
def main(ctx: Context, verbose: bool, shift_quirk: Optional[bool]) -> None:
    """
    CHIP-8 disassembler, debugger and emulator.

    Use 'chip8 COMMAND --help' for the options of each command.
    """
    ctx.verbose = verbose
    ctx.shift_quirk = shift_quirk
    ctx.setup_logging()


# =============================================================================
# Disassemble Command
# =============================================================================

@main.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--with-addr",
    is_flag=True,
    help="Prefix each line with its address",
)
@click.option(
    "-a", "--address",
    type=str,
    default="0",
    help="Address of the first byte (hex with 0x prefix or decimal). Default: 0",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@pass_context
def disasm(
    ctx: Context,
    rom: Path,
    with_addr: bool,
    address: str,
    output: Optional[Path],
    count: Optional[int],
) -> None:
    """
    Disassemble ROM into pseudocode, one line per instruction.

    Examples:

        chip8 disasm pong.ch8 --with-addr

        chip8 disasm pong.ch8 --address 0x200 -c 20 -o listing.txt
    """
    try:
        start = parse_address(address)
        data = rom.read_bytes()
        logger.debug(f"Disassembling {rom} ({len(data)} bytes) from 0x{start:03X}")

        text = Chip8Disassembler().disassemble_to_text(
            data, with_address=with_addr, start_address=start, count=count
        )

        if output:
            output.write_text(text + "\n" if text else "")
            click.echo(f"Wrote {output}", err=True)
        elif text:
            click.echo(text)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Disassembly")


# =============================================================================
# Debug Command
# =============================================================================

@main.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--max-cycles",
    type=click.IntRange(min=1),
    default=10_000,
    show_default=True,
    help="Stop after this many instructions",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Treat unknown opcodes as errors",
)
@pass_context
def debug(ctx: Context, rom: Path, max_cycles: int, strict: bool) -> None:
    """
    Run ROM headlessly, printing registers after every cycle.

    Execution stops at the end-of-program marker (opcode 0x0000), at an
    unknown opcode, or after --max-cycles instructions.
    """
    try:
        emulator = ctx.load_emulator(rom)

        click.echo("Init state")
        click.echo("Ram @ 0x200 : ")
        click.echo(emulator.format_memory(DEBUG_MEMORY_SAMPLE))
        click.echo(emulator.format_registers())

        cycle = 0
        while cycle < max_cycles:
            if emulator.peek_opcode() == END_OF_PROGRAM:
                break

            result = emulator.step()
            if not result.implemented:
                if strict:
                    raise UnknownOpcodeError(result.opcode, result.address)
                click.echo(
                    f"\nStopped at unknown opcode 0x{result.opcode:04X} (0x{result.address:03X})"
                )
                break

            click.echo(f"\nResult for cycle {cycle}")
            click.echo(emulator.format_registers())
            click.echo(f"Executed 0x{result.opcode:04X}")
            cycle += 1
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Emulation")


# =============================================================================
# Run Command
# =============================================================================

@main.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-s", "--scale",
    type=click.IntRange(min=1),
    default=None,
    help="Window pixels per CHIP-8 pixel (default: 10)",
)
@pass_context
def run(ctx: Context, rom: Path, scale: Optional[int]) -> None:
    """
    Run ROM in a window.

    Keys 1-4, Q-R, A-F and Z-V form the hex keypad; ESC quits.
    """
    try:
        emulator = ctx.load_emulator(rom, scale=scale)

        # pyglet needs a display, so only import it when a window is wanted
        from chip8_sdk.emulator.window import run_window

        run_window(emulator, caption=f"CHIP-8 - {rom.name}")
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Emulation")


# =============================================================================
# Screenshot Command
# =============================================================================

@main.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "output",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--cycles",
    type=click.IntRange(min=1),
    default=1_000,
    show_default=True,
    help="Instructions to execute before capturing",
)
@click.option(
    "-s", "--scale",
    type=click.IntRange(min=1),
    default=8,
    show_default=True,
    help="Image pixels per CHIP-8 pixel",
)
@pass_context
def screenshot(ctx: Context, rom: Path, output: Path, cycles: int, scale: int) -> None:
    """
    Run ROM headlessly and save the display as a PNG image.
    """
    try:
        emulator = ctx.load_emulator(rom)
        result = emulator.run(max_cycles=cycles)
        if result.reason is HaltReason.UNKNOWN_OPCODE:
            logger.warning(str(result))

        output.write_bytes(emulator.render_display(scale=scale))
        click.echo(f"Saved {output} after {result.cycles} cycles")
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Emulation")


if __name__ == "__main__":
    main()
