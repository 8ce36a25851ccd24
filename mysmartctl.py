#!/usr/bin/env python3
"""Controller and terminal for the mySmartUSB programmer."""

import argparse
import logging
import sys

from common.device import LineSettings
from common.protocol import (
    DEFAULT_BAUDRATE,
    DEFAULT_RESPONSE_TIMEOUT_S,
    LOG_LEVEL_OVERRIDE,
    SUPPORTED_BAUDRATES,
    Parity,
)
from control.commands import Command
from control.runner import run_control
from terminal.runner import run_terminal

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

# (short flag, long flag, command, help); no command selects terminal mode
ACTIONS = [
    ("-d", "--data-mode", Command.DATA_MODE, "Switch into data mode"),
    ("-p", "--programmer-mode", Command.PROGRAMMER_MODE, "Switch into programming mode"),
    ("-q", "--quiet-mode", Command.QUIET_MODE, "Switch into quiet mode"),
    ("-r", "--reset-board", Command.RESET_BOARD, "Reset the board"),
    ("-R", "--reset-programmer", Command.RESET_PROGRAMMER, "Reset the programmer"),
    ("-o", "--board-on", Command.BOARD_ON, "Turn board power on"),
    ("-O", "--board-off", Command.BOARD_OFF, "Turn board power off"),
    ("-t", "--terminal", None, "Open a terminal session"),
]


def non_negative_float(value: str) -> float:
    """argparse type for a float that must be >= 0."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number")
    if number < 0:
        raise argparse.ArgumentTypeError(f"{value} must not be negative")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mysmartctl",
        description="Controller and terminal for the mySmartUSB",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -d /dev/ttyUSB0                 Switch into data mode
  %(prog)s -t -b 19200 -c even /dev/ttyUSB0  Terminal at 19200,E,1
""",
    )

    actions = parser.add_argument_group("Actions").add_mutually_exclusive_group(required=True)
    for short, long, command, help_text in ACTIONS:
        actions.add_argument(
            short,
            long,
            dest="action",
            action="store_const",
            const=command if command is not None else "terminal",
            help=help_text,
        )

    terminal = parser.add_argument_group("Options (for terminal mode only)")
    terminal.add_argument(
        "-b",
        "--baud",
        type=int,
        choices=SUPPORTED_BAUDRATES,
        default=DEFAULT_BAUDRATE,
        metavar="BAUD",
        help=f"Defines the baud rate (default: {DEFAULT_BAUDRATE})",
    )
    terminal.add_argument(
        "-c",
        "--parity",
        type=str.lower,
        choices=["none", "even", "odd"],
        default="none",
        metavar="MODE",
        help="Either none, even or odd (default: none)",
    )
    terminal.add_argument(
        "-e",
        "--two-stopbits",
        action="store_true",
        help="Two stop bits instead of one",
    )
    terminal.add_argument(
        "--log-file",
        type=str,
        help="Write log output to this file (stderr is owned by the screen)",
    )

    parser.add_argument(
        "--timeout",
        type=non_negative_float,
        default=DEFAULT_RESPONSE_TIMEOUT_S,
        help=f"Seconds to wait for a command acknowledgement, 0 = forever (default: {DEFAULT_RESPONSE_TIMEOUT_S})",
    )
    parser.add_argument(
        "-V",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-V info, -VV debug)",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("interface", help="Serial device path (e.g., /dev/ttyUSB0)")
    return parser


def configure_logging(verbose: int, terminal: bool, log_file: str | None) -> None:
    """Configure the root logger.

    Terminal mode logs only to log_file, if given, so log records never
    land on top of the curses screen.
    """
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    if LOG_LEVEL_OVERRIDE:
        override = LOG_LEVEL_OVERRIDE.upper()
        resolved = int(override) if override.isdigit() else logging.getLevelName(override)
        if isinstance(resolved, int):
            level = resolved

    handlers: list[logging.Handler]
    if log_file:
        handlers = [logging.FileHandler(log_file)]
    elif terminal:
        handlers = [logging.NullHandler()]
    else:
        handlers = [logging.StreamHandler(sys.stderr)]

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    terminal = args.action == "terminal"
    configure_logging(args.verbose, terminal, args.log_file)

    if terminal:
        settings = LineSettings(
            baudrate=args.baud,
            parity=Parity.from_name(args.parity),
            stopbits=2 if args.two_stopbits else 1,
        )
        return run_terminal(args.interface, settings)

    return run_control(args.interface, args.action, timeout_s=args.timeout)


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
