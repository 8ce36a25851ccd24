"""Terminal package for mysmartctl.

Contains the interactive terminal session:
- state: SessionState, format_elapsed, format_status_line
- display: Display protocol, Color, CursesDisplay
- session: SessionPhase, MultiplexError, TerminalSession
- report: SessionReport

Note: run_terminal is not exported here; import it from terminal.runner.
"""

from terminal.display import Color, CursesDisplay, Display
from terminal.report import SessionReport
from terminal.session import MultiplexError, SessionPhase, TerminalSession
from terminal.state import SessionState, format_elapsed, format_status_line

__all__ = [
    "Color",
    "CursesDisplay",
    "Display",
    "MultiplexError",
    "SessionPhase",
    "SessionReport",
    "SessionState",
    "TerminalSession",
    "format_elapsed",
    "format_status_line",
]
