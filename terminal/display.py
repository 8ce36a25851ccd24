"""Display port for the terminal session.

The session only needs to write a status row, append coloured bytes to a
scrolling transcript, refresh each region, and read keys without blocking.
Display captures that; CursesDisplay provides it on top of curses with a
two-row status region (status text plus a horizontal rule) above the
transcript.
"""

import curses
import logging
import sys
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

STATUS_ROWS = 2


class DisplayError(Exception):
    """Raised when the screen cannot be set up."""

    pass


class Color(Enum):
    """Transcript colour; value is the curses colour pair number."""

    INBOUND = 1  # Device -> screen
    OUTBOUND = 2  # Keyboard -> device


class Display(Protocol):
    """Protocol for the screen used by TerminalSession."""

    def keyboard_fd(self) -> int: ...
    def read_key(self) -> int | None: ...
    def write_status(self, text: str) -> None: ...
    def append(self, data: bytes, color: Color) -> None: ...
    def refresh_status(self) -> None: ...
    def refresh_transcript(self) -> None: ...
    def close(self) -> None: ...


class CursesDisplay:
    """Display implemented with curses windows."""

    def __init__(self) -> None:
        """Take over the terminal.

        Raises:
            DisplayError: If curses cannot set up the screen. The terminal is
                restored before raising.
        """
        try:
            curses.initscr()
        except curses.error as e:
            raise DisplayError(f"Cannot initialise the screen: {e}") from e
        self._closed = False
        try:
            self._setup()
        except curses.error as e:
            curses.endwin()
            raise DisplayError(f"Cannot set up the screen: {e}") from e

        curses.noecho()
        curses.cbreak()
        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("Terminal cannot hide the cursor")

        self._attrs = {color: curses.A_NORMAL for color in Color}
        if curses.has_colors():
            curses.start_color()
            curses.init_pair(Color.INBOUND.value, curses.COLOR_RED, curses.COLOR_BLACK)
            curses.init_pair(Color.OUTBOUND.value, curses.COLOR_GREEN, curses.COLOR_BLACK)
            self._attrs = {color: curses.color_pair(color.value) for color in Color}

        self._status = self.create_region(STATUS_ROWS, 0)
        self._status.hline(1, 0, curses.ACS_HLINE, curses.COLS)
        self._transcript = self.create_region(0, STATUS_ROWS)
        self._transcript.scrollok(True)
        self._transcript.nodelay(True)

    @staticmethod
    def create_region(rows: int, top: int) -> "curses.window":
        """Create a full-width window; rows=0 extends to the bottom."""
        return curses.newwin(rows, 0, top, 0)

    def keyboard_fd(self) -> int:
        return sys.stdin.fileno()

    def read_key(self) -> int | None:
        key = self._transcript.getch()
        return None if key == -1 else key

    def write_status(self, text: str) -> None:
        width = max(0, curses.COLS - 1)
        self._status.move(0, 0)
        self._status.clrtoeol()
        self._status.addnstr(0, 0, text, width)

    def append(self, data: bytes, color: Color) -> None:
        # curses rejects embedded NULs
        text = data.decode("latin-1").replace("\x00", "")
        self._transcript.addstr(text, self._attrs[color])

    def refresh_status(self) -> None:
        self._status.refresh()

    def refresh_transcript(self) -> None:
        self._transcript.refresh()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        del self._status
        del self._transcript
        curses.endwin()
