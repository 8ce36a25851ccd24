"""Interactive terminal session for mysmartctl.

TerminalSession relays bytes between the keyboard and the serial channel
from a single thread. Each iteration waits up to POLL_INTERVAL_S for either
source to become readable, moves whatever is ready, and redraws the status
bar so the connected-time clock advances even when the line is idle.

Phases: STARTING -> RUNNING -> DRAINING -> CLOSED. The runner performs the
start-up work; run() covers the rest and always ends in CLOSED.
"""

import logging
import select
import time
from collections.abc import Callable
from enum import Enum

from common.cancel import CancellationToken
from common.device import Channel
from common.protocol import IO_CHUNK_SIZE, POLL_INTERVAL_S, TRACE
from terminal.display import Color, Display
from terminal.state import SessionState, format_status_line

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    """Lifecycle phase of a terminal session."""

    STARTING = "starting"
    RUNNING = "running"
    DRAINING = "draining"
    CLOSED = "closed"


class MultiplexError(Exception):
    """Raised when waiting for input fails for a reason other than a signal."""

    pass


class TerminalSession:
    """Single-threaded relay between a Display and a Channel.

    The session takes ownership of both: close() tears down the display and
    closes the channel exactly once.
    """

    def __init__(
        self,
        channel: Channel,
        display: Display,
        token: CancellationToken,
        poll_interval_s: float = POLL_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
        wait: Callable | None = None,
    ) -> None:
        self.channel = channel
        self.display = display
        self.token = token
        self.poll_interval_s = poll_interval_s
        self._clock = clock
        self._wait = wait or select.select
        self.state = SessionState(started_at=clock())
        self.phase = SessionPhase.STARTING

    def run(self) -> SessionState:
        """Relay until cancelled. Returns the final session state.

        Raises:
            MultiplexError: If waiting for input fails.
            ChannelError: If reading or writing the channel fails.
        """
        self.phase = SessionPhase.RUNNING
        logger.info(f"Terminal session on {self.channel.path} ({self.channel.settings.mode_string})")
        try:
            while not self.token.cancelled:
                self.step()
        finally:
            self.close()
        return self.state

    def step(self) -> None:
        """Run one iteration: wait, relay ready input, redraw status."""
        serial_fd = self.channel.fileno()
        keyboard_fd = self.display.keyboard_fd()

        try:
            readable, _, _ = self._wait([serial_fd, keyboard_fd], [], [], self.poll_interval_s)
        except InterruptedError:
            readable = []
        except OSError as e:
            raise MultiplexError(f"select() failed: {e}") from e

        appended = False
        if serial_fd in readable:
            appended |= self._relay_inbound()
        if keyboard_fd in readable:
            appended |= self._relay_outbound()
        if appended:
            self.display.refresh_transcript()

        self.display.write_status(format_status_line(self.state, self.channel.settings, self._clock()))
        self.display.refresh_status()

    def close(self) -> None:
        if self.phase in (SessionPhase.DRAINING, SessionPhase.CLOSED):
            return
        self.phase = SessionPhase.DRAINING
        try:
            self.display.close()
        finally:
            self.channel.close()
            self.phase = SessionPhase.CLOSED
            logger.info(self.state.summary(self._clock()))

    def _relay_inbound(self) -> bool:
        data = self.channel.read(IO_CHUNK_SIZE)
        if not data:
            return False
        self.state.record_rx(len(data))
        self.display.append(data, Color.INBOUND)
        return True

    def _relay_outbound(self) -> bool:
        buffer = bytearray()
        while len(buffer) < IO_CHUNK_SIZE:
            key = self.display.read_key()
            if key is None:
                break
            if key > 0xFF:
                logger.log(TRACE, f"Ignoring special key {key}")
                continue
            buffer.append(key)
        if not buffer:
            return False

        data = bytes(buffer)
        written = self.channel.write(data, len(data))
        self.state.record_tx(written)
        self.display.append(data[:written], Color.OUTBOUND)
        return True
