"""Terminal session state and status line formatting.

Contains:
- SessionState: Byte counters and session start time
- format_elapsed: Seconds as HH:MM:SS
- format_status_line: The single-row status bar
"""

import time
from dataclasses import dataclass, field

from common.device import LineSettings

# Status bar column offsets
ELAPSED_LABEL_COL = 0
COUNTERS_LABEL_COL = 24


@dataclass
class SessionState:
    """Counters for one terminal session; never persisted."""

    rx_bytes: int = 0
    tx_bytes: int = 0
    started_at: float = field(default_factory=time.monotonic)

    def record_rx(self, count: int) -> None:
        if count > 0:
            self.rx_bytes += count

    def record_tx(self, count: int) -> None:
        if count > 0:
            self.tx_bytes += count

    def elapsed_s(self, now: float) -> int:
        """Whole seconds connected as of now."""
        return max(0, int(now - self.started_at))

    def summary(self, now: float) -> str:
        return (
            f"Session: {format_elapsed(self.elapsed_s(now))} connected, "
            f"{self.rx_bytes}B received, {self.tx_bytes}B sent"
        )


def format_elapsed(seconds: int) -> str:
    """Format seconds as HH:MM:SS, e.g. 3725 -> "01:02:05"."""
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_status_line(state: SessionState, settings: LineSettings, now: float) -> str:
    """Render the status bar.

    "Connected: HH:MM:SS" starts at column 0 and "RX/TX: <n>B/<m>B" at
    column 24; the mode follows the counters after three spaces.
    """
    connected = f"Connected: {format_elapsed(state.elapsed_s(now))}"
    counters = f"RX/TX: {state.rx_bytes}B/{state.tx_bytes}B   "
    return f"{connected:<{COUNTERS_LABEL_COL - ELAPSED_LABEL_COL}}{counters}Mode: {settings.mode_string}"
