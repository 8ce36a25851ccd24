"""Session reporting for mysmartctl.

Contains:
- SessionReport: Report after a terminal session ends
"""

from dataclasses import dataclass

from common.report import Report
from terminal.state import SessionState


@dataclass
class SessionReport(Report):
    """Report after a terminal session ends.

    error is set when the session was ended by a fatal I/O error rather
    than by a termination signal.
    """

    state: SessionState
    ended_at: float
    error: Exception | None = None

    def print(self) -> None:
        """Print the session report."""
        if self.error is not None:
            print(f"Session: FAILED ({self.error})")
        print(self.state.summary(self.ended_at))

    def success(self) -> bool:
        """Return True if the session ended cleanly."""
        return self.error is None
