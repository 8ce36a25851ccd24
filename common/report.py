"""Reporting abstractions for mysmartctl.

Contains:
- Report ABC: Base class for all reports
- ExitCode: Process exit codes
"""

from abc import ABC, abstractmethod
from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for mysmartctl operations."""

    SUCCESS = 0
    OPEN_FAILED = 1  # Device unreachable or line settings rejected
    USAGE = 2  # Argument errors (argparse exits with 2)
    HANDSHAKE_FAILED = 3  # Device did not acknowledge the command
    IO_ERROR = 4  # Fatal I/O error during a terminal session


class Report(ABC):
    """Abstract base class for outcome reports."""

    @abstractmethod
    def print(self) -> None:
        """Print the report to stdout."""
        pass

    @abstractmethod
    def success(self) -> bool:
        """Return True if the report indicates success."""
        pass
