"""Command reporting for mysmartctl.

Contains:
- CommandReport: Report after a mode-change command completes
"""

from dataclasses import dataclass

from common.report import Report
from control.commands import Command


@dataclass
class CommandReport(Report):
    """Report after a mode-change command.

    When acknowledged=False, error should explain why.
    """

    command: Command
    acknowledged: bool
    error: Exception | None = None

    def print(self) -> None:
        """Print the command's success or failure message."""
        messages = self.command.messages
        if self.acknowledged:
            print(messages.success)
        else:
            print(messages.failure)

    def success(self) -> bool:
        """Return True if the device acknowledged the command."""
        return self.acknowledged
