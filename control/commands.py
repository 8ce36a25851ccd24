"""Mode-change commands understood by the mySmartUSB command interpreter."""

from dataclasses import dataclass
from enum import Enum


class Command(Enum):
    """Mode-change command; value is the protocol byte."""

    DATA_MODE = b"d"
    PROGRAMMER_MODE = b"p"
    QUIET_MODE = b"q"
    RESET_BOARD = b"r"
    RESET_PROGRAMMER = b"R"
    BOARD_ON = b"+"
    BOARD_OFF = b"-"

    @property
    def code(self) -> bytes:
        return self.value

    @property
    def messages(self) -> "CommandMessages":
        return COMMAND_MESSAGES[self]


@dataclass(frozen=True)
class CommandMessages:
    """Human-readable outcome messages for a command."""

    success: str
    failure: str


COMMAND_MESSAGES = {
    Command.DATA_MODE: CommandMessages(
        success="Successfully switched to data mode",
        failure="Unable to switch into data mode",
    ),
    Command.PROGRAMMER_MODE: CommandMessages(
        success="Successfully switched to programming mode",
        failure="Unable to switch into programming mode",
    ),
    Command.QUIET_MODE: CommandMessages(
        success="Successfully switched to quiet mode",
        failure="Unable to switch into quiet mode",
    ),
    Command.RESET_BOARD: CommandMessages(
        success="Successfully reset the board",
        failure="Unable to reset the board",
    ),
    Command.RESET_PROGRAMMER: CommandMessages(
        success="Successfully reset the programmer",
        failure="Unable to reset the programmer",
    ),
    Command.BOARD_ON: CommandMessages(
        success="Successfully turned the board power on",
        failure="Unable to turn the board power on",
    ),
    Command.BOARD_OFF: CommandMessages(
        success="Successfully turned the board power off",
        failure="Unable to turn the board power off",
    ),
}
