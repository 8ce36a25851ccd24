"""Control package for mysmartctl.

Contains the mode-change command handshake:
- commands: Command enum and outcome messages
- handshake: build_frame, expected_response, read_response, send_command
- report: CommandReport

Note: run_control is not exported here; import it from control.runner.
"""

from control.commands import COMMAND_MESSAGES, Command, CommandMessages
from control.handshake import (
    HandshakeError,
    build_frame,
    expected_response,
    read_response,
    response_matches,
    send_command,
)

__all__ = [
    "Command",
    "CommandMessages",
    "COMMAND_MESSAGES",
    "HandshakeError",
    "build_frame",
    "expected_response",
    "read_response",
    "response_matches",
    "send_command",
]
