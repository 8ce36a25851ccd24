"""Control runner for mysmartctl.

Contains run_control() which opens the device at the fixed control
configuration, performs the command handshake and reports the outcome,
returning an exit code.
"""

import logging

from common.device import DeviceError, LineSettings, open_channel
from common.protocol import CONTROL_BAUDRATE, DEFAULT_RESPONSE_TIMEOUT_S, Parity
from common.report import ExitCode
from control.commands import Command
from control.handshake import HandshakeError, send_command
from control.report import CommandReport

logger = logging.getLogger(__name__)

# Independent of any terminal options
CONTROL_SETTINGS = LineSettings(baudrate=CONTROL_BAUDRATE, parity=Parity.NONE, stopbits=1)


def run_control(
    device: str,
    command: Command,
    timeout_s: float = DEFAULT_RESPONSE_TIMEOUT_S,
) -> int:
    """Send one command to the device. Returns exit code.

    A timeout_s of 0 waits indefinitely for the device reply.
    """
    try:
        channel = open_channel(device, CONTROL_SETTINGS, timeout=timeout_s or None)
    except DeviceError as e:
        logger.error(str(e))
        CommandReport(command=command, acknowledged=False, error=e).print()
        return ExitCode.OPEN_FAILED

    try:
        logger.info(f"Sending {command.name} to {device}")
        send_command(channel, command)
    except HandshakeError as e:
        logger.warning(f"Handshake failed: {e}")
        CommandReport(command=command, acknowledged=False, error=e).print()
        return ExitCode.HANDSHAKE_FAILED
    except DeviceError as e:
        logger.error(str(e))
        CommandReport(command=command, acknowledged=False, error=e).print()
        return ExitCode.HANDSHAKE_FAILED
    finally:
        channel.close()

    CommandReport(command=command, acknowledged=True).print()
    return ExitCode.SUCCESS
