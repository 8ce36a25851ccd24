"""Command handshake for mysmartctl.

The host sends an 8-byte frame:
  [7-byte magic E6 B5 BA B9 B2 B3 A9][command byte]

The device acknowledges somewhere in its reply with:
  [F7 B1][space][command byte]

The reply is not length-framed, so up to 15 bytes are collected (stopping
early at CRLF) and searched for the acknowledgement as a substring.
"""

import logging

from common.protocol import (
    FRAME_MAGIC,
    RESPONSE_MAGIC,
    RESPONSE_TERMINATOR,
    RESPONSE_WINDOW,
    SerialPort,
)
from control.commands import Command

logger = logging.getLogger(__name__)


class HandshakeError(Exception):
    """Raised when the device does not acknowledge a command."""

    pass


def build_frame(command: Command) -> bytes:
    """Build the outbound frame for a command."""
    return FRAME_MAGIC + command.code


def expected_response(command: Command) -> bytes:
    """Return the acknowledgement the device sends for a command."""
    return RESPONSE_MAGIC + command.code


def read_response(port: SerialPort, limit: int = RESPONSE_WINDOW) -> bytes:
    """Collect the device reply.

    Stops when a read returns nothing, limit bytes have been collected, or
    the collected bytes contain CRLF.
    """
    buffer = bytearray()
    while len(buffer) < limit:
        chunk = port.read(limit - len(buffer))
        if not chunk:
            break
        buffer += chunk
        if RESPONSE_TERMINATOR in buffer:
            break
    return bytes(buffer)


def response_matches(response: bytes, command: Command) -> bool:
    """Return True if the acknowledgement appears anywhere in response."""
    return expected_response(command) in response


def send_command(port: SerialPort, command: Command) -> bytes:
    """Send a command and validate the device acknowledgement.

    Returns the raw reply on success.
    Raises HandshakeError if the acknowledgement is missing.
    """
    frame = build_frame(command)
    written = port.write(frame, len(frame))
    logger.debug(f"Sent {command.name} frame ({written} bytes)")

    response = read_response(port)
    logger.debug(f"Received {len(response)} bytes: {response!r}")

    if not response_matches(response, command):
        raise HandshakeError(
            f"No acknowledgement for {command.name} "
            f"(expected {expected_response(command).hex(' ')}, got {response.hex(' ') or 'nothing'})"
        )

    logger.info(f"Device acknowledged {command.name}")
    return response
