"""Protocol definitions for mysmartctl.

Contains:
- Parity enum and the supported baud rate table
- SerialPort Protocol for type checking
- Handshake magic bytes and buffer sizes
- Timing constants and environment overrides
- Logging configuration
"""

import logging
import os
from enum import Enum
from typing import Protocol

# TRACE logging level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

logger = logging.getLogger(__name__)


class Parity(Enum):
    """Parity mode of the serial line; value is the status-line character."""

    NONE = "N"
    EVEN = "E"
    ODD = "O"

    @classmethod
    def from_name(cls, name: str) -> "Parity":
        """Look up parity by its CLI name (none/even/odd), case-insensitive."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"{name} is not a valid parity")


class SerialPort(Protocol):
    """Protocol for serial port operations needed by the handshake."""

    def write(self, data: bytes, length: int = ..., /) -> int: ...
    def read(self, size: int = ..., /) -> bytes: ...


# Baud rates the device accepts (standard termios rates up to 230400)
SUPPORTED_BAUDRATES = (
    50,
    75,
    110,
    134,
    150,
    200,
    300,
    600,
    1200,
    1800,
    2400,
    4800,
    9600,
    19200,
    38400,
    57600,
    115200,
    230400,
)
DEFAULT_BAUDRATE = 9600

# The command interpreter only listens at 19200 8N1
CONTROL_BAUDRATE = 19200

# Handshake framing
FRAME_MAGIC = b"\xe6\xb5\xba\xb9\xb2\xb3\xa9"
RESPONSE_MAGIC = b"\xf7\xb1 "
RESPONSE_TERMINATOR = b"\r\n"
RESPONSE_WINDOW = 15  # Accumulator holds 16 bytes, 15 usable

# Terminal loop
POLL_INTERVAL_S = 1.0
IO_CHUNK_SIZE = 128


def env_timeout(name: str, default: float) -> float:
    """Read a non-negative timeout in seconds from the environment.

    Unset, non-numeric and negative values fall back to default.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number, using {default}")
        return default
    if not value >= 0:
        logger.warning(f"Ignoring {name}={raw!r}: must be >= 0, using {default}")
        return default
    return value


# Handshake response timeout, 0 blocks until the device answers
DEFAULT_RESPONSE_TIMEOUT_S = env_timeout("MYSMARTCTL_TIMEOUT", 2.0)

# Log level override (name or number), applied on top of -V flags
LOG_LEVEL_OVERRIDE = os.environ.get("MYSMARTCTL_LOG_LEVEL")
