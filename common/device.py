"""Serial device setup and raw I/O for mysmartctl.

Contains:
- LineSettings: Baud rate, parity and stop bits of a serial line
- DeviceError, OpenError, ConfigError, ChannelError: Device failures
- Channel: Exclusively owned, raw-mode serial channel
- log_device_info: Log information about a serial device
- open_channel: Open and configure a serial channel
"""

import logging
import os
from dataclasses import dataclass

import serial
import serial.tools.list_ports

from common.protocol import SUPPORTED_BAUDRATES, TRACE, Parity

logger = logging.getLogger(__name__)

_PYSERIAL_PARITY = {
    Parity.NONE: serial.PARITY_NONE,
    Parity.EVEN: serial.PARITY_EVEN,
    Parity.ODD: serial.PARITY_ODD,
}

_PYSERIAL_STOPBITS = {
    1: serial.STOPBITS_ONE,
    2: serial.STOPBITS_TWO,
}


class DeviceError(Exception):
    """Base class for serial device failures."""

    pass


class OpenError(DeviceError):
    """Raised when the device path cannot be opened."""

    pass


class ConfigError(DeviceError):
    """Raised when the device rejects the requested line settings."""

    pass


class ChannelError(DeviceError):
    """Raised when reading from or writing to the channel fails."""

    pass


@dataclass(frozen=True)
class LineSettings:
    """Serial line settings: baud rate, parity and stop-bit count."""

    baudrate: int
    parity: Parity = Parity.NONE
    stopbits: int = 1

    @property
    def mode_string(self) -> str:
        """Render as "<baud>,<parity>,<stopbits>", e.g. "9600,N,1"."""
        return f"{self.baudrate},{self.parity.value},{self.stopbits}"


class Channel:
    """An open serial channel.

    Owned by whichever component opened it. Once closed, the channel cannot
    be reused; close() itself may be called any number of times.
    """

    def __init__(self, ser: serial.Serial, path: str, settings: LineSettings) -> None:
        self._serial = ser
        self.path = path
        self.settings = settings
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def fileno(self) -> int:
        self._check_open()
        return self._serial.fileno()

    def read(self, size: int = 1) -> bytes:
        """Read up to size bytes.

        Blocks until at least one byte is available (or the channel timeout
        expires, in which case b"" is returned), then takes whatever else is
        already buffered without waiting for more.
        """
        self._check_open()
        try:
            data = self._serial.read(1)
            if not data:
                return b""
            waiting = self._serial.in_waiting
            if waiting and size > 1:
                data += self._serial.read(min(size - 1, waiting))
        except serial.SerialException as e:
            raise ChannelError(f"Read from {self.path} failed: {e}") from e
        logger.log(TRACE, f"RX {data.hex(' ')}")
        return data

    def write(self, data: bytes, length: int = 0) -> int:
        """Write exactly length bytes of data, or all of it when length <= 0.

        Returns the number of bytes written.
        """
        self._check_open()
        if length > 0:
            data = data[:length]
        try:
            written = self._serial.write(data) or 0
        except serial.SerialException as e:
            raise ChannelError(f"Write to {self.path} failed: {e}") from e
        logger.log(TRACE, f"TX {data.hex(' ')}")
        return written

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._serial.is_open:
            self._serial.close()
        logger.info(f"Closed {self.path}")

    def _check_open(self) -> None:
        if self._closed:
            raise ChannelError(f"Channel {self.path} is closed")


def log_device_info(device: str) -> None:
    """Log information about a serial device."""
    real_path = os.path.realpath(device)
    if real_path.startswith("/dev/pts/"):
        logger.info(f"Device: {device} -> {real_path} (pty)")
        return

    ports = [p for p in serial.tools.list_ports.comports() if p.device == device]
    if len(ports) != 1:
        logger.info(f"Device: {device} (not in port list)")
        return

    info = ports[0]
    logger.info(f"Device: {info.device}")
    logger.info(f"Description: {info.description}")
    if info.vid is not None:
        logger.info(f"VID:PID: {info.vid:04x}:{info.pid:04x}")


def open_channel(
    device: str,
    settings: LineSettings,
    timeout: float | None = None,
) -> Channel:
    """Open a serial channel in raw mode with the given line settings.

    pyserial opens the path non-blocking without a controlling terminal,
    applies the rate to both directions and configures raw 8-bit mode with
    the receiver enabled and modem-control lines ignored.

    Raises:
        ConfigError: If the rate is unsupported or the line cannot be configured.
        OpenError: If the path cannot be opened or locked.
    """
    if settings.baudrate not in SUPPORTED_BAUDRATES:
        raise ConfigError(f"{settings.baudrate} is not a supported baud rate")
    if settings.stopbits not in _PYSERIAL_STOPBITS:
        raise ConfigError(f"{settings.stopbits} is not a valid stop-bit count")

    log_device_info(device)

    ser = serial.Serial()
    ser.port = device
    try:
        ser.baudrate = settings.baudrate
        ser.bytesize = serial.EIGHTBITS
        ser.parity = _PYSERIAL_PARITY[settings.parity]
        ser.stopbits = _PYSERIAL_STOPBITS[settings.stopbits]
        ser.timeout = timeout
    except ValueError as e:
        raise ConfigError(f"Invalid line settings for {device}: {e}") from e
    ser.xonxoff = False
    ser.rtscts = False
    ser.dsrdtr = False
    ser.exclusive = True
    ser.write_timeout = None

    try:
        ser.open()
    except serial.SerialException as e:
        # pyserial attaches an errno to open/lock failures only
        if e.errno is not None:
            raise OpenError(f"Unable to open {device}: {e}") from e
        raise ConfigError(f"Changing options of {device} failed: {e}") from e

    ser.reset_input_buffer()
    logger.debug(
        "Serial port settings: baudrate=%s, bytesize=%s, parity=%s, stopbits=%s",
        ser.baudrate,
        ser.bytesize,
        ser.parity,
        ser.stopbits,
    )
    return Channel(ser, device, settings)
