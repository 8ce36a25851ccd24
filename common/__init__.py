"""Common modules for mysmartctl.

This package contains code shared by the control and terminal modes:
- protocol: Parity, baud rate table, magic bytes, timing constants
- device: LineSettings, Channel, open_channel and device errors
- cancel: CancellationToken and signal handler installation
- report: Report ABC and ExitCode
"""

from common.cancel import CancellationToken, install_signal_handlers
from common.device import (
    Channel,
    ChannelError,
    ConfigError,
    DeviceError,
    LineSettings,
    OpenError,
    open_channel,
)
from common.protocol import (
    CONTROL_BAUDRATE,
    DEFAULT_BAUDRATE,
    SUPPORTED_BAUDRATES,
    Parity,
    SerialPort,
)
from common.report import ExitCode, Report

__all__ = [
    # Protocol
    "Parity",
    "SerialPort",
    "SUPPORTED_BAUDRATES",
    "DEFAULT_BAUDRATE",
    "CONTROL_BAUDRATE",
    # Device
    "LineSettings",
    "Channel",
    "open_channel",
    # Cancellation
    "CancellationToken",
    "install_signal_handlers",
    # Reporting
    "ExitCode",
    "Report",
    # Exceptions
    "DeviceError",
    "OpenError",
    "ConfigError",
    "ChannelError",
]
