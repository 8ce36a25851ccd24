"""Terminal runner for mysmartctl.

Contains run_terminal() which sets up signal handling, the display and the
channel, runs a TerminalSession until a termination signal arrives, and
returns an exit code.
"""

import logging
import sys
import time
from collections.abc import Callable

from common.cancel import CancellationToken, install_signal_handlers
from common.device import Channel, ChannelError, DeviceError, LineSettings, open_channel
from common.report import ExitCode
from terminal.display import CursesDisplay, Display, DisplayError
from terminal.report import SessionReport
from terminal.session import MultiplexError, TerminalSession

logger = logging.getLogger(__name__)


def run_terminal(
    device: str,
    settings: LineSettings,
    display_factory: Callable[[], Display] = CursesDisplay,
    opener: Callable[[str, LineSettings], Channel] = open_channel,
    token: CancellationToken | None = None,
) -> int:
    """Run an interactive terminal session. Returns exit code.

    SIGINT, SIGTERM and SIGQUIT end the session; previous handlers are
    restored on return.
    """
    if token is None:
        token = CancellationToken()
    restore_signals = install_signal_handlers(token)

    try:
        try:
            display = display_factory()
        except DisplayError as e:
            logger.error(str(e))
            print(f"Unable to open terminal on {device}: {e}", file=sys.stderr)
            return ExitCode.OPEN_FAILED

        try:
            channel = opener(device, settings)
        except DeviceError as e:
            display.close()
            logger.error(str(e))
            print(f"Unable to open terminal on {device}: {e}", file=sys.stderr)
            return ExitCode.OPEN_FAILED

        session = TerminalSession(channel, display, token)
        try:
            state = session.run()
        except (MultiplexError, ChannelError) as e:
            logger.error(f"Terminal session failed: {e}")
            SessionReport(state=session.state, ended_at=time.monotonic(), error=e).print()
            return ExitCode.IO_ERROR

        SessionReport(state=state, ended_at=time.monotonic()).print()
        return ExitCode.SUCCESS

    finally:
        restore_signals()
