"""Cooperative cancellation for mysmartctl.

Signals never interrupt the terminal loop directly. A handler installed by
install_signal_handlers() only flips a CancellationToken, which the loop
polls once per iteration.
"""

import logging
import signal
from collections.abc import Callable, Iterable
from types import FrameType

logger = logging.getLogger(__name__)

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGQUIT)


class CancellationToken:
    """Flag that starts clear and, once set, stays set."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


def install_signal_handlers(
    token: CancellationToken,
    signals: Iterable[signal.Signals] = TERMINATION_SIGNALS,
) -> Callable[[], None]:
    """Cancel token on any of the given signals.

    Returns a function that restores the previously installed handlers.
    """

    def handle_signal(sig: int, _frame: FrameType | None) -> None:
        if not token.cancelled:
            logger.info(f"Signal {signal.Signals(sig).name} received - shutting down")
        token.cancel()

    previous = {}
    for sig in signals:
        previous[sig] = signal.signal(sig, handle_signal)

    def restore() -> None:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    return restore
