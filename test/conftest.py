"""pytest configuration and fixtures for mysmartctl tests.

Provides:
- ScriptedPort: Mock serial port that replays canned reply chunks
- FakeChannel: Channel stand-in with a fileno, counters and close tracking
- FakeDisplay: Display stand-in recording status, transcript and refreshes
- ScriptedWait: select() stand-in returning canned readiness results
- pty fixture for integration tests against a real pyserial channel
- Markers for unit vs integration tests
"""

import os
import pty
import sys
from collections.abc import Callable, Generator

import pytest

from common.device import LineSettings
from terminal.display import Color

SERIAL_FD = 100
KEYBOARD_FD = 0


class ScriptedPort:
    """Mock serial port for handshake tests.

    Writes are recorded. Each read returns the next reply chunk, trimmed to
    the requested size; the remainder of a trimmed chunk is kept for the
    following read. Once the script is exhausted, reads return b"".
    """

    def __init__(self, chunks: list[bytes] | None = None) -> None:
        self.chunks = list(chunks or [])
        self.written = bytearray()
        self.read_sizes: list[int] = []
        self.closed = False

    def write(self, data: bytes, length: int = 0) -> int:
        if length > 0:
            data = data[:length]
        self.written += data
        return len(data)

    def read(self, size: int = 1) -> bytes:
        self.read_sizes.append(size)
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        if len(chunk) > size:
            self.chunks.insert(0, chunk[size:])
            chunk = chunk[:size]
        return chunk

    def close(self) -> None:
        self.closed = True


class FakeChannel(ScriptedPort):
    """Channel stand-in for terminal session tests."""

    def __init__(
        self,
        chunks: list[bytes] | None = None,
        settings: LineSettings | None = None,
        write_limit: int | None = None,
    ) -> None:
        super().__init__(chunks)
        self.path = "/dev/ttyFAKE0"
        self.settings = settings or LineSettings(baudrate=9600)
        self.write_limit = write_limit
        self.close_calls = 0

    def fileno(self) -> int:
        return SERIAL_FD

    def write(self, data: bytes, length: int = 0) -> int:
        if length > 0:
            data = data[:length]
        if self.write_limit is not None:
            data = data[: self.write_limit]
        self.written += data
        return len(data)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakeDisplay:
    """Display stand-in that records everything the session does."""

    def __init__(self, keys: list[int] | None = None) -> None:
        self.keys = list(keys or [])
        self.status: list[str] = []
        self.transcript: list[tuple[bytes, Color]] = []
        self.status_refreshes = 0
        self.transcript_refreshes = 0
        self.close_calls = 0

    def keyboard_fd(self) -> int:
        return KEYBOARD_FD

    def read_key(self) -> int | None:
        if not self.keys:
            return None
        return self.keys.pop(0)

    def write_status(self, text: str) -> None:
        self.status.append(text)

    def append(self, data: bytes, color: Color) -> None:
        self.transcript.append((data, color))

    def refresh_status(self) -> None:
        self.status_refreshes += 1

    def refresh_transcript(self) -> None:
        self.transcript_refreshes += 1

    def close(self) -> None:
        self.close_calls += 1


class ScriptedWait:
    """select() stand-in.

    Each call pops the next result: a list of ready fds, or an exception
    instance to raise. on_call, if given, runs after each call with the
    call count, which lets tests cancel the session at a chosen iteration.
    """

    def __init__(
        self,
        results: list[list[int] | BaseException],
        on_call: Callable[[int], None] | None = None,
    ) -> None:
        self.results = list(results)
        self.on_call = on_call
        self.calls: list[tuple[list[int], float]] = []

    def __call__(self, rlist, wlist, xlist, timeout):
        self.calls.append((list(rlist), timeout))
        if self.on_call is not None:
            self.on_call(len(self.calls))
        result = self.results.pop(0) if self.results else []
        if isinstance(result, BaseException):
            raise result
        return [fd for fd in rlist if fd in result], [], []


class FakeClock:
    """Monotonic clock stand-in advanced by tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test (requires a pty)")


@pytest.fixture
def fake_display() -> FakeDisplay:
    return FakeDisplay()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scripted_port() -> Callable[..., ScriptedPort]:
    """Factory for ScriptedPort instances."""
    return ScriptedPort


@pytest.fixture
def fake_channel() -> Callable[..., FakeChannel]:
    """Factory for FakeChannel instances."""
    return FakeChannel


@pytest.fixture
def fake_display_factory() -> Callable[..., FakeDisplay]:
    """Factory for FakeDisplay instances."""
    return FakeDisplay


@pytest.fixture
def scripted_wait() -> Callable[..., ScriptedWait]:
    """Factory for ScriptedWait instances."""
    return ScriptedWait


@pytest.fixture
def pty_device() -> Generator[tuple[int, str], None, None]:
    """Create a pty pair.

    Yields (master_fd, slave_path). Bytes written to master_fd can be read
    from a channel opened on slave_path and vice versa.

    Requires: Linux or macOS.
    """
    if sys.platform not in ("linux", "darwin"):
        pytest.skip("pty fixture requires Linux or macOS")

    master_fd, slave_fd = pty.openpty()
    slave_path = os.ttyname(slave_fd)
    try:
        yield master_fd, slave_path
    finally:
        os.close(slave_fd)
        os.close(master_fd)
