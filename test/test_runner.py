"""Unit tests for the control and terminal runners."""

import signal

import pytest

from common.cancel import CancellationToken
from common.device import ConfigError, LineSettings, OpenError
from common.protocol import CONTROL_BAUDRATE, Parity
from common.report import ExitCode
from control import runner as control_runner
from control.commands import Command
from control.handshake import build_frame
from control.report import CommandReport
from terminal.display import DisplayError
from terminal.runner import run_terminal


@pytest.mark.unit
class TestRunControl:
    """Tests for run_control."""

    def _patch_open(self, monkeypatch, port, calls: list) -> None:
        def fake_open(device, settings, timeout=None):
            calls.append((device, settings, timeout))
            return port

        monkeypatch.setattr(control_runner, "open_channel", fake_open)

    def test_success(self, monkeypatch, scripted_port, capsys) -> None:
        port = scripted_port([b"\xf7\xb1 d\r\n"])
        calls: list = []
        self._patch_open(monkeypatch, port, calls)

        code = control_runner.run_control("/dev/ttyUSB0", Command.DATA_MODE, timeout_s=2.0)

        assert code == ExitCode.SUCCESS
        assert bytes(port.written) == build_frame(Command.DATA_MODE)
        assert port.closed
        assert capsys.readouterr().out == "Successfully switched to data mode\n"

    def test_uses_fixed_control_settings(self, monkeypatch, scripted_port) -> None:
        calls: list = []
        self._patch_open(monkeypatch, scripted_port([b"\xf7\xb1 +"]), calls)
        control_runner.run_control("/dev/ttyUSB0", Command.BOARD_ON, timeout_s=1.5)
        (device, settings, timeout), = calls
        assert device == "/dev/ttyUSB0"
        assert settings == LineSettings(CONTROL_BAUDRATE, Parity.NONE, 1)
        assert timeout == 1.5

    def test_zero_timeout_blocks(self, monkeypatch, scripted_port) -> None:
        calls: list = []
        self._patch_open(monkeypatch, scripted_port([b"\xf7\xb1 +"]), calls)
        control_runner.run_control("/dev/ttyUSB0", Command.BOARD_ON, timeout_s=0)
        assert calls[0][2] is None

    def test_handshake_failure(self, monkeypatch, scripted_port, capsys) -> None:
        port = scripted_port([b"?" * 20])
        self._patch_open(monkeypatch, port, [])

        code = control_runner.run_control("/dev/ttyUSB0", Command.BOARD_OFF)

        assert code == ExitCode.HANDSHAKE_FAILED
        assert port.closed
        assert capsys.readouterr().out == "Unable to turn the board power off\n"

    def test_no_reply(self, monkeypatch, scripted_port, capsys) -> None:
        port = scripted_port([])
        self._patch_open(monkeypatch, port, [])
        assert control_runner.run_control("/dev/ttyUSB0", Command.RESET_BOARD) == ExitCode.HANDSHAKE_FAILED
        assert port.closed
        assert capsys.readouterr().out == "Unable to reset the board\n"

    @pytest.mark.parametrize("error", [OpenError("no such device"), ConfigError("bad rate")])
    def test_open_failure(self, monkeypatch, capsys, error) -> None:
        def failing_open(device, settings, timeout=None):
            raise error

        monkeypatch.setattr(control_runner, "open_channel", failing_open)
        code = control_runner.run_control("/dev/ttyUSB9", Command.QUIET_MODE)
        assert code == ExitCode.OPEN_FAILED
        assert capsys.readouterr().out == "Unable to switch into quiet mode\n"


@pytest.mark.unit
class TestCommandReport:
    """Tests for CommandReport."""

    def test_success(self, capsys) -> None:
        report = CommandReport(command=Command.RESET_PROGRAMMER, acknowledged=True)
        report.print()
        assert report.success()
        assert capsys.readouterr().out == "Successfully reset the programmer\n"

    def test_failure(self, capsys) -> None:
        report = CommandReport(command=Command.PROGRAMMER_MODE, acknowledged=False)
        report.print()
        assert not report.success()
        assert capsys.readouterr().out == "Unable to switch into programming mode\n"


@pytest.mark.unit
class TestRunTerminal:
    """Tests for run_terminal with fake display and channel."""

    def test_cancelled_session(self, fake_channel, fake_display, capsys) -> None:
        token = CancellationToken()
        token.cancel()
        channel = fake_channel()
        opened: list = []

        def opener(device, settings):
            opened.append((device, settings))
            return channel

        settings = LineSettings(9600, Parity.EVEN, 2)
        code = run_terminal("/dev/ttyUSB0", settings, lambda: fake_display, opener, token)

        assert code == ExitCode.SUCCESS
        assert opened == [("/dev/ttyUSB0", settings)]
        assert fake_display.close_calls == 1
        assert channel.close_calls == 1
        assert "Session: 00:00:00 connected, 0B received, 0B sent" in capsys.readouterr().out

    def test_open_failure_closes_display(self, fake_display, capsys) -> None:
        def opener(device, settings):
            raise OpenError("Unable to open /dev/ttyUSB9")

        code = run_terminal("/dev/ttyUSB9", LineSettings(9600), lambda: fake_display, opener)

        assert code == ExitCode.OPEN_FAILED
        assert fake_display.close_calls == 1
        assert "Unable to open terminal on /dev/ttyUSB9" in capsys.readouterr().err

    def test_display_failure_skips_open(self, capsys) -> None:
        opened: list = []

        def no_screen():
            raise DisplayError("Cannot initialise the screen: setupterm: could not find terminal")

        code = run_terminal("/dev/ttyUSB0", LineSettings(9600), no_screen, lambda d, s: opened.append(d))

        assert code == ExitCode.OPEN_FAILED
        assert opened == []
        assert "Unable to open terminal on /dev/ttyUSB0: Cannot initialise the screen" in capsys.readouterr().err

    def test_fatal_wait_error(self, monkeypatch, fake_channel, fake_display, capsys) -> None:
        def broken_select(rlist, wlist, xlist, timeout):
            raise OSError(9, "Bad file descriptor")

        monkeypatch.setattr("terminal.session.select.select", broken_select)
        channel = fake_channel()
        code = run_terminal("/dev/ttyUSB0", LineSettings(9600), lambda: fake_display, lambda d, s: channel)

        assert code == ExitCode.IO_ERROR
        assert fake_display.close_calls == 1
        assert channel.close_calls == 1
        assert "Session: FAILED" in capsys.readouterr().out

    def test_restores_signal_handlers(self, fake_channel, fake_display) -> None:
        previous = signal.getsignal(signal.SIGTERM)
        token = CancellationToken()
        token.cancel()
        run_terminal("/dev/ttyUSB0", LineSettings(9600), lambda: fake_display, lambda d, s: fake_channel(), token)
        assert signal.getsignal(signal.SIGTERM) is previous
