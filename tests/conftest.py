"""Shared fixtures: a scripted terminal byte stream and a fake tty device."""

import copy
import logging
import os
import termios
from collections import deque
from typing import Optional

import pytest

from kilo.cli.core import terminal as terminal_module

# Marker for a read that times out with no input
TIMEOUT = None


class ScriptedStream:
    """
    ByteStream fake fed from a script of byte strings and TIMEOUT markers.

    Once the script is used up every read times out, or raises ``error``
    when one is given.
    """

    def __init__(self, *script: Optional[bytes], error: Optional[Exception] = None) -> None:
        self.pending: deque[Optional[bytes]] = deque()
        for chunk in script:
            if chunk is TIMEOUT:
                self.pending.append(None)
            else:
                self.pending.extend(bytes([b]) for b in chunk)
        self.error = error
        self.writes: list[bytes] = []
        self._idle_reads = 0

    def read_byte(self) -> bytes:
        if self.pending:
            item = self.pending.popleft()
            return b"" if item is None else item
        if self.error is not None:
            raise self.error
        self._idle_reads += 1
        if self._idle_reads > 1000:
            raise AssertionError("input script exhausted")
        return b""

    def write(self, data: bytes) -> int:
        self.writes.append(bytes(data))
        return len(data)

    @property
    def output(self) -> bytes:
        return b"".join(self.writes)

    @property
    def remaining(self) -> bytes:
        return b"".join(item for item in self.pending if item is not None)


class FakeTTY:
    """In-memory terminal attributes standing in for termios on a real tty."""

    def __init__(self) -> None:
        cc: list = [b"\x00"] * termios.NCCS
        cc[termios.VMIN] = b"\x01"
        cc[termios.VTIME] = b"\x00"
        self.attrs = [
            termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON,
            termios.OPOST | termios.ONLCR,
            termios.CS7 | termios.CREAD | termios.PARENB,
            termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG | termios.ECHOE,
            termios.B38400,
            termios.B38400,
            cc,
        ]
        self.initial = copy.deepcopy(self.attrs)
        self.set_calls: list[tuple[int, list]] = []
        self.fail_get = False
        self.fail_set = False

    def tcgetattr(self, fd: int) -> list:
        if self.fail_get:
            raise termios.error(25, "Inappropriate ioctl for device")
        return copy.deepcopy(self.attrs)

    def tcsetattr(self, fd: int, when: int, attrs: list) -> None:
        if self.fail_set:
            raise termios.error(5, "Input/output error")
        self.set_calls.append((when, copy.deepcopy(attrs)))
        self.attrs = copy.deepcopy(attrs)


class FakeAtexit:
    """Records exit handlers instead of running them at interpreter exit."""

    def __init__(self) -> None:
        self.handlers: list = []

    def register(self, func):
        self.handlers.append(func)
        return func

    def unregister(self, func) -> None:
        self.handlers = [h for h in self.handlers if h != func]


@pytest.fixture
def tty(monkeypatch: pytest.MonkeyPatch) -> FakeTTY:
    """Route termios calls to a FakeTTY and capture atexit registrations."""
    fake = FakeTTY()
    exit_hooks = FakeAtexit()
    monkeypatch.setattr(termios, "tcgetattr", fake.tcgetattr)
    monkeypatch.setattr(termios, "tcsetattr", fake.tcsetattr)
    monkeypatch.setattr(terminal_module, "atexit", exit_hooks)
    fake.atexit = exit_hooks
    return fake


@pytest.fixture
def screen_24x80(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make the OS report a 24x80 terminal."""
    monkeypatch.setattr(os, "get_terminal_size", lambda fd=1: os.terminal_size((80, 24)))


class TrickleStream(ScriptedStream):
    """ScriptedStream whose writes accept at most ``limit`` bytes each."""

    def __init__(self, *script: Optional[bytes], limit: int = 1) -> None:
        super().__init__(*script)
        self.limit = limit

    def write(self, data: bytes) -> int:
        return super().write(bytes(data[:self.limit])) if self.limit else 0


@pytest.fixture
def kilo_logs(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """caplog that also sees the ``kilo`` logger after setup_logging detached it."""
    monkeypatch.setattr(logging.getLogger("kilo"), "propagate", True)
    caplog.set_level(logging.WARNING, logger="kilo")
    return caplog
