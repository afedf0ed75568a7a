"""Low-level terminal operations - raw mode, byte I/O and geometry."""

from __future__ import annotations

import atexit
import os
import re
import termios
from dataclasses import dataclass
from typing import Optional, Protocol

from kilo.errors import TerminalError
from kilo.logging_setup import get_logger

logger = get_logger(__name__)

# Escape command vocabulary
CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CLEAR_LINE = b"\x1b[K"
REQUEST_CURSOR_POSITION = b"\x1b[6n"
CURSOR_TO_BOTTOM_RIGHT = b"\x1b[999C\x1b[999B"

# Longest cursor position report we are willing to read
CURSOR_REPORT_LIMIT = 31

_CURSOR_REPORT = re.compile(rb"\x1b\[(\d+);(\d+)")


def move_cursor(row: int, col: int) -> bytes:
    """Absolute cursor move (1-indexed)."""
    return b"\x1b[%d;%dH" % (row, col)


@dataclass(frozen=True)
class TerminalSize:
    """Terminal dimensions."""
    rows: int
    cols: int

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Terminal size must be positive, got {self.rows}x{self.cols}")


class ByteStream(Protocol):
    """The byte-level terminal device the editor talks to."""

    def read_byte(self) -> bytes:
        """Return one byte, or b"" if the read timed out."""
        ...

    def write(self, data: bytes) -> int:
        """Write data, returning the number of bytes written."""
        ...


class Terminal:
    """
    Unbuffered terminal I/O on raw file descriptors.

    Uses os.read()/os.write() to bypass Python's I/O buffering. In raw mode
    with VMIN=0 a read returns b"" once VTIME expires without input.
    """

    def __init__(self, input_fd: int = 0, output_fd: int = 1) -> None:
        self.input_fd = input_fd
        self.output_fd = output_fd

    def read_byte(self) -> bytes:
        try:
            return os.read(self.input_fd, 1)
        except BlockingIOError:
            # EAGAIN: treated like a timeout
            return b""
        except OSError as e:
            raise TerminalError("read", e) from e

    def write(self, data: bytes) -> int:
        try:
            return os.write(self.output_fd, data)
        except OSError as e:
            raise TerminalError("write", e) from e


@dataclass(frozen=True)
class TerminalModeState:
    """Snapshot of a terminal's line-discipline attributes (termios)."""
    iflag: int
    oflag: int
    cflag: int
    lflag: int
    ispeed: int
    ospeed: int
    cc: tuple

    @classmethod
    def from_attrs(cls, attrs: list) -> TerminalModeState:
        iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
        return cls(iflag, oflag, cflag, lflag, ispeed, ospeed, tuple(cc))

    def to_attrs(self) -> list:
        """Fresh attribute list in the layout termios.tcsetattr expects."""
        return [
            self.iflag, self.oflag, self.cflag, self.lflag,
            self.ispeed, self.ospeed, list(self.cc),
        ]

    def raw(self, read_timeout: int = 1) -> list:
        """
        Attributes for raw mode derived from this state.

        Disables echo, canonical input, extended input processing, signal
        characters, output post-processing and the BRKINT/ICRNL/INPCK/
        ISTRIP/IXON input transformations. Characters are 8 bits wide. Reads
        return as soon as a byte arrives, or after ``read_timeout``
        deciseconds with nothing.
        """
        attrs = self.to_attrs()
        attrs[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK
                      | termios.ISTRIP | termios.IXON)
        attrs[1] &= ~termios.OPOST
        attrs[2] = (attrs[2] & ~termios.CSIZE) | termios.CS8
        attrs[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        attrs[6][termios.VMIN] = 0
        attrs[6][termios.VTIME] = read_timeout
        return attrs


class RawMode:
    """
    Raw mode guard for one terminal descriptor.

    The original attributes are captured on enable() and restored by
    disable(). disable() also runs at interpreter exit, and on leaving a
    ``with`` block for any reason.
    """

    def __init__(self, fd: int = 0, read_timeout: int = 1) -> None:
        self.fd = fd
        self.read_timeout = read_timeout
        self.original: Optional[TerminalModeState] = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def enable(self) -> None:
        if self._active:
            return

        try:
            self.original = TerminalModeState.from_attrs(termios.tcgetattr(self.fd))
        except (termios.error, OSError) as e:
            raise TerminalError("tcgetattr", e) from e

        atexit.register(self.disable)
        self._active = True

        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, self.original.raw(self.read_timeout))
        except (termios.error, OSError) as e:
            self.disable()
            raise TerminalError("tcsetattr", e) from e
        logger.debug("raw mode enabled on fd %d (VTIME=%d)", self.fd, self.read_timeout)

    def disable(self) -> None:
        if not self._active:
            return

        self._active = False
        atexit.unregister(self.disable)
        if self.original is None:
            return
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, self.original.to_attrs())
        except (termios.error, OSError) as e:
            raise TerminalError("tcsetattr", e) from e
        logger.debug("raw mode disabled on fd %d", self.fd)

    def __enter__(self) -> RawMode:
        self.enable()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.disable()


def get_cursor_position(stream: ByteStream) -> TerminalSize:
    """
    Ask the terminal where the cursor is (ESC[6n) and parse the reply.

    The reply has the form ESC [ rows ; cols R and is read one byte at a time
    until the R terminator, a read timeout, or CURSOR_REPORT_LIMIT bytes.
    """
    if stream.write(REQUEST_CURSOR_POSITION) != len(REQUEST_CURSOR_POSITION):
        raise TerminalError("getCursorPosition", OSError("short write"))

    reply = bytearray()
    while len(reply) < CURSOR_REPORT_LIMIT:
        byte = stream.read_byte()
        if not byte or byte == b"R":
            break
        reply += byte

    match = _CURSOR_REPORT.match(bytes(reply))
    if match is None:
        raise TerminalError("getCursorPosition", ValueError(f"bad cursor report {bytes(reply)!r}"))

    rows, cols = int(match.group(1)), int(match.group(2))
    if rows <= 0 or cols <= 0:
        raise TerminalError("getCursorPosition", ValueError(f"bad cursor report {bytes(reply)!r}"))
    return TerminalSize(rows, cols)


def get_window_size(stream: ByteStream, fd: int = 1) -> TerminalSize:
    """
    Get the terminal dimensions.

    Asks the OS first (TIOCGWINSZ). If that fails or reports a zero size,
    pushes the cursor to the bottom-right corner and reads its position back.
    """
    try:
        size = os.get_terminal_size(fd)
        if size.lines > 0 and size.columns > 0:
            return TerminalSize(size.lines, size.columns)
        logger.info("terminal reported %dx%d, probing cursor", size.lines, size.columns)
    except OSError as e:
        logger.info("TIOCGWINSZ failed (%s), probing cursor", e)

    if stream.write(CURSOR_TO_BOTTOM_RIGHT) != len(CURSOR_TO_BOTTOM_RIGHT):
        raise TerminalError("getWindowSize", OSError("short write"))
    return get_cursor_position(stream)
