"""Full-screen frame rendering."""

from __future__ import annotations

from kilo import __version__
from kilo.cli.core.frame import FrameBuffer
from kilo.cli.core.terminal import (
    ByteStream,
    CLEAR_LINE,
    CURSOR_HOME,
    HIDE_CURSOR,
    SHOW_CURSOR,
    TerminalSize,
    move_cursor,
)
from kilo.cli.editor.cursor import CursorState

WELCOME = f"Kilo editor -- version {__version__}"
ROW_MARKER = b"~"


class ScreenRenderer:
    """
    Draws the editor screen.

    Every row starts with a ``~`` marker; the row a third of the way down
    carries the centered welcome banner. Each refresh is built in a fresh
    FrameBuffer and written with a single write, with the cursor hidden
    while the frame is drawn.
    """

    def __init__(self, stream: ByteStream, size: TerminalSize) -> None:
        self.stream = stream
        self.size = size

    @property
    def banner_row(self) -> int:
        return self.size.rows // 3

    def welcome_line(self) -> bytes:
        """Banner truncated to the screen width and centered."""
        welcome = WELCOME.encode("ascii")[:self.size.cols]
        padding = (self.size.cols - len(welcome)) // 2

        line = bytearray()
        if padding:
            line += ROW_MARKER
            padding -= 1
        line += b" " * padding
        line += welcome
        return bytes(line)

    def draw_rows(self) -> bytes:
        """Row content of a frame: markers, banner, line clears and breaks."""
        rows = bytearray()
        for y in range(self.size.rows):
            if y == self.banner_row:
                rows += self.welcome_line()
            else:
                rows += ROW_MARKER

            rows += CLEAR_LINE
            if y < self.size.rows - 1:
                rows += b"\r\n"
        return bytes(rows)

    def render(self, cursor: CursorState) -> FrameBuffer:
        """Build the frame for the current state without writing it."""
        frame = FrameBuffer()
        frame.append(HIDE_CURSOR)
        frame.append(CURSOR_HOME)
        frame.append(self.draw_rows())
        frame.append(move_cursor(cursor.y + 1, cursor.x + 1))
        frame.append(SHOW_CURSOR)
        return frame

    def refresh(self, cursor: CursorState) -> int:
        """Render and write one frame."""
        return self.render(cursor).flush(self.stream)
