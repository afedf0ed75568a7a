"""Cursor position within the screen grid."""

from __future__ import annotations

from dataclasses import dataclass

from kilo.cli.core.input import Key
from kilo.cli.core.terminal import TerminalSize


@dataclass
class CursorState:
    """0-indexed cursor position, kept inside the screen bounds."""
    x: int = 0
    y: int = 0

    def move(self, key: Key, size: TerminalSize) -> None:
        """Move one cell in the arrow's direction, stopping at the edges."""
        if key is Key.ARROW_LEFT:
            if self.x > 0:
                self.x -= 1
        elif key is Key.ARROW_RIGHT:
            if self.x < size.cols - 1:
                self.x += 1
        elif key is Key.ARROW_UP:
            if self.y > 0:
                self.y -= 1
        elif key is Key.ARROW_DOWN:
            if self.y < size.rows - 1:
                self.y += 1

    def home(self) -> None:
        self.x = 0

    def end(self, size: TerminalSize) -> None:
        self.x = size.cols - 1
