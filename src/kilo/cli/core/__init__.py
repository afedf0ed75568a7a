"""Core TUI infrastructure - terminal I/O, input decoding, frame output."""

from kilo.cli.core.terminal import (
    ByteStream,
    RawMode,
    Terminal,
    TerminalModeState,
    TerminalSize,
    get_cursor_position,
    get_window_size,
)
from kilo.cli.core.input import KeyDecoder, KeyEvent, Key, ctrl_key
from kilo.cli.core.frame import FrameBuffer

__all__ = [
    "ByteStream",
    "RawMode",
    "Terminal",
    "TerminalModeState",
    "TerminalSize",
    "get_cursor_position",
    "get_window_size",
    "KeyDecoder",
    "KeyEvent",
    "Key",
    "ctrl_key",
    "FrameBuffer",
]
