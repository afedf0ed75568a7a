"""Editor session: the read-key, update, render loop."""

from __future__ import annotations

import signal
import threading
from contextlib import suppress
from typing import Optional

from rich.console import Console
from rich.markup import escape

from kilo.cli.core.input import ARROW_KEYS, Key, KeyDecoder, KeyEvent, ctrl_key
from kilo.cli.core.terminal import (
    CLEAR_SCREEN,
    CURSOR_HOME,
    ByteStream,
    RawMode,
    Terminal,
    TerminalSize,
    get_window_size,
)
from kilo.cli.editor.cursor import CursorState
from kilo.cli.editor.screen import ScreenRenderer
from kilo.config import EditorConfig, default_config
from kilo.errors import TerminalError
from kilo.logging_setup import get_logger

logger = get_logger(__name__)


class EditorSession:
    """
    State for one editor run.

    Owns the terminal stream, screen geometry, cursor and configuration
    that the loop works on. Geometry is fixed for the session.
    """

    def __init__(
        self,
        stream: ByteStream,
        size: TerminalSize,
        config: EditorConfig = default_config,
    ) -> None:
        self.stream = stream
        self.size = size
        self.config = config
        self.cursor = CursorState()
        self.decoder = KeyDecoder(stream)
        self.screen = ScreenRenderer(stream, size)
        self.quit_byte = ctrl_key(config.quit_key)

    def refresh_screen(self) -> None:
        self.screen.refresh(self.cursor)

    def clear_screen(self) -> None:
        self.stream.write(CLEAR_SCREEN + CURSOR_HOME)

    def process_keypress(self, event: KeyEvent) -> bool:
        """Apply one key to the session. Returns False when the user quits."""
        if event.is_byte and event.byte == self.quit_byte:
            self.clear_screen()
            return False

        if event.key is Key.HOME:
            self.cursor.home()
        elif event.key is Key.END:
            self.cursor.end(self.size)
        elif event.key in (Key.PAGE_UP, Key.PAGE_DOWN):
            direction = Key.ARROW_UP if event.key is Key.PAGE_UP else Key.ARROW_DOWN
            for _ in range(self.size.rows):
                self.cursor.move(direction, self.size)
        elif event.key in ARROW_KEYS:
            self.cursor.move(event.key, self.size)
        # Anything else has nowhere to go until there is a text buffer
        return True

    def run(self) -> int:
        """Main loop. Returns the exit status."""
        while True:
            self.refresh_screen()
            if not self.process_keypress(self.decoder.read_key()):
                logger.info("quit requested")
                return 0


def _terminate(signum: int, frame: object) -> None:
    raise SystemExit(1)


def run_editor(
    config: EditorConfig = default_config,
    stream: Optional[ByteStream] = None,
) -> int:
    """
    Run the editor on the controlling terminal.

    Raw mode is held for the duration of the loop and restored on every way
    out of it. A fatal terminal error is reported after restoration: the
    screen is cleared, the diagnostic goes to stderr and 1 is returned.
    """
    stream = stream or Terminal(config.input_fd, config.output_fd)

    previous_handler = None
    if threading.current_thread() is threading.main_thread():
        previous_handler = signal.signal(signal.SIGTERM, _terminate)

    try:
        with RawMode(config.input_fd, config.read_timeout):
            size = get_window_size(stream, config.output_fd)
            logger.info("screen is %dx%d", size.rows, size.cols)
            return EditorSession(stream, size, config).run()
    except TerminalError as e:
        logger.error("fatal terminal error: %s", e)
        # Best effort: the device may be the thing that failed
        with suppress(TerminalError):
            stream.write(CLEAR_SCREEN + CURSOR_HOME)
        Console(stderr=True).print(f"[red]kilo: {escape(str(e))}[/]", highlight=False)
        return 1
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGTERM, previous_handler)
