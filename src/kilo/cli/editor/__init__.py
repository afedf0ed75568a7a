"""Editor screen, cursor and event loop."""

from kilo.cli.editor.cursor import CursorState
from kilo.cli.editor.screen import ScreenRenderer
from kilo.cli.editor.session import EditorSession, run_editor

__all__ = [
    "CursorState",
    "ScreenRenderer",
    "EditorSession",
    "run_editor",
]
