"""
kilo: terminal core of a character-mode screen editor

Raw-mode terminal handling, key decoding, cursor tracking and flicker-free
frame rendering.

Quick Start:
    $ kilo
    $ python -m kilo --log-file /tmp/kilo.log --log-level DEBUG

Features:
    - Raw mode with guaranteed restoration on every exit path
    - Escape sequence decoding for arrow, Home/End, Page and Delete keys
    - Terminal geometry probing with a cursor-report fallback
    - One coalesced write per frame
"""

__version__ = "0.0.1"

import logging

logging.getLogger("kilo").addHandler(logging.NullHandler())

from kilo.config import EditorConfig
from kilo.errors import KiloError, TerminalError

__all__ = [
    "__version__",
    "EditorConfig",
    "KiloError",
    "TerminalError",
]
