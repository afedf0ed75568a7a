"""Keyboard input decoding with event abstraction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from kilo.cli.core.terminal import ByteStream
from kilo.logging_setup import get_logger

logger = get_logger(__name__)

ESC = b"\x1b"


class Key(Enum):
    """Named key constants."""
    ARROW_UP = auto()
    ARROW_DOWN = auto()
    ARROW_LEFT = auto()
    ARROW_RIGHT = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    HOME = auto()
    END = auto()
    DELETE = auto()
    ESCAPE = auto()


ARROW_KEYS = frozenset({Key.ARROW_UP, Key.ARROW_DOWN, Key.ARROW_LEFT, Key.ARROW_RIGHT})


def ctrl_key(ch: str) -> int:
    """Byte produced by Ctrl+<ch>, e.g. ctrl_key('q') == 0x11."""
    return ord(ch) & 0x1F


@dataclass(frozen=True)
class KeyEvent:
    """One logical key press."""
    key: Optional[Key] = None  # Named key if recognized
    byte: Optional[int] = None  # Raw byte otherwise
    raw: bytes = b""  # Bytes consumed to produce this event

    @property
    def is_byte(self) -> bool:
        return self.key is None and self.byte is not None

    @property
    def is_control(self) -> bool:
        """Check if this is a raw control character (C0 or DEL)."""
        return self.is_byte and (self.byte < 0x20 or self.byte == 0x7F)

    @property
    def char(self) -> Optional[str]:
        """Printable ASCII character, if this is one."""
        if self.is_byte and not self.is_control and self.byte < 0x80:
            return chr(self.byte)
        return None


class SeqState(Enum):
    """Decoder states after an ESC byte."""
    ESC = auto()        # ESC seen
    CSI = auto()        # ESC [
    CSI_PARAM = auto()  # ESC [ digit
    SS3 = auto()        # ESC O
    TRAILER = auto()    # ESC + unknown introducer, one byte left to consume


Transition = Union[SeqState, Key]

INTRODUCERS: dict[bytes, SeqState] = {
    b"[": SeqState.CSI,
    b"O": SeqState.SS3,
}

CSI_FINALS: dict[bytes, Key] = {
    b"A": Key.ARROW_UP,
    b"B": Key.ARROW_DOWN,
    b"C": Key.ARROW_RIGHT,
    b"D": Key.ARROW_LEFT,
    b"H": Key.HOME,
    b"F": Key.END,
}

# ESC [ <digit> ~
TILDE_KEYS: dict[bytes, Key] = {
    b"1": Key.HOME,
    b"3": Key.DELETE,
    b"4": Key.END,
    b"5": Key.PAGE_UP,
    b"6": Key.PAGE_DOWN,
    b"7": Key.HOME,
    b"8": Key.END,
}

SS3_FINALS: dict[bytes, Key] = {
    b"H": Key.HOME,
    b"F": Key.END,
}


def transition(state: SeqState, byte: bytes, param: bytes = b"") -> Transition:
    """
    Advance the escape-sequence decoder by one byte.

    Returns the next state, or a Key once the sequence is complete.
    ``param`` is the digit consumed on entry to CSI_PARAM. Unknown input
    completes the sequence as Key.ESCAPE.
    """
    if state is SeqState.ESC:
        return INTRODUCERS.get(byte, SeqState.TRAILER)
    if state is SeqState.CSI:
        if byte.isdigit():
            return SeqState.CSI_PARAM
        return CSI_FINALS.get(byte, Key.ESCAPE)
    if state is SeqState.CSI_PARAM:
        if byte == b"~":
            return TILDE_KEYS.get(param, Key.ESCAPE)
        return Key.ESCAPE
    if state is SeqState.SS3:
        return SS3_FINALS.get(byte, Key.ESCAPE)
    return Key.ESCAPE


class KeyDecoder:
    """
    Turns the terminal byte stream into KeyEvents.

    Reads exactly the bytes of one key per call: a single byte, or an
    escape sequence. A read timing out inside a sequence yields
    Key.ESCAPE and leaves nothing pending for the next call.
    """

    def __init__(self, stream: ByteStream) -> None:
        self._stream = stream

    def read_key(self) -> KeyEvent:
        """Block (one read timeout at a time) until a key arrives."""
        byte = self._stream.read_byte()
        while not byte:
            byte = self._stream.read_byte()

        if byte != ESC:
            return KeyEvent(byte=byte[0], raw=byte)
        return self._decode_escape()

    def _decode_escape(self) -> KeyEvent:
        raw = bytearray(ESC)
        state: Transition = SeqState.ESC
        param = b""

        while isinstance(state, SeqState):
            byte = self._stream.read_byte()
            if not byte:
                logger.debug("escape sequence %r timed out", bytes(raw))
                return KeyEvent(key=Key.ESCAPE, raw=bytes(raw))
            raw += byte
            next_state = transition(state, byte, param)
            if next_state is SeqState.CSI_PARAM:
                param = byte
            state = next_state

        if state is Key.ESCAPE:
            logger.debug("unrecognized escape sequence %r", bytes(raw))
        return KeyEvent(key=state, raw=bytes(raw))
