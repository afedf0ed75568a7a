"""Per-frame output batching."""

from __future__ import annotations

from typing import Optional

from kilo.cli.core.terminal import ByteStream
from kilo.logging_setup import get_logger

logger = get_logger(__name__)


class FrameBuffer:
    """
    Accumulates one frame of terminal output for a single write.

    Writing many small fragments straight to the terminal shows up as
    flicker; the whole frame goes out in one write instead. A buffer is
    good for exactly one frame: flush() releases it.
    """

    def __init__(self) -> None:
        self._data: Optional[bytearray] = bytearray()

    def __len__(self) -> int:
        return len(self._data) if self._data is not None else 0

    @property
    def flushed(self) -> bool:
        return self._data is None

    def getvalue(self) -> bytes:
        """Frame content accumulated so far."""
        if self._data is None:
            raise RuntimeError("FrameBuffer already flushed")
        return bytes(self._data)

    def append(self, data: bytes) -> None:
        """Append bytes; if memory runs out the fragment is dropped."""
        if self._data is None:
            raise RuntimeError("FrameBuffer already flushed")
        try:
            self._data += data
        except MemoryError:
            logger.warning("dropped %d bytes of frame output: out of memory", len(data))

    def flush(self, stream: ByteStream) -> int:
        """Write the whole frame and release the buffer, resuming after short writes."""
        if self._data is None:
            raise RuntimeError("FrameBuffer already flushed")
        data, self._data = bytes(self._data), None
        view = memoryview(data)
        total = 0
        while total < len(data):
            written = stream.write(view[total:].tobytes())
            if written <= 0:
                logger.warning("frame write stalled: %d of %d bytes", total, len(data))
                break
            if total + written < len(data):
                logger.warning("short frame write: %d of %d bytes", total + written, len(data))
            total += written
        return total
