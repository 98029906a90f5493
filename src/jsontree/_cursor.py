"""Rewindable character cursor over a text stream."""

from __future__ import annotations

from typing import Final
from typing import TextIO

WHITESPACE: Final = frozenset(" \t\r\n")


class SourceCursor:
    """Character cursor with cheap position save/restore.

    Reads the underlying stream lazily in fixed-size chunks and keeps
    everything read so far, so a saved position is just an offset into the
    buffer and rewinding to it never touches the stream again.
    """

    def __init__(self, source: TextIO, read_size: int = 65536) -> None:
        """Initialize cursor at the start of the stream.

        Args:
            source: Text stream providing a ``read(size)`` method
            read_size: Number of characters requested per read
        """
        self.source: Final = source
        self.read_size: Final = read_size
        self.pos = 0
        self._buffer = ""
        self._exhausted = False

    @property
    def text(self) -> str:
        """Returns the text buffered so far."""
        return self._buffer

    def _fill(self, upto: int) -> bool:
        """Reads chunks until the buffer holds index ``upto``.

        Each read requests at least ``read_size`` characters and at least as
        many as are already buffered, so the buffer doubles per read and the
        total copying done by appends stays linear in the input size.

        Returns:
            True if the index is available, False at end of stream
        """
        while upto >= len(self._buffer):
            if self._exhausted:
                return False
            size = max(self.read_size, len(self._buffer))
            chunk = self.source.read(size)
            if not chunk:
                self._exhausted = True
                return False
            self._buffer = self._buffer + chunk
        return True

    def peek(self, offset: int = 0) -> str:
        """Returns the character ``offset`` ahead, or "" at end of input."""
        index = self.pos + offset
        if self._fill(index):
            return self._buffer[index]
        return ""

    def advance(self, count: int = 1) -> str:
        """Consumes up to ``count`` characters and returns them."""
        self._fill(self.pos + count - 1)
        taken = self._buffer[self.pos : self.pos + count]
        self.pos += len(taken)
        return taken

    def startswith(self, literal: str) -> bool:
        """Checks whether the unread input begins with ``literal``."""
        self._fill(self.pos + len(literal) - 1)
        return self._buffer.startswith(literal, self.pos)

    def at_end(self) -> bool:
        return not self._fill(self.pos)

    def mark(self) -> int:
        """Returns the current position for a later ``reset``."""
        return self.pos

    def reset(self, mark: int) -> None:
        """Rewinds to a position previously returned by ``mark``."""
        if not 0 <= mark <= len(self._buffer):
            raise ValueError(f"invalid cursor mark: {mark}")
        self.pos = mark

    def skip_whitespace(self) -> None:
        """Skips space, tab, carriage return and line feed characters."""
        while self._fill(self.pos) and self._buffer[self.pos] in WHITESPACE:
            self.pos += 1
