"""Resolve character and byte indices to cached windows."""
from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from seekreader.errors import InvalidIndexError
from seekreader.types import EOF, EndOfStream, Window
from seekreader.window import WindowBuilder, WindowCache


class Navigator:
    """Maps requested indices onto windows, growing the cache on demand.

    Indices at or below the frontier are served from the cache without
    I/O. Indices past it cause windows to be built strictly in order until
    one covers the request or the stream ends.
    """

    def __init__(self, cache: WindowCache, builder: WindowBuilder) -> None:
        self._cache = cache
        self._builder = builder

    def locate(self, char_index: int) -> Window | Literal[EndOfStream.EOF]:
        """Window holding *char_index*, or EOF if the stream is shorter."""
        if char_index < 0:
            raise InvalidIndexError(f"character index must be >= 0, got {char_index}")
        if char_index < self._cache.frontier:
            window = self._cache.find_char(char_index)
            if window is None:
                raise InvalidIndexError(f"character index {char_index} is not cached")
            return window
        return self._extend_until(lambda window: window.end_char_index >= char_index)

    def locate_byte(self, byte_offset: int) -> Window | Literal[EndOfStream.EOF]:
        """Window whose decoded bytes include *byte_offset*, or EOF."""
        if byte_offset < 0:
            raise InvalidIndexError(f"byte offset must be >= 0, got {byte_offset}")
        last = self._cache.last
        if last is not None and byte_offset <= last.end_byte_pos:
            window = self._cache.find_byte(byte_offset)
            if window is None:
                raise InvalidIndexError(f"byte offset {byte_offset} is not cached")
            return window
        return self._extend_until(lambda window: window.end_byte_pos >= byte_offset)

    def _extend_until(
        self, covers: Callable[[Window], bool],
    ) -> Window | Literal[EndOfStream.EOF]:
        while not self._cache.exhausted:
            window = self._builder.build_next()
            if window is EOF:
                return EOF
            if covers(window):
                return window
        return EOF
