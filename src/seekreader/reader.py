"""Character-indexed random access over variable-width encoded byte streams.

``SeekableTextReader`` owns a seekable binary stream and serves characters
by logical index. Decoded text is cached in windows of ``buffer_size``
characters, so backward access never re-reads the stream and forward
access reads each byte once.

Sequential helpers (``next_char``, ``peek``, ``step_back``,
``remainder_of_line``) share one cursor; ``character_at`` and indexing do
not move it.
"""
from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from typing import BinaryIO, Literal, TypeAlias

from seekreader.config import DEFAULT_BUFFER_SIZE, ReaderConfig
from seekreader.encoding import detect_encoding
from seekreader.errors import InvalidConfigError, ReaderClosedError
from seekreader.navigator import Navigator
from seekreader.types import EOF, ByteSpan, CharPosition, Codec, EndOfStream, Window
from seekreader.window import WindowBuilder, WindowCache

log = logging.getLogger(__name__)

CharOrEOF: TypeAlias = str | Literal[EndOfStream.EOF]


class SeekableTextReader:
    """Random-access character reader over an owned byte stream.

    Args:
        stream: Readable, seekable binary stream. The reader takes
            ownership and closes it in ``close()``.
        buffer_size: Window capacity in characters (default 4096).
        encoding: Codec name; detected from the byte-order mark if omitted.
        config: Full ``ReaderConfig``; mutually exclusive with the two
            keyword shortcuts.
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        buffer_size: int | None = None,
        encoding: Codec | None = None,
        config: ReaderConfig | None = None,
    ) -> None:
        if config is None:
            config = ReaderConfig(
                buffer_size=DEFAULT_BUFFER_SIZE if buffer_size is None else buffer_size,
                encoding=encoding,
            )
        elif buffer_size is not None or encoding is not None:
            raise InvalidConfigError("pass either config or buffer_size/encoding, not both")
        _check_stream(stream)

        self._stream = stream
        self._closed = False
        self._cache = WindowCache()
        self._cursor = 0
        self._eof = False
        self._config = config
        self._encoding = config.encoding or detect_encoding(stream)
        self._builder, self._navigator = self._wire()

    # ── lifecycle ──────────────────────────────────────────────────────

    def close(self) -> None:
        """Drop cached windows and close the owned stream."""
        if self._closed:
            return
        self._cache.clear()
        self._stream.close()
        self._closed = True

    def __enter__(self) -> SeekableTextReader:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    # ── configuration ──────────────────────────────────────────────────

    @property
    def config(self) -> ReaderConfig:
        return self._config

    @property
    def encoding(self) -> Codec:
        """Codec in use (supplied or detected)."""
        return self._encoding

    @property
    def buffer_size(self) -> int:
        return self._config.buffer_size

    def set_encoding(self, encoding: Codec | None) -> None:
        """Switch codec and invalidate everything decoded so far.

        ``None`` re-runs byte-order-mark detection.
        """
        self._check_open()
        self._config = self._config.with_encoding(encoding)
        self._encoding = self._config.encoding or detect_encoding(self._stream)
        self.reset()

    def set_buffer_size(self, buffer_size: int) -> None:
        """Change window capacity and invalidate everything decoded so far."""
        self._check_open()
        self._config = self._config.with_buffer_size(buffer_size)
        self.reset()

    def reset(self) -> None:
        """Clear the window cache and move the cursor back to 0."""
        self._check_open()
        dropped = len(self._cache)
        self._cache.clear()
        self._builder, self._navigator = self._wire()
        self._cursor = 0
        self._eof = False
        self._stream.seek(0)
        log.debug(
            "Reset reader: dropped %d windows (encoding=%s, buffer_size=%d)",
            dropped,
            self._encoding,
            self._config.buffer_size,
        )

    # ── state ──────────────────────────────────────────────────────────

    @property
    def cursor(self) -> int:
        """Index of the character the next ``next_char()`` returns."""
        return self._cursor

    @property
    def eof(self) -> bool:
        """True if the most recent character access hit end-of-stream."""
        return self._eof

    @property
    def stream(self) -> BinaryIO:
        return self._stream

    @property
    def byte_length(self) -> int:
        """Length of the underlying stream in bytes."""
        self._check_open()
        saved = self._stream.tell()
        try:
            return self._stream.seek(0, io.SEEK_END)
        finally:
            self._stream.seek(saved)

    @property
    def windows(self) -> tuple[Window, ...]:
        """Snapshot of the cached windows in character order."""
        return tuple(self._cache)

    @property
    def current_window(self) -> Window | None:
        """Window that satisfied the most recent lookup."""
        return self._cache.current

    # ── random access ──────────────────────────────────────────────────

    def character_at(self, index: int) -> CharOrEOF:
        """Character at logical *index*, or EOF past the end of the stream."""
        window = self._locate(index)
        if window is EOF:
            return EOF
        return window.char(index)

    def __getitem__(self, index: int) -> CharOrEOF:
        return self.character_at(index)

    def __iter__(self) -> Iterator[str]:
        """Yield every character from index 0; the cursor is not touched."""
        index = 0
        while (char := self.character_at(index)) is not EOF:
            yield char
            index += 1

    def byte_span(self, index: int) -> ByteSpan | Literal[EndOfStream.EOF]:
        """Stream bytes character *index* was decoded from."""
        window = self._locate(index)
        if window is EOF:
            return EOF
        return window.byte_span(index)

    def position_at(self, index: int) -> CharPosition | None | Literal[EndOfStream.EOF]:
        """Line/column of character *index*; None when tracking is off."""
        window = self._locate(index)
        if window is EOF:
            return EOF
        return window.position(index)

    def locate_byte(self, byte_offset: int) -> Window | Literal[EndOfStream.EOF]:
        """Window whose source bytes include *byte_offset*."""
        self._check_open()
        return self._navigator.locate_byte(byte_offset)

    def char_index_at_byte(self, byte_offset: int) -> int | Literal[EndOfStream.EOF]:
        """Index of the character whose encoding covers *byte_offset*."""
        window = self.locate_byte(byte_offset)
        if window is EOF:
            return EOF
        return window.char_index_at_byte(byte_offset)

    # ── cursor API ─────────────────────────────────────────────────────

    def next_char(self) -> CharOrEOF:
        """Return the character under the cursor, then advance it.

        The cursor advances even when EOF is returned.
        """
        char = self.character_at(self._cursor)
        self._cursor += 1
        return char

    def peek(self) -> CharOrEOF:
        """Return the character under the cursor without advancing."""
        return self.character_at(self._cursor)

    def step_back(self) -> CharOrEOF:
        """Re-read the character before the last one returned.

        Moves the cursor back two places (never below 0), reads there, then
        advances one: after ``next_char()`` returned the character at ``i``,
        this returns the character at ``i - 1`` and leaves the cursor at
        ``i``.
        """
        self._cursor = max(0, self._cursor - 2)
        char = self.character_at(self._cursor)
        self._cursor += 1
        return char

    def seek_char(self, index: int) -> int | Literal[EndOfStream.EOF]:
        """Move the cursor to *index* and the stream to its first byte.

        Returns the byte offset the stream now points at, or EOF (cursor and
        stream unchanged) when *index* is past the end.
        """
        window = self._locate(index)
        if window is EOF:
            return EOF
        offset = window.byte_span(index).start
        self._stream.seek(offset)
        self._cursor = index
        return offset

    def reset_cursor(self) -> None:
        """Move the cursor to 0 without touching the window cache."""
        self._cursor = 0

    def remainder_of_line(self) -> str:
        """Consume characters up to the next newline or end-of-stream.

        The newline is consumed but not included in the result.
        """
        chars: list[str] = []
        while True:
            char = self.next_char()
            if char is EOF or char == "\n":
                break
            chars.append(char)
        return "".join(chars)

    # ── internals ──────────────────────────────────────────────────────

    def _locate(self, index: int) -> Window | Literal[EndOfStream.EOF]:
        self._check_open()
        window = self._navigator.locate(index)
        self._eof = window is EOF
        return window

    def _wire(self) -> tuple[WindowBuilder, Navigator]:
        builder = WindowBuilder(
            self._stream,
            self._cache,
            encoding=self._encoding,
            capacity=self._config.buffer_size,
            errors=self._config.errors,
            track_positions=self._config.track_positions,
        )
        return builder, Navigator(self._cache, builder)

    def _check_open(self) -> None:
        if self._closed:
            raise ReaderClosedError("I/O operation on closed reader")


def _check_stream(stream: object) -> None:
    closed = getattr(stream, "closed", False)
    if closed:
        raise InvalidConfigError("stream is closed")
    for capability in ("readable", "seekable"):
        probe = getattr(stream, capability, None)
        if probe is None or not probe():
            raise InvalidConfigError(f"stream must be {capability}")
