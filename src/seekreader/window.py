"""Window construction and the append-only window cache."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import BinaryIO, Literal

from seekreader.decoder import DecodedChar, IncrementalCharDecoder
from seekreader.types import EOF, FIRST_POSITION, CharPosition, Codec, EndOfStream, ErrorMode, Window

log = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"
READ_CHUNK_SIZE = 8192


class WindowCache:
    """Ordered, never-evicting list of decoded windows.

    Windows are appended in strictly increasing character order and are
    contiguous: each starts one character after its predecessor ends.
    ``current`` is the window that satisfied the most recent lookup.
    """

    def __init__(self) -> None:
        self._windows: list[Window] = []
        self._current: int | None = None

    def __len__(self) -> int:
        return len(self._windows)

    def __iter__(self) -> Iterator[Window]:
        return iter(self._windows)

    def __getitem__(self, position: int) -> Window:
        return self._windows[position]

    @property
    def last(self) -> Window | None:
        return self._windows[-1] if self._windows else None

    @property
    def current(self) -> Window | None:
        return None if self._current is None else self._windows[self._current]

    @property
    def frontier(self) -> int:
        """Index one past the last cached character (0 when empty)."""
        last = self.last
        return 0 if last is None else last.end_char_index + 1

    @property
    def exhausted(self) -> bool:
        """True once a window has reached end-of-stream."""
        last = self.last
        return last is not None and last.is_last_window

    def append(self, window: Window) -> None:
        expected = self.frontier
        if window.start_char_index != expected:
            raise ValueError(
                f"window must start at char {expected}, got {window.start_char_index}",
            )
        self._windows.append(window)
        self._current = len(self._windows) - 1

    def find_char(self, index: int) -> Window | None:
        """Reverse scan of cached windows for *index*; never does I/O."""
        for position in range(len(self._windows) - 1, -1, -1):
            window = self._windows[position]
            if window.contains_char(index):
                self._current = position
                return window
            if window.end_char_index < index:
                return None
        return None

    def find_byte(self, offset: int) -> Window | None:
        for position in range(len(self._windows) - 1, -1, -1):
            window = self._windows[position]
            if window.contains_byte(offset):
                self._current = position
                return window
            if window.end_byte_pos < offset:
                return None
        return None

    def clear(self) -> None:
        self._windows.clear()
        self._current = None


class WindowBuilder:
    """Decodes one bounded window of characters from a seekable stream.

    Every build seeks explicitly to its start offset and uses a fresh
    decoder, so rebuilding from the same offsets yields identical windows.
    """

    def __init__(
        self,
        stream: BinaryIO,
        cache: WindowCache,
        *,
        encoding: Codec,
        capacity: int,
        errors: ErrorMode = "ignore",
        track_positions: bool = True,
    ) -> None:
        self._stream = stream
        self._cache = cache
        self.encoding = encoding
        self.capacity = capacity
        self.errors: ErrorMode = errors
        self.track_positions = track_positions

    def build_next(self) -> Window | Literal[EndOfStream.EOF]:
        """Build the window following the cache frontier."""
        last = self._cache.last
        if last is None:
            return self.build(0, 0)
        return self.build(last.end_byte_pos + 1, last.end_char_index + 1)

    def build(self, byte_start: int, char_start: int) -> Window | Literal[EndOfStream.EOF]:
        """Decode up to ``capacity`` characters starting at *byte_start*.

        Returns EOF (and caches nothing) when no character could be decoded.
        """
        decoded, end_byte, reached_end = self._decode(byte_start)
        if not decoded:
            log.debug("No characters at byte %d: end of stream", byte_start)
            return EOF

        window = Window(
            start_byte_pos=byte_start,
            end_byte_pos=max(byte_start, end_byte),
            start_char_index=char_start,
            end_char_index=char_start + len(decoded) - 1,
            characters="".join(d.char for d in decoded),
            char_byte_start=tuple(d.byte_start for d in decoded),
            char_byte_length=tuple(d.byte_length for d in decoded),
            char_positions=self._positions(decoded) if self.track_positions else None,
            is_last_window=reached_end,
        )
        self._cache.append(window)
        log.debug(
            "Built window chars %d..%d bytes %d..%d size=%d last=%s",
            window.start_char_index,
            window.end_char_index,
            window.start_byte_pos,
            window.end_byte_pos,
            window.size,
            window.is_last_window,
        )
        return window

    def _decode(self, byte_start: int) -> tuple[list[DecodedChar], int, bool]:
        self._stream.seek(byte_start)
        decoder = IncrementalCharDecoder(self.encoding, byte_start, errors=self.errors)
        decoded: list[DecodedChar] = []
        # U+FEFF decoded first at offset 0 is a byte-order mark, not content.
        bom_candidate = byte_start == 0

        while len(decoded) < self.capacity:
            chunk = self._stream.read(min(READ_CHUNK_SIZE, self.capacity * 4))
            if not chunk:
                produced = decoder.finish()
                if bom_candidate and produced and produced[0].char == BYTE_ORDER_MARK:
                    produced = produced[1:]
                decoded.extend(produced)
                return decoded, decoder.byte_offset - 1, True
            for byte in chunk:
                produced = decoder.feed(byte)
                if not produced:
                    continue
                if bom_candidate:
                    bom_candidate = False
                    if produced[0].char == BYTE_ORDER_MARK and produced[0].byte_start == 0:
                        produced = produced[1:]
                decoded.extend(produced)
                if len(decoded) >= self.capacity:
                    break

        return decoded, decoder.boundary - 1, False

    def _positions(self, decoded: list[DecodedChar]) -> tuple[CharPosition, ...]:
        previous = self._cache.last
        if previous is None or previous.char_positions is None:
            position = FIRST_POSITION
        else:
            position = previous.char_positions[-1].advance(previous.characters[-1])
        positions = [position]
        for prev_char in decoded[:-1]:
            position = position.advance(prev_char.char)
            positions.append(position)
        return tuple(positions)
