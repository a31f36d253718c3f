"""Byte-at-a-time decoding with per-character source byte spans."""
from __future__ import annotations

import codecs
from dataclasses import dataclass

from seekreader.errors import DecodeError
from seekreader.types import Codec, ErrorMode


@dataclass(frozen=True, slots=True)
class DecodedChar:
    """A character together with the stream bytes it was decoded from."""

    char: str
    byte_start: int
    byte_length: int


class IncrementalCharDecoder:
    """Stateful byte -> character transducer positioned in a stream.

    Each ``feed`` consumes exactly one byte. A character is attributed the
    bytes from the first byte not yet claimed by an earlier character up to
    the byte that completed it, so bytes dropped under ``errors="ignore"``
    are folded into the next character's span.

    Instances are never reused across windows; build a fresh one for every
    run of reads starting at a new offset.
    """

    def __init__(self, encoding: Codec, byte_offset: int, *, errors: ErrorMode = "ignore") -> None:
        self._encoding = encoding
        self._errors = errors
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._next_offset = byte_offset
        self._char_start = byte_offset

    @property
    def byte_offset(self) -> int:
        """Absolute stream offset of the next byte to be fed."""
        return self._next_offset

    @property
    def boundary(self) -> int:
        """Offset of the first byte not yet attributed to a character.

        Bytes from here up to ``byte_offset`` are still held by the codec.
        """
        return self._char_start

    @property
    def pending(self) -> bool:
        """True when fed bytes have not yet produced a character."""
        return self._char_start < self._next_offset

    def feed(self, byte: int) -> list[DecodedChar]:
        """Decode one byte; usually returns zero or one character.

        Codecs that buffer whole runs (UTF-7 base64 sections) can complete
        several characters on one byte. Those share the run's byte span.
        """
        offset = self._next_offset
        held = self._held()
        try:
            text = self._decoder.decode(bytes((byte,)))
        except UnicodeDecodeError as exc:
            bad = offset - held + exc.start
            raise DecodeError(
                f"Cannot decode byte at offset {bad} as {self._encoding}: {exc.reason}",
                byte_offset=bad,
                encoding=self._encoding,
            ) from exc
        self._next_offset = offset + 1
        return self._emit(text)

    def finish(self) -> list[DecodedChar]:
        """Flush the codec at end-of-stream.

        An incomplete trailing sequence is dropped, replaced or raised
        according to the error mode.
        """
        held = self._held()
        try:
            text = self._decoder.decode(b"", final=True)
        except UnicodeDecodeError as exc:
            bad = self._next_offset - held + exc.start
            raise DecodeError(
                f"Truncated {self._encoding} sequence at end of stream "
                f"(offset {bad}): {exc.reason}",
                byte_offset=bad,
                encoding=self._encoding,
            ) from exc
        return self._emit(text)

    def _held(self) -> int:
        return len(self._decoder.getstate()[0])

    def _emit(self, text: str) -> list[DecodedChar]:
        if not text:
            return []
        start = self._char_start
        end = self._next_offset - self._held()
        # A flush at end-of-stream may emit without consuming a byte.
        length = max(1, end - start)
        self._char_start = end
        return [DecodedChar(ch, start, length) for ch in text]
