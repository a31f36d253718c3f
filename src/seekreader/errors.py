"""Exception taxonomy for seekable text readers.

End-of-stream is not an error and never raises: character-producing calls
return the ``EOF`` sentinel instead.
"""
from __future__ import annotations


class SeekReaderError(Exception):
    """Base class for reader failures."""


class InvalidConfigError(SeekReaderError, ValueError):
    """Raised for an unusable buffer size, codec, error mode or stream."""


class InvalidIndexError(SeekReaderError, IndexError):
    """Raised when a negative character or byte index is requested."""


class ReaderClosedError(SeekReaderError, ValueError):
    """Raised on access after the reader (and its stream) was closed."""


class DecodeError(SeekReaderError, ValueError):
    """Malformed byte sequence under ``errors="strict"``.

    ``byte_offset`` is the absolute stream offset of the byte that was
    being decoded when the codec rejected the input.
    """

    def __init__(self, message: str, *, byte_offset: int, encoding: str) -> None:
        super().__init__(message)
        self.byte_offset = byte_offset
        self.encoding = encoding
