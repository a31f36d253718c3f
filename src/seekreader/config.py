"""Reader configuration."""
from __future__ import annotations

from dataclasses import dataclass, replace

from seekreader.encoding import normalize_codec
from seekreader.errors import InvalidConfigError
from seekreader.types import Codec, ErrorMode

DEFAULT_BUFFER_SIZE = 4096

_ERROR_MODES: frozenset[str] = frozenset({"ignore", "replace", "strict"})


@dataclass(frozen=True, slots=True)
class ReaderConfig:
    """Window capacity, codec and decoding policy for a reader.

    ``encoding=None`` means the codec is detected from the stream's
    byte-order mark when the reader is constructed.
    """

    buffer_size: int = DEFAULT_BUFFER_SIZE
    encoding: Codec | None = None
    errors: ErrorMode = "ignore"
    track_positions: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise InvalidConfigError(
                f"buffer_size must be an int, got {type(self.buffer_size).__name__}",
            )
        if self.buffer_size <= 0:
            raise InvalidConfigError(f"buffer_size must be > 0, got {self.buffer_size}")
        if self.errors not in _ERROR_MODES:
            raise InvalidConfigError(
                f"errors must be one of {sorted(_ERROR_MODES)}, got {self.errors!r}",
            )
        if self.encoding is not None:
            object.__setattr__(self, "encoding", normalize_codec(self.encoding))

    def with_buffer_size(self, buffer_size: int) -> ReaderConfig:
        return replace(self, buffer_size=buffer_size)

    def with_encoding(self, encoding: Codec | None) -> ReaderConfig:
        return replace(self, encoding=encoding)
