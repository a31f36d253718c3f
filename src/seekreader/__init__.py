"""Seekable, character-indexed reading over variable-width encoded byte streams."""

from seekreader.config import DEFAULT_BUFFER_SIZE, ReaderConfig
from seekreader.decoder import DecodedChar, IncrementalCharDecoder
from seekreader.encoding import codec_for_prefix, detect_encoding, normalize_codec
from seekreader.errors import (
    DecodeError,
    InvalidConfigError,
    InvalidIndexError,
    ReaderClosedError,
    SeekReaderError,
)
from seekreader.navigator import Navigator
from seekreader.reader import SeekableTextReader
from seekreader.snapshot import cache_snapshot, dump_snapshot, load_snapshot, window_to_dict
from seekreader.types import (
    EOF,
    ByteSpan,
    CharPosition,
    Codec,
    EndOfStream,
    ErrorMode,
    Window,
)
from seekreader.window import WindowBuilder, WindowCache

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "EOF",
    "ByteSpan",
    "CharPosition",
    "Codec",
    "DecodeError",
    "DecodedChar",
    "EndOfStream",
    "ErrorMode",
    "IncrementalCharDecoder",
    "InvalidConfigError",
    "InvalidIndexError",
    "Navigator",
    "ReaderClosedError",
    "ReaderConfig",
    "SeekReaderError",
    "SeekableTextReader",
    "Window",
    "WindowBuilder",
    "WindowCache",
    "cache_snapshot",
    "codec_for_prefix",
    "detect_encoding",
    "dump_snapshot",
    "load_snapshot",
    "normalize_codec",
    "window_to_dict",
]
