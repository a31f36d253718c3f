"""Byte-order-mark detection and codec name handling."""
from __future__ import annotations

import codecs
import logging
from typing import BinaryIO

from seekreader.errors import InvalidConfigError
from seekreader.types import Codec

log = logging.getLogger(__name__)

BOM_PROBE_SIZE = 4
FALLBACK_CODEC: Codec = "ascii"

# Checked in order; the first matching prefix wins, so FF FE 00 00 reads
# as UTF-16 little-endian.
_BOMS: tuple[tuple[bytes, Codec], ...] = (
    (b"\x2b\x2f\x76", "utf-7"),
    (b"\xef\xbb\xbf", "utf-8"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be"),
    (b"\x00\x00\xfe\xff", "utf-32-be"),
)


def codec_for_prefix(prefix: bytes) -> Codec:
    """Map up to four leading stream bytes to a codec name.

    Short prefixes never raise; missing bytes simply fail to match.
    """
    for signature, codec in _BOMS:
        if prefix.startswith(signature):
            return codec
    return FALLBACK_CODEC


def detect_encoding(stream: BinaryIO) -> Codec:
    """Sniff the codec from the stream's byte-order mark.

    Reads at most ``BOM_PROBE_SIZE`` bytes from offset 0 and restores the
    stream position afterwards.
    """
    saved = stream.tell()
    try:
        stream.seek(0)
        prefix = stream.read(BOM_PROBE_SIZE) or b""
    finally:
        stream.seek(saved)
    codec = codec_for_prefix(prefix)
    log.debug("Detected encoding %s from prefix %s", codec, prefix.hex(" "))
    return codec


def normalize_codec(name: str) -> Codec:
    """Return Python's canonical name for *name*.

    Raises InvalidConfigError for unknown codecs and for codecs without an
    incremental decoder.
    """
    try:
        info = codecs.lookup(name)
    except (LookupError, TypeError) as exc:
        raise InvalidConfigError(f"Unknown encoding: {name!r}") from exc
    if info.incrementaldecoder is None:
        raise InvalidConfigError(f"Encoding {info.name!r} has no incremental decoder")
    return info.name
