"""Deterministic dict/JSON snapshots of decoded windows.

Useful for diffing the window layout of two readers or pinning it in test
fixtures. Serialization goes through orjson with sorted keys.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from seekreader.types import Window

if TYPE_CHECKING:
    from seekreader.reader import SeekableTextReader

SNAPSHOT_VERSION = "1.0"


def window_to_dict(window: Window) -> dict[str, object]:
    """Serialize one window, including its per-character tables."""

    return {
        "start_byte_pos": window.start_byte_pos,
        "end_byte_pos": window.end_byte_pos,
        "start_char_index": window.start_char_index,
        "end_char_index": window.end_char_index,
        "size": window.size,
        "is_last_window": window.is_last_window,
        "characters": window.characters,
        "char_byte_start": list(window.char_byte_start),
        "char_byte_length": list(window.char_byte_length),
        "char_positions": (
            None
            if window.char_positions is None
            else [[pos.line, pos.column] for pos in window.char_positions]
        ),
    }


def cache_snapshot(reader: SeekableTextReader) -> dict[str, object]:
    """Reader configuration, cursor and every cached window."""

    config = reader.config
    return {
        "snapshot_version": SNAPSHOT_VERSION,
        "encoding": reader.encoding,
        "buffer_size": config.buffer_size,
        "errors": config.errors,
        "track_positions": config.track_positions,
        "cursor": reader.cursor,
        "window_count": len(reader.windows),
        "windows": [window_to_dict(window) for window in reader.windows],
    }


def dump_snapshot(payload: dict[str, object], *, pretty: bool = True) -> bytes:
    opts = orjson.OPT_SORT_KEYS | (orjson.OPT_INDENT_2 if pretty else 0)
    return orjson.dumps(payload, option=opts)


def load_snapshot(raw: bytes | str) -> dict[str, Any]:
    payload = orjson.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("snapshot must be a JSON object")
    if payload.get("snapshot_version") != SNAPSHOT_VERSION:
        raise ValueError(
            f"Snapshot version mismatch: expected {SNAPSHOT_VERSION}, "
            f"got {payload.get('snapshot_version')}"
        )
    return payload
