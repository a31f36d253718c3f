"""Tests for seekreader.navigator."""
import io

import pytest

from seekreader.errors import InvalidIndexError
from seekreader.navigator import Navigator
from seekreader.types import EOF
from seekreader.window import WindowBuilder, WindowCache


class CountingBytesIO(io.BytesIO):
    """BytesIO that counts read() calls."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.reads = 0

    def read(self, size: int | None = -1) -> bytes:
        self.reads += 1
        return super().read(size)


def _navigator(data: bytes, capacity: int) -> tuple[Navigator, WindowCache, CountingBytesIO]:
    stream = CountingBytesIO(data)
    cache = WindowCache()
    builder = WindowBuilder(stream, cache, encoding="utf-8", capacity=capacity)
    return Navigator(cache, builder), cache, stream


class TestNavigatorLocate:
    def test_empty_cache_builds_first_window(self) -> None:
        nav, cache, _ = _navigator(b"abcdef", capacity=2)
        window = nav.locate(0)
        assert window is not EOF
        assert window.start_char_index == 0
        assert len(cache) == 1

    def test_forward_request_builds_windows_in_order(self) -> None:
        nav, cache, _ = _navigator(b"abcdefg", capacity=2)
        window = nav.locate(5)
        assert window is not EOF
        assert window.characters == "ef"
        assert [w.start_char_index for w in cache] == [0, 2, 4]

    def test_backward_access_does_no_io(self) -> None:
        nav, cache, stream = _navigator(b"abcdefg", capacity=2)
        nav.locate(6)
        reads = stream.reads
        for index in (0, 3, 1, 5, 2):
            window = nav.locate(index)
            assert window is not EOF
            assert window.contains_char(index)
            assert cache.current is window
        assert stream.reads == reads

    def test_past_end_reports_eof(self) -> None:
        nav, _, _ = _navigator(b"abc", capacity=2)
        assert nav.locate(3) is EOF
        assert nav.locate(100) is EOF

    def test_exhausted_cache_skips_io(self) -> None:
        nav, cache, stream = _navigator(b"abc", capacity=4)
        nav.locate(0)
        assert cache.exhausted is True
        reads = stream.reads
        assert nav.locate(10) is EOF
        assert stream.reads == reads

    def test_negative_index_fails_fast(self) -> None:
        nav, _, _ = _navigator(b"abc", capacity=2)
        with pytest.raises(InvalidIndexError):
            nav.locate(-1)


class TestNavigatorLocateByte:
    def test_resolves_byte_offsets(self) -> None:
        nav, _, _ = _navigator("aé€".encode("utf-8"), capacity=1)
        window = nav.locate_byte(4)
        assert window is not EOF
        assert window.start_char_index == 2
        assert window.char_index_at_byte(4) == 2
        back = nav.locate_byte(2)
        assert back is not EOF
        assert back.start_char_index == 1

    def test_past_end_reports_eof(self) -> None:
        nav, _, _ = _navigator(b"ab", capacity=1)
        assert nav.locate_byte(2) is EOF

    def test_negative_offset_fails_fast(self) -> None:
        nav, _, _ = _navigator(b"ab", capacity=1)
        with pytest.raises(InvalidIndexError):
            nav.locate_byte(-3)
