"""Tests for seekreader.decoder."""
import pytest

from seekreader.decoder import DecodedChar, IncrementalCharDecoder
from seekreader.errors import DecodeError


def _feed_all(decoder: IncrementalCharDecoder, data: bytes) -> list[DecodedChar]:
    out: list[DecodedChar] = []
    for byte in data:
        out.extend(decoder.feed(byte))
    out.extend(decoder.finish())
    return out


class TestIncrementalCharDecoder:
    def test_multibyte_utf8_spans(self) -> None:
        decoder = IncrementalCharDecoder("utf-8", 0)
        chars = _feed_all(decoder, "aé€😀b".encode("utf-8"))
        assert [c.char for c in chars] == ["a", "é", "€", "😀", "b"]
        assert [(c.byte_start, c.byte_length) for c in chars] == [
            (0, 1), (1, 2), (3, 3), (6, 4), (10, 1),
        ]

    def test_offsets_are_absolute(self) -> None:
        decoder = IncrementalCharDecoder("utf-8", 10)
        assert decoder.feed(0xC3) == []
        assert decoder.pending is True
        assert decoder.feed(0xA9) == [DecodedChar("é", 10, 2)]
        assert decoder.pending is False
        assert decoder.byte_offset == 12

    def test_utf16_surrogate_pair_is_one_character(self) -> None:
        decoder = IncrementalCharDecoder("utf-16-be", 0)
        chars = _feed_all(decoder, "😀x".encode("utf-16-be"))
        assert chars == [DecodedChar("😀", 0, 4), DecodedChar("x", 4, 2)]

    def test_ignored_bytes_fold_into_next_span(self) -> None:
        decoder = IncrementalCharDecoder("utf-8", 0, errors="ignore")
        chars = _feed_all(decoder, b"a\xffb")
        assert chars == [DecodedChar("a", 0, 1), DecodedChar("b", 1, 2)]

    def test_replace_emits_replacement_character(self) -> None:
        decoder = IncrementalCharDecoder("utf-8", 0, errors="replace")
        chars = _feed_all(decoder, b"a\xffb")
        assert [c.char for c in chars] == ["a", "\ufffd", "b"]

    def test_strict_reports_offset(self) -> None:
        decoder = IncrementalCharDecoder("utf-8", 0, errors="strict")
        with pytest.raises(DecodeError) as excinfo:
            _feed_all(decoder, b"ab\xff")
        assert excinfo.value.byte_offset == 2
        assert excinfo.value.encoding == "utf-8"
        assert isinstance(excinfo.value, ValueError)

    def test_truncated_tail(self) -> None:
        dropped = _feed_all(IncrementalCharDecoder("utf-8", 0), b"ab\xe2\x82")
        assert [c.char for c in dropped] == ["a", "b"]

        replaced = _feed_all(IncrementalCharDecoder("utf-8", 0, errors="replace"), b"ab\xe2\x82")
        assert replaced[-1] == DecodedChar("\ufffd", 2, 2)

        with pytest.raises(DecodeError) as excinfo:
            _feed_all(IncrementalCharDecoder("utf-8", 0, errors="strict"), b"ab\xe2\x82")
        assert excinfo.value.byte_offset == 2


class TestHeldBytes:
    def test_replacement_span_excludes_byte_still_held(self) -> None:
        decoder = IncrementalCharDecoder("utf-8", 0, errors="replace")
        assert decoder.feed(0xDC) == []
        # 0xC3 rejects the held 0xDC and starts a new sequence of its own.
        assert decoder.feed(0xC3) == [DecodedChar("\ufffd", 0, 1)]
        assert decoder.boundary == 1
        assert decoder.feed(0xA9) == [DecodedChar("é", 1, 2)]
        assert decoder.boundary == 3

    def test_strict_reports_held_bad_byte(self) -> None:
        decoder = IncrementalCharDecoder("utf-8", 0, errors="strict")
        decoder.feed(ord("a"))
        decoder.feed(0xDC)
        with pytest.raises(DecodeError) as excinfo:
            decoder.feed(ord("A"))
        assert excinfo.value.byte_offset == 1

    def test_strict_truncated_tail_reports_first_held_byte(self) -> None:
        decoder = IncrementalCharDecoder("utf-8", 5, errors="strict")
        for byte in b"a\xf0\x9f":
            decoder.feed(byte)
        with pytest.raises(DecodeError) as excinfo:
            decoder.finish()
        assert excinfo.value.byte_offset == 6
