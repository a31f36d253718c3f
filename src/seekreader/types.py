"""Core types for windowed character access over byte streams."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from enum import Enum
from typing import Literal, TypeAlias


Codec: TypeAlias = str
ErrorMode: TypeAlias = Literal["ignore", "replace", "strict"]


class EndOfStream(Enum):
    """End-of-stream marker returned by every character-producing call."""

    EOF = "EOF"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "EOF"


EOF = EndOfStream.EOF


@dataclass(frozen=True, slots=True)
class CharPosition:
    """Line/column of a character (1-indexed lines, 0-indexed columns)."""

    line: int
    column: int

    def __post_init__(self) -> None:
        if self.line < 1:
            raise ValueError(f"line must be >= 1, got {self.line}")
        if self.column < 0:
            raise ValueError(f"column must be >= 0, got {self.column}")

    def advance(self, previous_char: str) -> CharPosition:
        """Position of the character that follows one holding *previous_char*."""
        if previous_char == "\n":
            return CharPosition(self.line + 1, 0)
        return CharPosition(self.line, self.column + 1)


FIRST_POSITION = CharPosition(1, 0)


@dataclass(frozen=True, slots=True)
class ByteSpan:
    """Source bytes a decoded character was produced from."""

    start: int
    length: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"start must be >= 0, got {self.start}")
        if self.length <= 0:
            raise ValueError(f"length must be > 0, got {self.length}")

    @property
    def end(self) -> int:
        """Inclusive offset of the last byte."""
        return self.start + self.length - 1


@dataclass(frozen=True, slots=True)
class Window:
    """A decoded, cached slice of the stream.

    Byte and character ranges are inclusive. ``characters`` and the
    per-character tables all have length ``size``.
    """

    start_byte_pos: int
    end_byte_pos: int
    start_char_index: int
    end_char_index: int
    characters: str
    char_byte_start: tuple[int, ...]
    char_byte_length: tuple[int, ...]
    char_positions: tuple[CharPosition, ...] | None
    is_last_window: bool

    def __post_init__(self) -> None:
        if self.start_byte_pos < 0 or self.start_char_index < 0:
            raise ValueError("window offsets must be >= 0")
        if not self.characters:
            raise ValueError("window must hold at least one character")
        if self.end_byte_pos < self.start_byte_pos:
            raise ValueError(
                f"end_byte_pos must be >= start_byte_pos, got "
                f"{self.end_byte_pos} < {self.start_byte_pos}",
            )
        if self.end_char_index - self.start_char_index + 1 != len(self.characters):
            raise ValueError("character range does not match decoded size")
        if len(self.char_byte_start) != len(self.characters):
            raise ValueError("char_byte_start length must equal size")
        if len(self.char_byte_length) != len(self.characters):
            raise ValueError("char_byte_length length must equal size")
        if self.char_positions is not None and len(self.char_positions) != len(self.characters):
            raise ValueError("char_positions length must equal size")

    @property
    def size(self) -> int:
        return len(self.characters)

    def contains_char(self, index: int) -> bool:
        return self.start_char_index <= index <= self.end_char_index

    def contains_byte(self, offset: int) -> bool:
        return self.start_byte_pos <= offset <= self.end_byte_pos

    def char(self, index: int) -> str:
        """Character at absolute *index* (must be inside this window)."""
        return self.characters[index - self.start_char_index]

    def byte_span(self, index: int) -> ByteSpan:
        local = index - self.start_char_index
        return ByteSpan(self.char_byte_start[local], self.char_byte_length[local])

    def position(self, index: int) -> CharPosition | None:
        if self.char_positions is None:
            return None
        return self.char_positions[index - self.start_char_index]

    def char_index_at_byte(self, offset: int) -> int:
        """Index of the character whose source bytes cover *offset*.

        Bytes folded into a character's span (dropped malformed bytes)
        resolve to that character. Trailing bytes past the last character
        resolve to the last character.
        """
        local = bisect.bisect_right(self.char_byte_start, offset) - 1
        return self.start_char_index + max(0, local)
