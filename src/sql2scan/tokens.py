"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    NUMBER = auto()  # 42, 1.5, 1.5E10
    STRING = auto()  # 'text' or "text", quotes kept
    QUOTED_IDENTIFIER = auto()  # [nt:base], brackets kept
    IDENTIFIER = auto()  # bare name or keyword
    OPERATOR = auto()  # ! < > | = : and two-char forms (<=, <>, ||, ...)
    PUNCTUATION = auto()  # / - ( ) { } * , . ; + % ? and a stray ]


class CharClass(Enum):
    WHITESPACE = auto()
    DIGIT = auto()
    QUOTE = auto()
    PUNCTUATION = auto()
    OPERATOR = auto()
    BRACKET_OPEN = auto()
    BRACKET_CLOSE = auto()
    OTHER = auto()  # identifier start


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token: its kind, emitted text and source range.

    For strings the emitted text drops the backslash of an escaped quote,
    so ``text`` is not always equal to the source slice under ``span``.
    """

    kind: TokenKind
    text: str
    span: Span


WHITESPACE = " \n\r\t"
DIGITS = "0123456789"
QUOTES = "\"'"
PUNCTUATION = "/-(){}*,.;+%?"
OPERATOR_CHARS = "!<>|=:"
OPERATOR_SECOND = "=|>"

# Characters that end a bare identifier
IDENT_TERMINATORS = frozenset(WHITESPACE + "[]" + PUNCTUATION + OPERATOR_CHARS)

_CLASSES: dict[str, CharClass] = {
    **{ch: CharClass.WHITESPACE for ch in WHITESPACE},
    **{ch: CharClass.DIGIT for ch in DIGITS},
    **{ch: CharClass.QUOTE for ch in QUOTES},
    **{ch: CharClass.PUNCTUATION for ch in PUNCTUATION},
    **{ch: CharClass.OPERATOR for ch in OPERATOR_CHARS},
    "[": CharClass.BRACKET_OPEN,
    "]": CharClass.BRACKET_CLOSE,
}


def classify(ch: str) -> CharClass:
    """Return the character class that decides which sub-scanner handles ch."""
    return _CLASSES.get(ch, CharClass.OTHER)


def is_ident_char(ch: str) -> bool:
    """Return True if ch may appear inside a bare identifier."""
    return ch not in IDENT_TERMINATORS


def position_at(source: str, offset: int) -> Position:
    """Compute the line/column position of a character offset in source.

    ``\\r\\n``, a bare ``\\r`` and ``\\n`` each end one line.
    """
    offset = max(0, min(offset, len(source)))
    line = 1
    line_start = 0
    idx = 0
    while idx < offset:
        ch = source[idx]
        idx += 1
        if ch == "\r" and idx < offset and source[idx] == "\n":
            idx += 1
        if ch in "\r\n":
            line += 1
            line_start = idx
    return Position(line, offset - line_start + 1, offset)


def source_lines(source: str) -> list[str]:
    """Split source into lines on the same breaks position_at counts."""
    return source.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def span_of(source: str, start: int, end: int) -> Span:
    """Build a Span covering source[start:end]."""
    return Span(position_at(source, start), position_at(source, end))
