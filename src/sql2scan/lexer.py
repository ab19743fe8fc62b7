"""SQL2 lexer: converts a statement into a flat token stream plus delimiters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sql2scan.errors import ScanError
from sql2scan.tokens import (
    DIGITS,
    OPERATOR_SECOND,
    WHITESPACE,
    CharClass,
    Token,
    TokenKind,
    classify,
    is_ident_char,
    position_at,
    span_of,
)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Everything one scan produces.

    ``delimiters[i]`` is the whitespace between token ``i`` and token ``i + 1``
    ("" when the tokens touch); the last entry is the trailing whitespace.
    ``leading`` is the whitespace before the first token. ``whitespace_runs``
    lists every nonempty run in the order it was skipped, with no gap entries.
    """

    source: str
    tokens: tuple[Token, ...]
    delimiters: tuple[str, ...]
    leading: str
    whitespace_runs: tuple[str, ...]


# ----------------------------------------------------------------------
# Sub-scanners: (source, offset) -> (token text, new offset)
# ----------------------------------------------------------------------


def _skip(source: str, offset: int, chars: str) -> int:
    """Return the offset just past the run of chars starting at offset."""
    while offset < len(source) and source[offset] in chars:
        offset += 1
    return offset


def scan_number(source: str, offset: int) -> tuple[str, int]:
    """Scan digits, an optional fraction and an optional unsigned exponent."""
    end = _skip(source, offset, DIGITS)

    # The dot is taken as long as something follows it
    if end + 1 < len(source) and source[end] == ".":
        end = _skip(source, end + 1, DIGITS)

    if end < len(source) and source[end] in "Ee":
        end = _skip(source, end + 1, DIGITS)

    return source[offset:end], end


def scan_string(source: str, offset: int) -> tuple[str, int]:
    """Scan a '...' or "..." literal.

    A backslash directly before the opening quote character escapes it; the
    backslash is dropped from the token text. Any other backslash is kept.
    """
    quote = source[offset]
    chars = [quote]
    pos = offset + 1

    while pos < len(source):
        ch = source[pos]
        pos += 1
        if ch == quote:
            chars.append(ch)
            return "".join(chars), pos
        if ch == "\\" and pos < len(source) and source[pos] == quote:
            chars.append(quote)
            pos += 1
        else:
            chars.append(ch)

    partial = "".join(chars)
    raise ScanError(
        f"Syntax error: unterminated quoted string '{partial}' in '{source}'",
        partial,
        position_at(source, offset),
        source,
    )


def scan_quoted_identifier(source: str, offset: int) -> tuple[str, int]:
    """Scan a [bracketed] identifier, allowing nested bracket pairs inside."""
    level = 1
    pos = offset + 1

    while pos < len(source):
        ch = source[pos]
        pos += 1
        if ch == "[":
            level += 1
        elif ch == "]":
            level -= 1
            if level == 0:
                return source[offset:pos], pos

    partial = source[offset:]
    raise ScanError(
        f"Syntax error: unterminated quoted identifier '{partial}' in '{source}'",
        partial,
        position_at(source, offset),
        source,
    )


def scan_identifier(source: str, offset: int) -> tuple[str, int]:
    """Scan a bare identifier up to whitespace, a bracket, or an operator char."""
    end = offset
    while end < len(source) and is_ident_char(source[end]):
        end += 1
    return source[offset:end], end


# ----------------------------------------------------------------------
# Driver
# ----------------------------------------------------------------------


class Lexer:
    """Tokenize one SQL2 statement into tokens and inter-token whitespace."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._tokens: list[Token] = []
        self._delimiters: list[str] = []
        self._leading = ""
        self._runs: list[str] = []

    def tokenize(self) -> ScanResult:
        """Scan the full statement. Raises ScanError on an unterminated literal."""
        source = self._source

        while self._pos < len(source):
            self._skip_whitespace()
            if self._pos >= len(source):
                break

            ch = source[self._pos]
            cls = classify(ch)

            if cls is CharClass.DIGIT:
                self._run(TokenKind.NUMBER, scan_number)
            elif cls is CharClass.QUOTE:
                self._run(TokenKind.STRING, scan_string)
            elif cls is CharClass.PUNCTUATION:
                self._emit(TokenKind.PUNCTUATION, ch, self._pos + 1)
            elif cls is CharClass.OPERATOR:
                self._lex_operator()
            elif cls is CharClass.BRACKET_OPEN:
                self._run(TokenKind.QUOTED_IDENTIFIER, scan_quoted_identifier)
            elif cls is CharClass.BRACKET_CLOSE:
                # A bare identifier cannot start here, so take the bracket alone
                self._emit(TokenKind.PUNCTUATION, ch, self._pos + 1)
            else:
                self._run(TokenKind.IDENTIFIER, scan_identifier)

        return ScanResult(
            source=source,
            tokens=tuple(self._tokens),
            delimiters=tuple(self._delimiters),
            leading=self._leading,
            whitespace_runs=tuple(self._runs),
        )

    def _skip_whitespace(self) -> None:
        start = self._pos
        self._pos = _skip(self._source, start, WHITESPACE)
        if self._pos == start:
            return
        run = self._source[start : self._pos]
        self._runs.append(run)
        if self._tokens:
            self._delimiters[-1] = run
        else:
            self._leading = run

    def _lex_operator(self) -> None:
        nxt = self._source[self._pos + 1 : self._pos + 2]
        if nxt and nxt in OPERATOR_SECOND:
            self._emit(TokenKind.OPERATOR, self._source[self._pos : self._pos + 2], self._pos + 2)
        else:
            self._emit(TokenKind.OPERATOR, self._source[self._pos], self._pos + 1)

    def _run(self, kind: TokenKind, sub_scanner: Callable[[str, int], tuple[str, int]]) -> None:
        text, end = sub_scanner(self._source, self._pos)
        self._emit(kind, text, end)

    def _emit(self, kind: TokenKind, text: str, end: int) -> None:
        self._tokens.append(Token(kind, text, span_of(self._source, self._pos, end)))
        self._delimiters.append("")
        self._pos = end


def tokenize(source: str) -> ScanResult:
    """Convenience function: scan source text and return the ScanResult."""
    return Lexer(source).tokenize()
