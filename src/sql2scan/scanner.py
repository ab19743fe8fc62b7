"""Token cursor over a scanned SQL2 statement, used by query parsers."""

from __future__ import annotations

from collections.abc import Iterable

from sql2scan.errors import UnexpectedTokenError
from sql2scan.lexer import ScanResult, tokenize
from sql2scan.tokens import Token, position_at

# Characters stripped from both ends of a returned token
_TRIM = " \t\n\r\0\x0b"


def tokens_equal(a: str, b: str, case_insensitive: bool = True) -> bool:
    """Return True if two tokens are equal, ignoring case unless told otherwise."""
    if case_insensitive:
        return a.upper() == b.upper()
    return a == b


class Scanner:
    """Split a statement into tokens and hand them out one at a time.

    The whole statement is scanned on construction, so a malformed literal
    raises ScanError before any token is read. The read position moves only
    forward and only through consume().
    """

    def __init__(self, statement: str) -> None:
        self._statement = statement
        self._result = tokenize(statement)
        self._pos = 0

    @property
    def statement(self) -> str:
        return self._statement

    @property
    def result(self) -> ScanResult:
        return self._result

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._result.tokens

    @property
    def delimiters(self) -> tuple[str, ...]:
        return self._result.delimiters

    @property
    def whitespace_runs(self) -> tuple[str, ...]:
        return self._result.whitespace_runs

    @property
    def position(self) -> int:
        return self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._result.tokens)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def lookahead_token(self, offset: int = 0) -> Token | None:
        """Return the token `offset` places ahead without consuming it."""
        idx = self._pos + offset
        if 0 <= idx < len(self._result.tokens):
            return self._result.tokens[idx]
        return None

    def lookahead(self, offset: int = 0) -> str:
        """Return the trimmed text `offset` places ahead, or "" past the end."""
        tok = self.lookahead_token(offset)
        if tok is None:
            return ""
        return tok.text.strip(_TRIM)

    def consume(self) -> str:
        """Return the current token text and move past it; "" once exhausted."""
        text = self.lookahead()
        if text != "":
            self._pos += 1
        return text

    def previous_delimiter(self) -> str:
        """Whitespace between the last consumed token and the next one.

        Returns a single space when nothing has been consumed yet. Touching
        tokens give "".
        """
        if self._pos > 0:
            return self._result.delimiters[self._pos - 1]
        return " "

    # ------------------------------------------------------------------
    # Assertions
    # ------------------------------------------------------------------

    def expect(self, token: str, case_insensitive: bool = True) -> None:
        """Consume the next token and raise UnexpectedTokenError if it is not `token`."""
        tok = self.lookahead_token()
        found = self.consume()
        if not tokens_equal(found, token, case_insensitive):
            offset = tok.span.start.offset if tok is not None else len(self._statement)
            raise UnexpectedTokenError(
                token, found, position_at(self._statement, offset), self._statement
            )

    def expect_sequence(self, tokens: Iterable[str], case_insensitive: bool = True) -> None:
        """Expect each of `tokens` in order, stopping at the first mismatch."""
        for token in tokens:
            self.expect(token, case_insensitive)

    def tokens_equal(self, a: str, b: str, case_insensitive: bool = True) -> bool:
        return tokens_equal(a, b, case_insensitive)
