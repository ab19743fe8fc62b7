"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from sql2scan.lexer import tokenize
from sql2scan.scanner import Scanner
from sql2scan.tokens import Token, TokenKind


@pytest.fixture
def lex():
    """Return a helper that scans source and returns its tokens as a list."""

    def _lex(source: str) -> list[Token]:
        return list(tokenize(source).tokens)

    return _lex


@pytest.fixture
def scanner():
    """Return a helper that builds a Scanner over a statement."""

    def _scanner(statement: str) -> Scanner:
        return Scanner(statement)

    return _scanner


def assert_kinds(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def consume_all(s: Scanner) -> list[str]:
    """Consume every remaining token and return their texts."""
    out = []
    while (tok := s.consume()) != "":
        out.append(tok)
    return out
