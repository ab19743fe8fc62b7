"""SQL2 statement scanner and token cursor."""

from __future__ import annotations

from sql2scan.errors import QuerySyntaxError, ScanError, UnexpectedTokenError
from sql2scan.lexer import ScanResult, tokenize
from sql2scan.scanner import Scanner, tokens_equal
from sql2scan.tokens import Token, TokenKind

__version__ = "0.1.0"

__all__ = [
    "QuerySyntaxError",
    "ScanError",
    "ScanResult",
    "Scanner",
    "Token",
    "TokenKind",
    "UnexpectedTokenError",
    "tokenize",
    "tokens_equal",
]
