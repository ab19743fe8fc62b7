"""Token filter chain: ordered transform/drop steps over classified tokens."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace

from sql2scan.tokens import Token, TokenKind

TokenFilter = Callable[[Token], "Token | None"]


@dataclass
class TokenFilterChain:
    """Runs each filter in turn; the first one returning None drops the token."""

    filters: list[TokenFilter] = field(default_factory=list)

    def add_filter(self, f: TokenFilter) -> TokenFilterChain:
        self.filters.append(f)
        return self

    def filter(self, token: Token) -> Token | None:
        result: Token | None = token
        for f in self.filters:
            result = f(result)
            if result is None:
                return None
        return result

    def apply(self, tokens: Iterable[Token]) -> list[Token]:
        """Filter a token sequence, keeping order and dropping rejected tokens."""
        out: list[Token] = []
        for tok in tokens:
            result = self.filter(tok)
            if result is not None:
                out.append(result)
        return out


@dataclass(frozen=True, slots=True)
class KindFilter:
    """Drop tokens whose kind is in `kinds`."""

    kinds: frozenset[TokenKind]

    def __call__(self, token: Token) -> Token | None:
        if token.kind in self.kinds:
            return None
        return token


@dataclass(frozen=True, slots=True)
class UpperCaseIdentifierFilter:
    """Upper-case bare identifiers; other tokens pass through untouched."""

    def __call__(self, token: Token) -> Token | None:
        if token.kind is TokenKind.IDENTIFIER:
            return replace(token, text=token.text.upper())
        return token


def parse_kind(name: str) -> TokenKind:
    """Look up a TokenKind by name, case-insensitively (e.g. "number")."""
    key = name.strip().upper().replace("-", "_")
    try:
        return TokenKind[key]
    except KeyError:
        known = ", ".join(k.name.lower() for k in TokenKind)
        raise ValueError(f"unknown token kind '{name}' (expected one of: {known})") from None


def build_chain(drop_kinds: Iterable[TokenKind] = (), uppercase_identifiers: bool = False) -> TokenFilterChain:
    """Assemble the standard chain: drop by kind first, then upper-case names."""
    chain = TokenFilterChain()
    kinds = frozenset(drop_kinds)
    if kinds:
        chain.add_filter(KindFilter(kinds))
    if uppercase_identifiers:
        chain.add_filter(UpperCaseIdentifierFilter())
    return chain
