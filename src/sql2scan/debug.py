"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from sql2scan.lexer import ScanResult


def dump_tokens(result: ScanResult, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable token listing to *file*."""
    file.write(f"Statement ({len(result.tokens)} tokens)\n")
    if result.leading:
        file.write(f"  leading {result.leading!r}\n")
    for idx, (tok, delim) in enumerate(zip(result.tokens, result.delimiters)):
        start = tok.span.start
        file.write(
            f"  {idx:>3} {tok.kind.name:<17} {start.line}:{start.column} {tok.text!r}"
        )
        if delim:
            file.write(f" +{delim!r}")
        file.write("\n")
