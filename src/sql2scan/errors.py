"""Error types with formatted statement context."""

from __future__ import annotations

from sql2scan.tokens import Position, source_lines


class QuerySyntaxError(Exception):
    """Base class for syntax errors found while scanning or checking a statement."""

    def __init__(self, message: str, position: Position, statement: str) -> None:
        self.message = message
        self.position = position
        self.statement = statement
        super().__init__(self.format())

    def format(self, filename: str = "<statement>") -> str:
        lines = source_lines(self.statement)
        line_idx = self.position.line - 1
        col = self.position.column

        # Build the source line
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx]
        else:
            source_line = ""

        underline_len = max(1, min(self._underline_len(), len(source_line) - col + 1))

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )

    def _underline_len(self) -> int:
        return 1


class ScanError(QuerySyntaxError):
    """Raised while scanning when a quoted literal runs off the end of the statement.

    ``fragment`` holds the literal text scanned so far, starting with its
    opening quote or bracket.
    """

    def __init__(self, message: str, fragment: str, position: Position, statement: str) -> None:
        self.fragment = fragment
        super().__init__(message, position, statement)

    def _underline_len(self) -> int:
        return len(self.fragment)


class UnexpectedTokenError(QuerySyntaxError):
    """Raised by expect() when the consumed token differs from the expected one."""

    def __init__(self, expected: str, found: str, position: Position, statement: str) -> None:
        self.expected = expected
        self.found = found
        super().__init__(
            f"Syntax error: Expected '{expected}', found '{found}' in {statement}",
            position,
            statement,
        )

    def _underline_len(self) -> int:
        return len(self.found)
