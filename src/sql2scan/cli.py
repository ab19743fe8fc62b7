"""Command-line interface for sql2scan."""

from __future__ import annotations

import argparse
import json
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sql2scan.errors import QuerySyntaxError
from sql2scan.tokens import TokenKind

_FORMATS = ("text", "json")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    command: str | None
    output_file: Path | None
    output_format: str
    drop_kinds: list[TokenKind]
    uppercase: bool
    expect: list[str]
    case_sensitive: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="sql2scan",
        description="Split an SQL2 statement into tokens",
    )
    p.add_argument("input", nargs="?", help="File holding the statement ('-' for stdin)")
    p.add_argument("-c", "--command", metavar="STATEMENT", help="Statement text to scan")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--format",
        choices=_FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    p.add_argument(
        "--drop",
        action="append",
        default=[],
        metavar="KIND",
        help="Drop tokens of this kind from the output (repeatable)",
    )
    p.add_argument("--upper", action="store_true", help="Upper-case bare identifiers")
    p.add_argument(
        "--expect",
        action="append",
        default=[],
        metavar="TOKEN",
        help="Require the statement to start with these tokens (repeatable)",
    )
    p.add_argument(
        "--case-sensitive",
        action="store_true",
        help="Compare --expect tokens case-sensitively",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover sql2scan.toml)",
    )
    p.add_argument("--debug", action="store_true", help="Dump the token stream to stderr")
    return p


def parse_kind_arg(s: str) -> TokenKind:
    """Parse a token kind name for --drop."""
    from sql2scan.filters import parse_kind

    try:
        return parse_kind(s)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "sql2scan.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    if args.input is None and args.command is None:
        raise argparse.ArgumentTypeError("no statement given (pass a file or -c STATEMENT)")
    if args.input is not None and args.command is not None:
        raise argparse.ArgumentTypeError("pass either a file or -c STATEMENT, not both")

    input_file = Path(args.input) if args.input is not None else None
    input_dir = Path(".")
    if input_file is not None and input_file.parent.parts:
        input_dir = input_file.parent

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from None

    # Output format: config < CLI
    output_format = "text"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if isinstance(cfg_format, str):
            if cfg_format not in _FORMATS:
                raise argparse.ArgumentTypeError(f"invalid output format in config: {cfg_format}")
            output_format = cfg_format
    if args.format is not None:
        output_format = args.format

    # Dropped kinds and upper-casing: config < CLI
    drop_kinds: list[TokenKind] = []
    uppercase = False
    cfg_filters = config.get("filters")
    if isinstance(cfg_filters, dict):
        cfg_drop = cfg_filters.get("drop")
        if isinstance(cfg_drop, list):
            drop_kinds.extend(parse_kind_arg(str(k)) for k in cfg_drop)
        cfg_upper = cfg_filters.get("uppercase")
        if isinstance(cfg_upper, bool):
            uppercase = cfg_upper
    drop_kinds.extend(parse_kind_arg(k) for k in args.drop)
    if args.upper:
        uppercase = True

    # Expectation case mode: config < CLI
    case_sensitive = False
    cfg_expect = config.get("expect")
    if isinstance(cfg_expect, dict):
        cfg_case = cfg_expect.get("case_sensitive")
        if isinstance(cfg_case, bool):
            case_sensitive = cfg_case
    if args.case_sensitive:
        case_sensitive = True

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        command=args.command,
        output_file=output_file,
        output_format=output_format,
        drop_kinds=drop_kinds,
        uppercase=uppercase,
        expect=list(args.expect),
        case_sensitive=case_sensitive,
        debug=args.debug,
    )


def read_statement(options: CliOptions) -> str:
    """Return the statement text from -c, stdin, or the input file."""
    if options.command is not None:
        return options.command
    if options.input_file is None:
        raise argparse.ArgumentTypeError("no statement given (pass a file or -c STATEMENT)")
    if str(options.input_file) == "-":
        return sys.stdin.read()
    return options.input_file.read_text(encoding="utf-8")


def scan_statement(options: CliOptions, statement: str | None = None) -> str:
    """Scan, check, filter, and render a statement as text or JSON."""
    from sql2scan.debug import dump_tokens
    from sql2scan.filters import build_chain
    from sql2scan.scanner import Scanner

    if statement is None:
        statement = read_statement(options)

    scanner = Scanner(statement)

    if options.debug:
        dump_tokens(scanner.result, file=sys.stderr)

    if options.expect:
        scanner.expect_sequence(options.expect, case_insensitive=not options.case_sensitive)

    chain = build_chain(options.drop_kinds, options.uppercase)
    kept = []
    for tok, delim in zip(scanner.tokens, scanner.delimiters):
        filtered = chain.filter(tok)
        if filtered is not None:
            kept.append((filtered, delim))

    if options.output_format == "json":
        records = [
            {
                "kind": tok.kind.name.lower(),
                "text": tok.text,
                "start": tok.span.start.offset,
                "end": tok.span.end.offset,
                "delimiter": delim,
            }
            for tok, delim in kept
        ]
        return json.dumps(records, indent=2) + "\n"

    return "".join(f"{tok.kind.name.lower()}\t{tok.text}\n" for tok, _ in kept)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        output = scan_statement(options)
    except QuerySyntaxError as exc:
        filename = str(options.input_file) if options.input_file is not None else "<statement>"
        print(exc.format(filename), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError, argparse.ArgumentTypeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    return 0
