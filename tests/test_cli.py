"""Tests for the CLI module: arg parsing, exit codes, output formats, end-to-end."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import pytest

from sql2scan.cli import (
    CliOptions,
    build_parser,
    main,
    parse_kind_arg,
    resolve_options,
    scan_statement,
)
from sql2scan.tokens import TokenKind


def _options(**overrides) -> CliOptions:
    values = dict(
        input_file=None,
        command="SELECT * FROM [nt:base]",
        output_file=None,
        output_format="text",
        drop_kinds=[],
        uppercase=False,
        expect=[],
        case_sensitive=False,
        debug=False,
    )
    values.update(overrides)
    return CliOptions(**values)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["query.sql2"])
        assert ns.input == "query.sql2"
        assert ns.command is None
        assert ns.output is None

    def test_command_flag(self) -> None:
        ns = build_parser().parse_args(["-c", "SELECT *"])
        assert ns.input is None
        assert ns.command == "SELECT *"

    def test_repeatable_flags(self) -> None:
        ns = build_parser().parse_args(
            ["-c", "x", "--drop", "number", "--drop", "string", "--expect", "a", "--expect", "b"]
        )
        assert ns.drop == ["number", "string"]
        assert ns.expect == ["a", "b"]

    def test_format_choices(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-c", "x", "--format", "xml"])

    def test_parse_kind_arg_unknown_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_kind_arg("nope")

    def test_requires_statement(self) -> None:
        ns = build_parser().parse_args([])
        with pytest.raises(argparse.ArgumentTypeError):
            resolve_options(ns)

    def test_rejects_file_and_command(self) -> None:
        ns = build_parser().parse_args(["q.sql2", "-c", "x"])
        with pytest.raises(argparse.ArgumentTypeError):
            resolve_options(ns)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestScanStatement:
    def test_text_format(self) -> None:
        out = scan_statement(_options())
        assert out == (
            "identifier\tSELECT\n"
            "punctuation\t*\n"
            "identifier\tFROM\n"
            "quoted_identifier\t[nt:base]\n"
        )

    def test_json_format(self) -> None:
        out = scan_statement(_options(command="a<=b c", output_format="json"))
        records = json.loads(out)
        assert [r["text"] for r in records] == ["a", "<=", "b", "c"]
        assert records[1] == {
            "kind": "operator",
            "text": "<=",
            "start": 1,
            "end": 3,
            "delimiter": "",
        }
        assert records[2]["delimiter"] == " "

    def test_drop_and_upper(self) -> None:
        out = scan_statement(
            _options(drop_kinds=[TokenKind.PUNCTUATION, TokenKind.QUOTED_IDENTIFIER], uppercase=True)
        )
        assert out == "identifier\tSELECT\nidentifier\tFROM\n"

    def test_expect_passes(self) -> None:
        scan_statement(_options(expect=["select", "*"]))

    def test_expect_case_sensitive_fails(self) -> None:
        from sql2scan.errors import UnexpectedTokenError

        with pytest.raises(UnexpectedTokenError):
            scan_statement(_options(expect=["select"], case_sensitive=True))

    def test_debug_dump(self, capsys) -> None:
        scan_statement(_options(debug=True))
        err = capsys.readouterr().err
        assert "Statement (4 tokens)" in err
        assert "QUOTED_IDENTIFIER" in err

    def test_reads_file(self, tmp_path: Path) -> None:
        q = tmp_path / "q.sql2"
        q.write_text("SELECT 1", encoding="utf-8")
        out = scan_statement(_options(input_file=q, command=None))
        assert out == "identifier\tSELECT\nnumber\t1\n"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, capsys) -> None:
        assert main(["-c", "SELECT * FROM [nt:base]"]) == 0
        assert "quoted_identifier\t[nt:base]" in capsys.readouterr().out

    def test_scan_error_returns_1(self, capsys) -> None:
        assert main(["-c", "SELECT 'open"]) == 1
        err = capsys.readouterr().err
        assert "unterminated quoted string" in err
        assert "<statement>:1:8" in err

    def test_expect_error_returns_1(self, capsys) -> None:
        assert main(["-c", "prop = 'value'", "--expect", "prop", "--expect", "=="]) == 1
        assert "Expected '=='" in capsys.readouterr().err

    def test_scan_error_names_file(self, tmp_path: Path, capsys) -> None:
        q = tmp_path / "bad.sql2"
        q.write_text("[open", encoding="utf-8")
        assert main([str(q)]) == 1
        assert "bad.sql2:1:1" in capsys.readouterr().err

    def test_missing_statement_returns_2(self, capsys) -> None:
        assert main([]) == 2
        assert capsys.readouterr().err.startswith("error:")

    def test_bad_drop_kind_returns_2(self) -> None:
        assert main(["-c", "x", "--drop", "comment"]) == 2

    def test_missing_file_returns_2(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "absent.sql2")]) == 2

    def test_output_file(self, tmp_path: Path) -> None:
        out = tmp_path / "tokens.json"
        assert main(["-c", "a = 1", "--format", "json", "-o", str(out)]) == 0
        records = json.loads(out.read_text(encoding="utf-8"))
        assert [r["kind"] for r in records] == ["identifier", "operator", "number"]

    def test_undecodable_file_returns_2(self, tmp_path: Path, capsys) -> None:
        q = tmp_path / "latin1.sql2"
        q.write_bytes(b"SELECT \xff FROM x")
        assert main([str(q)]) == 2
        assert capsys.readouterr().err.startswith("error:")


class TestReadStatement:
    def test_no_source_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="no statement given"):
            scan_statement(_options(command=None, input_file=None))
