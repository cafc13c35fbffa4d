"""Tests for the CLI module: arg parsing, exit codes, outputs, end-to-end."""

from __future__ import annotations

import argparse
import json
from pathlib import Path, PurePath

import pytest

from scangen.cli import (
    CliOptions,
    build_parser,
    default_name,
    generate_file,
    main,
    parse_name_arg,
    resolve_options,
    symbols_to_json,
)
from scangen.flex import GeneratorOptions
from scangen.symbols import build_symbol_env

GRAMMAR = {
    "categories": ["Ident", "Integer"],
    "symbols": ["+", "("],
    "reserved": ["let"],
    "tokens": [
        {
            "name": "Hex",
            "regex": ["seq", ["seqs", "0x"], ["plus", ["alts", "0123456789abcdef"]]],
        }
    ],
}


def _write(tmp_path: Path, data: object, name: str = "lang.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------


class TestParseHelpers:
    def test_parse_name_arg(self) -> None:
        assert parse_name_arg("Calc_2") == "Calc_2"

    @pytest.mark.parametrize("name", ["", "2calc", "my-lang", "a b"])
    def test_parse_name_arg_rejects(self, name: str) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_name_arg(name)

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("calc.json", "calc"),
            ("dir/my-lang.json", "my_lang"),
            ("1lang.json", "_1lang"),
            ("a.b.json", "a_b"),
        ],
    )
    def test_default_name(self, path: str, expected: str) -> None:
        assert default_name(PurePath(path)) == expected


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["lang.json"])
        assert ns.input == "lang.json"
        assert ns.output is None
        assert ns.name is None
        assert ns.char_errors is None

    def test_output_and_name(self) -> None:
        ns = build_parser().parse_args(["lang.json", "-o", "lang.l", "-n", "Lang"])
        assert ns.output == "lang.l"
        assert ns.name == "Lang"

    def test_headers(self) -> None:
        ns = build_parser().parse_args(
            ["lang.json", "--parser-header", "P.h", "--buffer-header", "B.h"]
        )
        assert ns.parser_header == "P.h"
        assert ns.buffer_header == "B.h"

    def test_no_char_errors(self) -> None:
        ns = build_parser().parse_args(["lang.json", "--no-char-errors"])
        assert ns.char_errors is False

    def test_watch_debug_verbose(self) -> None:
        ns = build_parser().parse_args(["lang.json", "--watch", "--debug", "-v"])
        assert ns.watch
        assert ns.debug
        assert ns.verbose

    def test_symbols(self) -> None:
        ns = build_parser().parse_args(["lang.json", "--symbols", "syms.json"])
        assert ns.symbols == "syms.json"


# ---------------------------------------------------------------------------
# Symbol environment export
# ---------------------------------------------------------------------------


class TestSymbolsJson:
    def test_entries_in_order(self) -> None:
        env = build_symbol_env(["+", "let"], ["Hex"])
        assert json.loads(symbols_to_json(env)) == [
            {"kind": "keyword", "symbol": "+", "id": "_SYMB_0"},
            {"kind": "keyword", "symbol": "let", "id": "_SYMB_1"},
            {"kind": "token", "symbol": "Hex", "id": "_SYMB_2"},
        ]

    def test_trailing_newline(self) -> None:
        assert symbols_to_json(build_symbol_env([], [])) == "[]\n"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path) -> None:
        out = tmp_path / "lang.l"
        assert main([str(_write(tmp_path, GRAMMAR)), "-o", str(out)]) == 0
        assert out.is_file()

    def test_grammar_error_returns_1(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        assert main([str(path)]) == 1
        assert "error:" in capsys.readouterr().err

    def test_schema_error_returns_1(self, tmp_path: Path, capsys) -> None:
        assert main([str(_write(tmp_path, {"categories": ["Float"]}))]) == 1
        assert "in categories[0]" in capsys.readouterr().err

    def test_regex_error_returns_2(self, tmp_path: Path, capsys) -> None:
        data = {"tokens": [{"name": "Nothing", "regex": ["eps"]}]}
        assert main([str(_write(tmp_path, data))]) == 2
        assert "token Nothing" in capsys.readouterr().err

    def test_missing_file_returns_1(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "error:" in capsys.readouterr().err

    def test_bad_name_returns_2(self, tmp_path: Path, capsys) -> None:
        assert main([str(_write(tmp_path, GRAMMAR)), "-n", "my-lang"]) == 2
        assert "invalid scanner name" in capsys.readouterr().err

    def test_bad_config_returns_2(self, tmp_path: Path) -> None:
        (tmp_path / "scangen.toml").write_text("[scanner\n", encoding="utf-8")
        assert main([str(_write(tmp_path, GRAMMAR))]) == 2


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------


class TestEndToEnd:
    def test_stdout(self, tmp_path: Path, capsys) -> None:
        assert main([str(_write(tmp_path, GRAMMAR))]) == 0
        out = capsys.readouterr().out
        assert "#define yylval langlval" in out
        assert '<YYINITIAL>"let"    \treturn _SYMB_2;' in out
        assert out.endswith("}\n")

    def test_output_file_matches_stdout(self, tmp_path: Path, capsys) -> None:
        grammar = _write(tmp_path, GRAMMAR)
        out = tmp_path / "lang.l"
        assert main([str(grammar)]) == 0
        printed = capsys.readouterr().out
        assert main([str(grammar), "-o", str(out)]) == 0
        assert out.read_text(encoding="utf-8") == printed

    def test_name_flag(self, tmp_path: Path) -> None:
        out = tmp_path / "lang.l"
        assert main([str(_write(tmp_path, GRAMMAR)), "-n", "Lang", "-o", str(out)]) == 0
        assert "#define init_lexer Lang_init_lexer" in out.read_text(encoding="utf-8")

    def test_symbols_file(self, tmp_path: Path) -> None:
        out = tmp_path / "lang.l"
        syms = tmp_path / "syms.json"
        args = [str(_write(tmp_path, GRAMMAR)), "-o", str(out), "--symbols", str(syms)]
        assert main(args) == 0
        entries = json.loads(syms.read_text(encoding="utf-8"))
        assert [e["id"] for e in entries] == ["_SYMB_0", "_SYMB_1", "_SYMB_2", "_SYMB_3"]
        assert entries[-1] == {"kind": "token", "symbol": "Hex", "id": "_SYMB_3"}

    def test_no_char_errors(self, tmp_path: Path) -> None:
        data = {"categories": ["Char"]}
        with_errors = tmp_path / "a.l"
        without = tmp_path / "b.l"
        grammar = str(_write(tmp_path, data))
        assert main([grammar, "-o", str(with_errors)]) == 0
        assert main([grammar, "-o", str(without), "--no-char-errors"]) == 0
        assert "<CHAR,CHARESC,CHAREND><<EOF>>" in with_errors.read_text(encoding="utf-8")
        assert "<<EOF>>" not in without.read_text(encoding="utf-8")

    def test_debug_dump(self, tmp_path: Path, capsys) -> None:
        out = tmp_path / "lang.l"
        assert main([str(_write(tmp_path, GRAMMAR)), "-o", str(out), "--debug"]) == 0
        err = capsys.readouterr().err
        assert "SymbolEnvironment (4)" in err
        assert "ScannerSpec" in err
        assert "-> _SYMB_3" in err

    def test_generate_file(self, tmp_path: Path) -> None:
        options = CliOptions(
            input_file=_write(tmp_path, GRAMMAR),
            output_file=None,
            symbols_file=None,
            generator=GeneratorOptions("Lang"),
            watch=False,
            debug=False,
            verbose=False,
        )
        text, env = generate_file(options)
        assert "%START YYINITIAL" in text
        assert env.token_name("Hex") == "_SYMB_3"

    def test_resolve_default_name(self, tmp_path: Path) -> None:
        grammar = _write(tmp_path, GRAMMAR, "my-lang.json")
        opts = resolve_options(build_parser().parse_args([str(grammar)]))
        assert opts.generator.name == "my_lang"
