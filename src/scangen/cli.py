"""Command-line interface for scangen."""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any

from scangen.errors import GrammarError, RegexError
from scangen.flex import GeneratorOptions
from scangen.symbols import Keyword, SymbolEnvironment

_C_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    symbols_file: Path | None
    generator: GeneratorOptions
    watch: bool
    debug: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="scangen",
        description="Generate a flex scanner description from a lexical grammar",
    )
    p.add_argument("input", help="Grammar file (.json)")
    p.add_argument("-o", "--output", help="Output .l file (default: stdout)")
    p.add_argument(
        "-n",
        "--name",
        help="Prefix for the generated yylval/yylloc/init_lexer names "
        "(default: from the grammar file name)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover scangen.toml)",
    )
    p.add_argument("--parser-header", metavar="FILE", help="Parser header to include")
    p.add_argument("--buffer-header", metavar="FILE", help="Literal buffer header to include")
    p.add_argument(
        "--no-char-errors",
        dest="char_errors",
        action="store_false",
        default=None,
        help="Do not emit error rules for malformed character literals",
    )
    p.add_argument(
        "--symbols",
        metavar="FILE",
        help="Write the symbol environment as JSON (for the parser generator)",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and regenerate")
    p.add_argument("--debug", action="store_true", help="Dump symbols and rules to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Log generation steps")
    return p


def parse_name_arg(s: str) -> str:
    """Validate a scanner name: it becomes part of C identifiers."""
    if not _C_IDENT.fullmatch(s):
        raise argparse.ArgumentTypeError(f"invalid scanner name (expected a C identifier): {s}")
    return s


def default_name(input_file: PurePath) -> str:
    """Derive a scanner name from a grammar file name."""
    name = re.sub(r"[^A-Za-z0-9_]", "_", input_file.stem) or "scanner"
    if name[0].isdigit():
        name = "_" + name
    return name


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "scangen.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    scanner = config.get("scanner")
    if not isinstance(scanner, dict):
        scanner = {}
    output = config.get("output")
    if not isinstance(output, dict):
        output = {}

    # Scanner name: file name < config < CLI
    name = default_name(input_file)
    cfg_name = scanner.get("name")
    if isinstance(cfg_name, str):
        name = cfg_name
    if args.name is not None:
        name = args.name
    name = parse_name_arg(name)

    # Headers: default < config < CLI
    parser_header = "Parser.h"
    cfg_parser_header = scanner.get("parser_header")
    if isinstance(cfg_parser_header, str):
        parser_header = cfg_parser_header
    if args.parser_header is not None:
        parser_header = args.parser_header

    buffer_header = "Buffer.h"
    cfg_buffer_header = scanner.get("buffer_header")
    if isinstance(cfg_buffer_header, str):
        buffer_header = cfg_buffer_header
    if args.buffer_header is not None:
        buffer_header = args.buffer_header

    # Character literal error rules: on < config < CLI
    char_errors = True
    cfg_char_errors = scanner.get("char_literal_errors")
    if isinstance(cfg_char_errors, bool):
        char_errors = cfg_char_errors
    if args.char_errors is not None:
        char_errors = args.char_errors

    # Symbol dump: config < CLI
    symbols_file: Path | None = None
    cfg_symbols = output.get("symbols")
    if isinstance(cfg_symbols, str):
        symbols_file = Path(cfg_symbols)
    if args.symbols:
        symbols_file = Path(args.symbols)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        symbols_file=symbols_file,
        generator=GeneratorOptions(
            name=name,
            parser_header=parser_header,
            buffer_header=buffer_header,
            char_literal_errors=char_errors,
        ),
        watch=args.watch,
        debug=args.debug,
        verbose=args.verbose,
    )


def symbols_to_json(env: SymbolEnvironment) -> str:
    """Serialize the environment for the parser generator, preserving order."""
    entries: list[dict[str, str]] = []
    for symbol, ident in env.items():
        if isinstance(symbol, Keyword):
            entries.append({"kind": "keyword", "symbol": symbol.text, "id": ident})
        else:
            entries.append({"kind": "token", "symbol": symbol.name, "id": ident})
    return json.dumps(entries, indent=2) + "\n"


def generate_file(options: CliOptions) -> tuple[str, SymbolEnvironment]:
    """Read a grammar file and generate the flex source and symbol environment."""
    from scangen.debug import dump_spec, dump_symbols
    from scangen.flex import generate
    from scangen.loader import load_grammar

    grammar = load_grammar(options.input_file)
    spec, env = generate(grammar, options.generator)

    if options.debug:
        dump_symbols(env)
        dump_spec(spec)

    return spec.text, env


def write_outputs(options: CliOptions, text: str, env: SymbolEnvironment) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()
    if options.symbols_file:
        options.symbols_file.write_text(symbols_to_json(env), encoding="utf-8")


def watch_loop(options: CliOptions) -> None:
    """Poll the grammar file for changes, regenerate on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    text, env = generate_file(options)
                    write_outputs(options, text, env)
                    print(f"Generated {options.input_file}", file=sys.stderr)
                except (GrammarError, RegexError) as exc:
                    print(str(exc), file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(message)s",
            stream=sys.stderr,
        )

    if options.watch:
        watch_loop(options)
        return 0

    try:
        text, env = generate_file(options)
    except GrammarError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except RegexError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    write_outputs(options, text, env)
    return 0
