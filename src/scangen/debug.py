"""--debug dump of the symbol environment and rule layout to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from scangen.flex import ScannerSpec
from scangen.rules import Rule
from scangen.symbols import Keyword, SymbolEnvironment, TokenCategory


def dump_symbols(env: SymbolEnvironment, *, file: TextIO | None = None) -> None:
    """Print each symbol with its terminal identifier to *file* (default stderr)."""
    out = file if file is not None else sys.stderr
    out.write(f"SymbolEnvironment ({len(env)})\n")
    for symbol, ident in env.items():
        if isinstance(symbol, Keyword):
            out.write(f"  {ident:<10} keyword {symbol.text!r}\n")
        elif isinstance(symbol, TokenCategory):
            out.write(f"  {ident:<10} token   {symbol.name}\n")


def dump_spec(spec: ScannerSpec, *, file: TextIO | None = None) -> None:
    """Print the start states and rule patterns, grouped by state."""
    out = file if file is not None else sys.stderr
    out.write(f"ScannerSpec ({len(spec.rules)} rules)\n")
    for state in spec.start_states:
        rules = spec.rules_in(state)
        out.write(f"  {state} ({len(rules)})\n")
        for r in rules:
            _dump_rule(r, out)


def _dump_rule(r: Rule, f: TextIO) -> None:
    token = r.returns()
    target = f" -> {token}" if token else ""
    f.write(f"    {r.pattern}{target}\n")
