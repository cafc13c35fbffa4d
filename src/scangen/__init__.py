"""Flex scanner specification synthesizer for a compiler-compiler."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scangen.grammar import LexicalGrammar
    from scangen.symbols import SymbolEnvironment

__version__ = "0.1.0"


def synthesize(
    grammar: LexicalGrammar,
    name: str,
    *,
    char_literal_errors: bool = True,
) -> tuple[str, SymbolEnvironment]:
    """Generate flex source for a grammar, plus the environment the parser must share."""
    from scangen.flex import GeneratorOptions, generate

    options = GeneratorOptions(name=name, char_literal_errors=char_literal_errors)
    spec, env = generate(grammar, options)
    return spec.text, env
