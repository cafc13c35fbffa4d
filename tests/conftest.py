"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from scangen.flex import GeneratorOptions, ScannerSpec, generate
from scangen.grammar import Category, CommentSpec, LexicalGrammar, TokenPragma
from scangen.rules import Rule
from scangen.symbols import SymbolEnvironment

from tests.flexsim import Emitted, FlexSimulator


def make_grammar(
    categories: tuple[Category, ...] = (),
    symbols: tuple[str, ...] = (),
    reserved: tuple[str, ...] = (),
    tokens: tuple[TokenPragma, ...] = (),
    line_comments: tuple[str, ...] = (),
    block_comments: tuple[tuple[str, str], ...] = (),
) -> LexicalGrammar:
    """Build a LexicalGrammar with keyword-style arguments."""
    return LexicalGrammar(
        categories=frozenset(categories),
        symbols=symbols,
        reserved_words=reserved,
        token_pragmas=tokens,
        comments=CommentSpec(line_comments, block_comments),
    )


@pytest.fixture
def gen():
    """Return a helper that generates (spec, env) for a grammar."""

    def _gen(
        grammar: LexicalGrammar, name: str = "Test", **options: bool | str
    ) -> tuple[ScannerSpec, SymbolEnvironment]:
        return generate(grammar, GeneratorOptions(name, **options))

    return _gen


@pytest.fixture
def simulator(gen):
    """Return a helper that builds a FlexSimulator for a grammar."""

    def _sim(grammar: LexicalGrammar, **options: object) -> FlexSimulator:
        spec, _ = gen(grammar, **options)
        return FlexSimulator(spec)

    return _sim


@pytest.fixture
def scan(simulator):
    """Return a helper that scans text with the scanner generated for a grammar."""

    def _scan(grammar: LexicalGrammar, text: str, **options: object) -> list[Emitted]:
        return simulator(grammar, **options).scan(text)

    return _scan


def assert_tokens(emitted: list[Emitted], expected: list[str]) -> None:
    """Assert that the emitted token identifiers match the expected list."""
    actual = [e.token for e in emitted]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(emitted: list[Emitted], expected: list[object]) -> None:
    """Assert that the emitted token values match the expected list."""
    actual = [e.value for e in emitted]
    assert actual == expected, f"Expected {expected}, got {actual}"


def patterns(rules: list[Rule]) -> list[str]:
    return [r.pattern for r in rules]
