"""Lexical grammar model handed over by the grammar-analysis phase."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from scangen.regex import Regex


class Category(Enum):
    """Built-in lexical categories a grammar may use."""

    STRING = "String"
    CHAR = "Char"
    DOUBLE = "Double"
    INTEGER = "Integer"
    IDENT = "Ident"


@dataclass(frozen=True, slots=True)
class TokenPragma:
    """User-declared token category defined by a regular expression."""

    name: str
    regex: Regex


@dataclass(frozen=True, slots=True)
class CommentSpec:
    """Single-line comment delimiters and (start, end) block delimiter pairs."""

    line: tuple[str, ...] = ()
    block: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class LexicalGrammar:
    """Read-only lexical view of a grammar. All sequences keep declaration order."""

    categories: frozenset[Category] = frozenset()
    symbols: tuple[str, ...] = ()
    reserved_words: tuple[str, ...] = ()
    token_pragmas: tuple[TokenPragma, ...] = ()
    comments: CommentSpec = field(default_factory=CommentSpec)

    def is_used(self, category: Category) -> bool:
        return category in self.categories

    def keywords(self) -> tuple[str, ...]:
        """Literal terminals: cfg symbols followed by reserved words."""
        return self.symbols + self.reserved_words

    def token_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.token_pragmas)
