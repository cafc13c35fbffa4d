"""Terminal identifiers shared between the generated scanner and parser."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

SYMBOL_PREFIX = "_SYMB_"


@dataclass(frozen=True, slots=True)
class Keyword:
    """A literal terminal: reserved word or punctuation symbol."""

    text: str


@dataclass(frozen=True, slots=True)
class TokenCategory:
    """A user-defined token category, by name."""

    name: str


Symbol = Keyword | TokenCategory


class SymbolEnvironment(Mapping[Symbol, str]):
    """Immutable, insertion-ordered map from symbols to terminal identifiers."""

    __slots__ = ("_entries", "_index")

    def __init__(self, entries: Iterable[tuple[Symbol, str]] = ()) -> None:
        pairs = tuple(entries)
        index: dict[Symbol, str] = {}
        seen: set[str] = set()
        for symbol, ident in pairs:
            if symbol in index:
                raise ValueError(f"duplicate symbol {symbol!r}")
            if ident in seen:
                raise ValueError(f"duplicate terminal identifier {ident!r}")
            index[symbol] = ident
            seen.add(ident)
        self._entries = pairs
        self._index = index

    def __getitem__(self, symbol: Symbol) -> str:
        return self._index[symbol]

    def __iter__(self) -> Iterator[Symbol]:
        return (symbol for symbol, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SymbolEnvironment({list(self._entries)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SymbolEnvironment):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._entries)

    def keywords(self) -> list[tuple[str, str]]:
        """(text, identifier) pairs for literal terminals, in order."""
        return [(s.text, ident) for s, ident in self._entries if isinstance(s, Keyword)]

    def token_name(self, name: str) -> str:
        """Identifier of a token category, falling back to the plain name."""
        return self._index.get(TokenCategory(name), name)


def build_symbol_env(keywords: Iterable[str], token_names: Iterable[str]) -> SymbolEnvironment:
    """Number keywords first, then token categories, as ``_SYMB_<n>``.

    Repeated entries within a group keep their first position.
    """
    symbols: list[Symbol] = []
    symbols.extend(Keyword(text) for text in dict.fromkeys(keywords))
    symbols.extend(TokenCategory(name) for name in dict.fromkeys(token_names))
    return SymbolEnvironment((s, f"{SYMBOL_PREFIX}{n}") for n, s in enumerate(symbols))
