"""Load a LexicalGrammar from its JSON interchange form."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from scangen.errors import GrammarError
from scangen.grammar import Category, CommentSpec, LexicalGrammar, TokenPragma
from scangen.regex import (
    Alts,
    AnyChar,
    Char,
    Digit,
    Eps,
    Letter,
    Lower,
    Minus,
    Opt,
    Plus,
    Regex,
    Seqs,
    Star,
    Upper,
    alt,
    seq,
)

_TOP_LEVEL_KEYS = frozenset({"categories", "symbols", "reserved", "tokens", "comments"})

_CATEGORY_NAMES = {c.value.lower(): c for c in Category}

# Nodes without operands
_NULLARY: dict[str, type] = {
    "eps": Eps,
    "digit": Digit,
    "letter": Letter,
    "upper": Upper,
    "lower": Lower,
    "any": AnyChar,
}

_UNARY: dict[str, type] = {
    "star": Star,
    "plus": Plus,
    "opt": Opt,
}


def load_grammar(path: Path) -> LexicalGrammar:
    """Read and convert a grammar file."""
    source = path.read_text(encoding="utf-8")
    return parse_grammar(source, path.name)


def parse_grammar(source: str, filename: str = "grammar.json") -> LexicalGrammar:
    """Decode JSON text and convert it to a LexicalGrammar."""
    try:
        data = json.loads(source)
    except json.JSONDecodeError as exc:
        raise GrammarError(exc.msg, filename, line=exc.lineno, column=exc.colno) from None
    return grammar_from_data(data, filename)


def grammar_from_data(data: Any, filename: str = "grammar.json") -> LexicalGrammar:
    """Convert decoded JSON data to a LexicalGrammar."""
    if not isinstance(data, dict):
        raise GrammarError("grammar must be a JSON object", filename)

    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise GrammarError(f"unknown key {unknown[0]!r}", filename)

    categories = frozenset(
        _category(name, filename, f"categories[{i}]")
        for i, name in enumerate(_string_list(data.get("categories", []), filename, "categories"))
    )
    symbols = _keywords(data.get("symbols", []), filename, "symbols")
    reserved = _keywords(data.get("reserved", []), filename, "reserved")

    tokens = data.get("tokens", [])
    if not isinstance(tokens, list):
        raise GrammarError("expected a list of token pragmas", filename, "tokens")
    pragmas = tuple(_token(t, filename, f"tokens[{i}]") for i, t in enumerate(tokens))

    return LexicalGrammar(
        categories=categories,
        symbols=tuple(symbols),
        reserved_words=tuple(reserved),
        token_pragmas=pragmas,
        comments=_comments(data.get("comments", {}), filename),
    )


def regex_from_data(node: Any, filename: str = "grammar.json", where: str = "regex") -> Regex:
    """Build a regex from its nested-list form, e.g. ``["plus", ["digit"]]``."""
    if not isinstance(node, list) or not node or not isinstance(node[0], str):
        raise GrammarError("regex node must be a list starting with its kind", filename, where)
    kind, args = node[0], node[1:]

    if kind in _NULLARY:
        _arity(kind, args, 0, filename, where)
        return _NULLARY[kind]()

    if kind in _UNARY:
        _arity(kind, args, 1, filename, where)
        return _UNARY[kind](regex_from_data(args[0], filename, f"{where}[1]"))

    match kind:
        case "char":
            _arity(kind, args, 1, filename, where)
            if not isinstance(args[0], str) or len(args[0]) != 1:
                raise GrammarError("'char' takes a single character", filename, where)
            return Char(args[0])
        case "seqs" | "alts":
            _arity(kind, args, 1, filename, where)
            if not isinstance(args[0], str):
                raise GrammarError(f"{kind!r} takes a string", filename, where)
            return Seqs(args[0]) if kind == "seqs" else Alts(args[0])
        case "seq" | "alt":
            parts = [regex_from_data(a, filename, f"{where}[{i + 1}]") for i, a in enumerate(args)]
            if kind == "seq":
                return seq(*parts)
            if not parts:
                raise GrammarError("'alt' needs at least one branch", filename, where)
            return alt(*parts)
        case "minus":
            _arity(kind, args, 2, filename, where)
            return Minus(
                regex_from_data(args[0], filename, f"{where}[1]"),
                regex_from_data(args[1], filename, f"{where}[2]"),
            )
    raise GrammarError(f"unknown regex kind {kind!r}", filename, where)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _arity(kind: str, args: list[Any], n: int, filename: str, where: str) -> None:
    if len(args) != n:
        raise GrammarError(f"{kind!r} takes {n} operand(s), got {len(args)}", filename, where)


def _string_list(value: Any, filename: str, where: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise GrammarError("expected a list of strings", filename, where)
    return value


def _category(name: str, filename: str, where: str) -> Category:
    category = _CATEGORY_NAMES.get(name.lower())
    if category is None:
        raise GrammarError(f"unknown category {name!r}", filename, where)
    return category


def _keywords(value: Any, filename: str, where: str) -> list[str]:
    words = _string_list(value, filename, where)
    for i, word in enumerate(words):
        if not word:
            raise GrammarError("empty keyword", filename, f"{where}[{i}]")
    return words


def _token(value: Any, filename: str, where: str) -> TokenPragma:
    if not isinstance(value, dict):
        raise GrammarError("token pragma must be an object", filename, where)
    name = value.get("name")
    if not isinstance(name, str) or not name:
        raise GrammarError("token pragma needs a non-empty 'name'", filename, where)
    if "regex" not in value:
        raise GrammarError(f"token {name!r} has no 'regex'", filename, where)
    return TokenPragma(name, regex_from_data(value["regex"], filename, f"{where}.regex"))


def _comments(value: Any, filename: str) -> CommentSpec:
    if not isinstance(value, dict):
        raise GrammarError("expected an object", filename, "comments")
    line = _string_list(value.get("line", []), filename, "comments.line")
    for i, delim in enumerate(line):
        if not delim:
            raise GrammarError("empty comment delimiter", filename, f"comments.line[{i}]")

    block_raw = value.get("block", [])
    if not isinstance(block_raw, list):
        raise GrammarError("expected a list of [start, end] pairs", filename, "comments.block")
    block: list[tuple[str, str]] = []
    for i, pair in enumerate(block_raw):
        where = f"comments.block[{i}]"
        if (
            not isinstance(pair, list)
            or len(pair) != 2
            or not all(isinstance(d, str) and d for d in pair)
        ):
            raise GrammarError("expected a [start, end] pair of delimiters", filename, where)
        block.append((pair[0], pair[1]))

    return CommentSpec(tuple(line), tuple(block))
