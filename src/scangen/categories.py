"""Rules for built-in lexical categories and user token pragmas."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from scangen.errors import RegexError
from scangen.grammar import Category, LexicalGrammar, TokenPragma
from scangen.regex import Regex
from scangen.rules import (
    DOUBLE_TOKEN,
    IDENT_TOKEN,
    INITIAL,
    INTEGER_TOKEN,
    Assign,
    Return,
    Rule,
    Slot,
    Source,
    rule,
)
from scangen.symbols import SymbolEnvironment

Translator = Callable[[Regex], str]


@dataclass(frozen=True, slots=True)
class CategoryRule:
    """Pattern and value conversion for a built-in category."""

    category: Category
    pattern: str
    slot: Slot
    source: Source
    token: str

    def build(self) -> Rule:
        return rule(INITIAL, self.pattern, Assign(self.slot, self.source), Return(self.token))


def _make_category_rules() -> tuple[CategoryRule, ...]:
    table: list[CategoryRule] = []

    def d(category: Category, pattern: str, slot: Slot, source: Source, token: str) -> None:
        table.append(CategoryRule(category, pattern, slot, source, token))

    # Double before Integer; maximal munch keeps "1.5" a double either way
    d(
        Category.DOUBLE,
        '{DIGIT}+"."{DIGIT}+("e"(\\-)?{DIGIT}+)?',
        Slot.DOUBLE,
        Source.DOUBLE,
        DOUBLE_TOKEN,
    )
    d(Category.INTEGER, "{DIGIT}+", Slot.INT, Source.INTEGER, INTEGER_TOKEN)
    # Must come after the keyword rules
    d(Category.IDENT, "{LETTER}{IDENT}*", Slot.STRING, Source.TEXT, IDENT_TOKEN)

    return tuple(table)


CATEGORY_RULES: tuple[CategoryRule, ...] = _make_category_rules()


def category_rules(grammar: LexicalGrammar) -> list[Rule]:
    """Rules for the built-in categories the grammar uses, in table order."""
    return [entry.build() for entry in CATEGORY_RULES if grammar.is_used(entry.category)]


def user_token_rules(
    pragmas: Iterable[TokenPragma],
    env: SymbolEnvironment,
    translate: Translator,
) -> list[Rule]:
    """One rule per token pragma, in declaration order, returning the pragma's identifier."""
    rules: list[Rule] = []
    for pragma in pragmas:
        try:
            pattern = translate(pragma.regex)
        except RegexError as exc:
            raise exc.for_token(pragma.name) from None
        rules.append(
            rule(
                INITIAL,
                pattern,
                Assign(Slot.STRING, Source.TEXT),
                Return(env.token_name(pragma.name)),
            )
        )
    return rules
