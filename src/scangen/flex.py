"""Assembler for the flex scanner description.

Rule order is load-bearing. The scanner takes the longest match and breaks
ties by position, so the order is: keywords and symbols, comments, user
tokens, literals and built-in categories, whitespace, and the catch-all
error rule last.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from scangen.categories import Translator, category_rules, user_token_rules
from scangen.comments import block_comment_states, lex_comments
from scangen.grammar import Category, LexicalGrammar
from scangen.literals import lex_chars, lex_strings, prelude_for_buffer
from scangen.regex import to_flex
from scangen.render import render_macros, render_rules, render_start_states
from scangen.rules import (
    CHAR_TOKEN,
    ERROR_TOKEN,
    INITIAL,
    LITERAL_STATES,
    STRING_TOKEN,
    Return,
    Rule,
    Skip,
    rule,
)
from scangen.strings import cstring
from scangen.symbols import SymbolEnvironment, build_symbol_env

logger = logging.getLogger(__name__)

MACROS: tuple[tuple[str, str], ...] = (
    ("LETTER", "[a-zA-Z]"),
    ("CAPITAL", "[A-Z]"),
    ("SMALL", "[a-z]"),
    ("DIGIT", "[0-9]"),
    ("IDENT", "[a-zA-Z0-9'_]"),
)


@dataclass(frozen=True, slots=True)
class GeneratorOptions:
    """Knobs for one generated scanner."""

    name: str
    parser_header: str = "Parser.h"
    buffer_header: str = "Buffer.h"
    char_literal_errors: bool = True

    def __post_init__(self) -> None:
        if not (self.name.isascii() and self.name.isidentifier()):
            raise ValueError(f"scanner name must be a C identifier: {self.name!r}")


@dataclass(frozen=True, slots=True)
class ScannerSpec:
    """A generated scanner description. Built once, never modified."""

    prelude: tuple[str, ...]
    macros: tuple[tuple[str, str], ...]
    start_states: tuple[str, ...]
    rules: tuple[Rule, ...]
    footer: tuple[str, ...]

    def sections(self) -> tuple[str, str, str, str]:
        """Prelude, definitions, rules and footer, as text, in output order."""
        definitions = [
            *render_macros(self.macros),
            render_start_states(self.start_states),
            "",
            "%%  /* Rules. */",
        ]
        footer = ["", "%%  /* Initialization code. */", "", *self.footer]
        return (
            "\n".join(self.prelude),
            "\n".join(definitions),
            render_rules(self.rules),
            "\n".join(footer),
        )

    @property
    def text(self) -> str:
        return "\n".join(self.sections()) + "\n"

    def rules_in(self, state: str) -> list[Rule]:
        """Rules active in the given start state, in order."""
        return [r for r in self.rules if state in r.states]


def generate(
    grammar: LexicalGrammar,
    options: GeneratorOptions,
    translate: Translator = to_flex,
) -> tuple[ScannerSpec, SymbolEnvironment]:
    """Build the scanner description and the symbol environment for a grammar.

    The environment is what the parser generator must use for terminal names.
    """
    env = build_symbol_env(grammar.keywords(), grammar.token_names())
    comment_states = block_comment_states(grammar.comments)
    logger.debug("symbol environment: %d entries", len(env))
    logger.debug("comment states: %s", ", ".join(comment_states) or "(none)")

    keyword_rules = lex_symbols(env)
    comment_rules = lex_comments(grammar.comments)
    token_rules = user_token_rules(grammar.token_pragmas, env, translate)

    literal_rules: list[Rule] = []
    if grammar.is_used(Category.STRING):
        literal_rules.extend(lex_strings(STRING_TOKEN, ERROR_TOKEN))
    if grammar.is_used(Category.CHAR):
        error = ERROR_TOKEN if options.char_literal_errors else None
        literal_rules.extend(lex_chars(CHAR_TOKEN, error))

    rules = (
        *keyword_rules,
        *comment_rules,
        *token_rules,
        *literal_rules,
        *category_rules(grammar),
        *fallback_rules(),
    )
    logger.debug(
        "rules: %d keyword, %d comment, %d token, %d literal, %d total",
        len(keyword_rules),
        len(comment_rules),
        len(token_rules),
        len(literal_rules),
        len(rules),
    )

    spec = ScannerSpec(
        prelude=tuple(prelude(options, grammar.is_used(Category.STRING))),
        macros=MACROS,
        start_states=(INITIAL, *LITERAL_STATES, *comment_states),
        rules=rules,
        footer=tuple(footer()),
    )
    return spec, env


def lex_symbols(env: SymbolEnvironment) -> list[Rule]:
    """Exact-match rules for keywords and symbols, in environment order."""
    return [rule(INITIAL, cstring(text), Return(ident)) for text, ident in env.keywords()]


def fallback_rules() -> list[Rule]:
    """Whitespace is skipped; any other unmatched character is an error."""
    return [
        rule(INITIAL, "[ \\t\\r\\n\\f]", Skip("ignore white space.")),
        rule(INITIAL, ".", Return(ERROR_TOKEN)),
    ]


def prelude(options: GeneratorOptions, string_literals: bool) -> list[str]:
    lines = [
        "/* -*- c -*- This flex file was machine-generated by scangen */",
        "%option noyywrap noinput nounput",
        "%top{",
        "/* strdup is POSIX, not ISO C before C23. */",
        "#define _POSIX_C_SOURCE 200809L",
        "}",
        "%{",
        f"#define yylval {options.name}lval",
        f"#define yylloc {options.name}lloc",
        f"#define init_lexer {options.name}_init_lexer",
        f'#include "{options.parser_header}"',
        "",
    ]
    if string_literals:
        lines.extend(prelude_for_buffer(options.buffer_header))
    # Runs before every action, so locations are right for every token
    lines.extend(
        [
            "static void update_loc(YYLTYPE* loc, char* text)",
            "{",
            "  loc->first_line = loc->last_line;",
            "  loc->first_column = loc->last_column;",
            "  int i = 0;",
            "  for (; text[i] != '\\0'; ++i) {",
            "      if (text[i] == '\\n') {",
            "          ++loc->last_line;",
            "          loc->last_column = 0;",
            "      } else {",
            "          ++loc->last_column;",
            "      }",
            "  }",
            "}",
            "#define YY_USER_ACTION update_loc(&yylloc, yytext);",
            "",
            "%}",
        ]
    )
    return lines


def footer() -> list[str]:
    return [
        "void init_lexer(FILE *inp)",
        "{",
        "  yyrestart(inp);",
        "  yylloc.first_line   = 1;",
        "  yylloc.first_column = 1;",
        "  yylloc.last_line    = 1;",
        "  yylloc.last_column  = 1;",
        "  BEGIN YYINITIAL;",
        "}",
    ]
