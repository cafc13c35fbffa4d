"""Flex renderer: turns rules and actions into scanner description text."""

from __future__ import annotations

from collections.abc import Iterable

from scangen.rules import (
    Action,
    Assign,
    Begin,
    BufferAppendChar,
    BufferAppendText,
    BufferCreate,
    BufferFree,
    Return,
    Rule,
    Skip,
    Source,
)
from scangen.strings import cchar

# Separates a rule's pattern from its action
_GAP = "    \t"


def render_rule(r: Rule) -> str:
    """Render one rule as ``<STATES>pattern  actions``, plus its provenance note."""
    line = f"<{','.join(r.states)}>{r.pattern}{_GAP}{render_actions(r.actions)}"
    if r.note:
        line += f" /* scangen: {r.note} */"
    return line


def render_rules(rules: Iterable[Rule]) -> str:
    return "\n".join(render_rule(r) for r in rules)


def render_actions(actions: Iterable[Action]) -> str:
    return " ".join(render_action(a) for a in actions)


def render_macros(macros: Iterable[tuple[str, str]]) -> list[str]:
    return [f"{name} {definition}" for name, definition in macros]


def render_start_states(states: Iterable[str]) -> str:
    return " ".join(["%START", *states])


# ---------------------------------------------------------------------------
# Action rendering dispatcher
# ---------------------------------------------------------------------------


def render_action(action: Action) -> str:
    match action:
        case Begin(state=state):
            return f"BEGIN {state};"
        case Return(token=token):
            return f"return {token};"
        case Skip(reason=reason):
            return f"/* {reason} */;"
        case BufferCreate():
            return "LITERAL_BUFFER_CREATE();"
        case BufferAppendChar(char=None):
            return "LITERAL_BUFFER_APPEND_CHAR(yytext[0]);"
        case BufferAppendChar(char=ch):
            return f"LITERAL_BUFFER_APPEND_CHAR({cchar(ch)});"
        case BufferAppendText():
            return "LITERAL_BUFFER_APPEND(yytext);"
        case BufferFree():
            return "LITERAL_BUFFER_FREE();"
        case Assign(slot=slot, source=source, char=ch):
            return f"yylval.{slot.value} = {_render_source(source, ch)};"
    raise TypeError(f"unknown action: {action!r}")


def _render_source(source: Source, ch: str | None) -> str:
    match source:
        case Source.TEXT:
            return "strdup(yytext)"
        case Source.FIRST_CHAR:
            return "yytext[0]"
        case Source.CONST_CHAR:
            if ch is None:
                raise ValueError("constant character value without a character")
            return cchar(ch)
        case Source.INTEGER:
            return "atoi(yytext)"
        case Source.DOUBLE:
            return "atof(yytext)"
        case Source.BUFFER:
            return "LITERAL_BUFFER_HARVEST()"
    raise ValueError(f"unknown value source: {source!r}")
