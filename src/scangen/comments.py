"""Rules for single-line and block comments.

Each block comment form gets its own start state, so several forms can
coexist. Comments do not nest: a start delimiter seen inside a comment
state is ordinary comment text.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator

from scangen.grammar import CommentSpec
from scangen.rules import INITIAL, Begin, Rule, Skip, rule
from scangen.strings import contains_c_comment_marker, cstring


def comment_states() -> Iterator[str]:
    """Yield COMMENT, COMMENT1, COMMENT2, ... without end."""
    yield "COMMENT"
    for n in itertools.count(1):
        yield f"COMMENT{n}"


def lex_single_comment(delim: str) -> Rule:
    """Skip the delimiter and the rest of its line."""
    note = None
    if not contains_c_comment_marker(delim):
        note = f"comment {cstring(delim)}"
    return rule(INITIAL, f"{cstring(delim)}[^\\n]*", Skip(), note=note)


def lex_block_comment(delims: tuple[str, str], state: str) -> list[Rule]:
    """Enter state on the start delimiter; inside it, skip until the end delimiter."""
    start, end = delims
    note = None
    if not (contains_c_comment_marker(start) or contains_c_comment_marker(end)):
        note = f"block comment {cstring(start)} {cstring(end)}"
    return [
        rule(INITIAL, cstring(start), Begin(state), note=note),
        rule(state, cstring(end), Begin(INITIAL)),
        rule(state, ".", Skip()),
        rule(state, "[\\n]", Skip()),
    ]


def lex_comments(spec: CommentSpec) -> list[Rule]:
    """All single-line comment rules, then all block comment rules, in declaration order."""
    rules = [lex_single_comment(delim) for delim in spec.line]
    for delims, state in zip(spec.block, comment_states()):
        rules.extend(lex_block_comment(delims, state))
    return rules


def block_comment_states(spec: CommentSpec) -> list[str]:
    """The start states allocated for the block comment forms of spec."""
    return list(itertools.islice(comment_states(), len(spec.block)))
