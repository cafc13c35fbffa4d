"""State machines for string and character literals, and the literal buffer interface."""

from __future__ import annotations

from scangen.rules import (
    CHAR,
    CHAREND,
    CHARESC,
    EOF_PATTERN,
    ESCAPED,
    INITIAL,
    STRING,
    Assign,
    Begin,
    BufferAppendChar,
    BufferAppendText,
    BufferCreate,
    BufferFree,
    Return,
    Rule,
    Slot,
    Source,
    rule,
)

# Initial capacity of the buffer used to lex string literals
LITERAL_BUFFER_INITIAL_SIZE = 1024


def prelude_for_buffer(buffer_header: str) -> list[str]:
    """C definitions giving string-literal rules access to a growable buffer.

    The buffer is file-static and touched only through these macros. Every
    string literal creates it once and either harvests it into the token
    value or frees it.
    """
    return [
        "/* BEGIN extensible string buffer */",
        "",
        f'#include "{buffer_header}"',
        "",
        "/* The initial size of the buffer to lex string literals. */",
        f"#define LITERAL_BUFFER_INITIAL_SIZE {LITERAL_BUFFER_INITIAL_SIZE}",
        "",
        "/* The pointer to the literal buffer. */",
        "static Buffer literal_buffer = NULL;",
        "",
        "/* Initialize the literal buffer. */",
        "#define LITERAL_BUFFER_CREATE() literal_buffer = newBuffer(LITERAL_BUFFER_INITIAL_SIZE)",
        "",
        "/* Append characters at the end of the buffer. */",
        "#define LITERAL_BUFFER_APPEND(s) bufferAppendString(literal_buffer, s)",
        "",
        "/* Append a character at the end of the buffer. */",
        "#define LITERAL_BUFFER_APPEND_CHAR(c) bufferAppendChar(literal_buffer, c)",
        "",
        "/* Release the buffer, returning a pointer to its content. */",
        "#define LITERAL_BUFFER_HARVEST() releaseBuffer(literal_buffer)",
        "",
        "/* In exceptional cases, e.g. when reaching EOF, we have to free the buffer. */",
        "#define LITERAL_BUFFER_FREE() freeBuffer(literal_buffer)",
        "",
        "/* END extensible string buffer */",
        "",
    ]


def lex_strings(string_token: str, error_token: str) -> list[Rule]:
    """Lex "..." into a STRING token, resolving \\n \\t \\" \\\\ escapes."""
    return [
        rule(INITIAL, '"\\""', BufferCreate(), Begin(STRING)),
        rule(STRING, "\\\\", Begin(ESCAPED)),
        rule(
            STRING,
            '\\"',
            Assign(Slot.STRING, Source.BUFFER),
            Begin(INITIAL),
            Return(string_token),
        ),
        rule(STRING, ".|\\n", BufferAppendChar()),
        rule(ESCAPED, "n", BufferAppendChar("\n"), Begin(STRING)),
        rule(ESCAPED, '\\"', BufferAppendChar('"'), Begin(STRING)),
        rule(ESCAPED, "\\\\", BufferAppendChar("\\"), Begin(STRING)),
        rule(ESCAPED, "t", BufferAppendChar("\t"), Begin(STRING)),
        # Unknown escapes keep the escaped character
        rule(ESCAPED, ".|\\n", BufferAppendText(), Begin(STRING)),
        rule((STRING, ESCAPED), EOF_PATTERN, BufferFree(), Begin(INITIAL), Return(error_token)),
    ]


def lex_chars(char_token: str, error_token: str | None = None) -> list[Rule]:
    """Lex 'c' into a CHAR token, resolving \\n and \\t.

    The token is returned as soon as the character is read; the closing
    quote is consumed afterwards. With an error token, malformed and
    unterminated literals return it and go back to the initial state.
    """
    rules = [
        rule(INITIAL, '"\'"', Begin(CHAR)),
        rule(CHAR, "\\\\", Begin(CHARESC)),
        rule(
            CHAR,
            "[^']",
            Begin(CHAREND),
            Assign(Slot.CHAR, Source.FIRST_CHAR),
            Return(char_token),
        ),
        rule(
            CHARESC,
            "n",
            Begin(CHAREND),
            Assign(Slot.CHAR, Source.CONST_CHAR, "\n"),
            Return(char_token),
        ),
        rule(
            CHARESC,
            "t",
            Begin(CHAREND),
            Assign(Slot.CHAR, Source.CONST_CHAR, "\t"),
            Return(char_token),
        ),
        rule(
            CHARESC,
            ".|\\n",
            Begin(CHAREND),
            Assign(Slot.CHAR, Source.FIRST_CHAR),
            Return(char_token),
        ),
        rule(CHAREND, '"\'"', Begin(INITIAL)),
    ]
    if error_token is not None:
        rules.extend(
            [
                rule(CHAR, '"\'"', Begin(INITIAL), Return(error_token)),
                rule(CHAREND, ".|\\n", Begin(INITIAL), Return(error_token)),
                rule((CHAR, CHARESC, CHAREND), EOF_PATTERN, Begin(INITIAL), Return(error_token)),
            ]
        )
    return rules
