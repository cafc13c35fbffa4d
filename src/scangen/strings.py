"""C literal quoting shared by flex patterns, actions and comments."""

from __future__ import annotations

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\f": "\\f",
    "\v": "\\v",
    "\b": "\\b",
    "\a": "\\a",
}


def cstring(text: str) -> str:
    """Quote text as a C string literal, which flex also accepts as a literal pattern.

    Backslash, double quote and control characters are escaped; control
    characters without a short escape use three-digit octal so the following
    character can never be absorbed into the escape.
    """
    return '"' + "".join(_escape(ch, '"') for ch in text) + '"'


def cchar(ch: str) -> str:
    """Quote a single character as a C character literal."""
    if len(ch) != 1:
        raise ValueError(f"expected a single character, got {ch!r}")
    return "'" + _escape(ch, "'") + "'"


def contains_c_comment_marker(text: str) -> bool:
    """Return True if text would open or close a C comment."""
    return "/*" in text or "*/" in text


def _escape(ch: str, quote: str) -> str:
    if ch == quote:
        return "\\" + ch
    escaped = _SIMPLE_ESCAPES.get(ch)
    if escaped is not None:
        return escaped
    if ord(ch) < 0x20 or ord(ch) == 0x7F:
        return f"\\{ord(ch):03o}"
    return ch
