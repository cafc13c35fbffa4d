"""Regular expression AST for token pragmas, and its translation to flex syntax."""

from __future__ import annotations

from dataclasses import dataclass

from scangen.errors import RegexError
from scangen.strings import cstring


@dataclass(frozen=True, slots=True)
class Char:
    """A single literal character."""

    char: str


@dataclass(frozen=True, slots=True)
class Seqs:
    """A literal character sequence."""

    text: str


@dataclass(frozen=True, slots=True)
class Alts:
    """Any one of the given characters."""

    chars: str


@dataclass(frozen=True, slots=True)
class Seq:
    left: Regex
    right: Regex


@dataclass(frozen=True, slots=True)
class Alt:
    left: Regex
    right: Regex


@dataclass(frozen=True, slots=True)
class Minus:
    """Characters matched by left but not by right (character classes only)."""

    left: Regex
    right: Regex


@dataclass(frozen=True, slots=True)
class Star:
    body: Regex


@dataclass(frozen=True, slots=True)
class Plus:
    body: Regex


@dataclass(frozen=True, slots=True)
class Opt:
    body: Regex


@dataclass(frozen=True, slots=True)
class Eps:
    """The empty word."""


@dataclass(frozen=True, slots=True)
class Digit:
    pass


@dataclass(frozen=True, slots=True)
class Letter:
    pass


@dataclass(frozen=True, slots=True)
class Upper:
    pass


@dataclass(frozen=True, slots=True)
class Lower:
    pass


@dataclass(frozen=True, slots=True)
class AnyChar:
    pass


Regex = (
    Char
    | Seqs
    | Alts
    | Seq
    | Alt
    | Minus
    | Star
    | Plus
    | Opt
    | Eps
    | Digit
    | Letter
    | Upper
    | Lower
    | AnyChar
)


def seq(*parts: Regex) -> Regex:
    """Right-nested sequence of the given parts."""
    if not parts:
        return Eps()
    result = parts[-1]
    for part in reversed(parts[:-1]):
        result = Seq(part, result)
    return result


def alt(*parts: Regex) -> Regex:
    """Right-nested alternation of the given parts."""
    if not parts:
        raise RegexError("alternation needs at least one branch")
    result = parts[-1]
    for part in reversed(parts[:-1]):
        result = Alt(part, result)
    return result


# ---------------------------------------------------------------------------
# Translation to flex
# ---------------------------------------------------------------------------

# Binding strength: alternation < sequence < postfix/atoms
_ALT = 1
_SEQ = 2
_ATOM = 3

_MACROS = {
    Digit: "{DIGIT}",
    Letter: "{LETTER}",
    Upper: "{CAPITAL}",
    Lower: "{SMALL}",
}

_CLASS_BODIES = {
    Digit: "0-9",
    Letter: "a-zA-Z",
    Upper: "A-Z",
    Lower: "a-z",
}


def to_flex(reg: Regex) -> str:
    """Render a regex in flex pattern syntax.

    Raises RegexError when the expression has no flex rendering.
    """
    if _is_empty(reg):
        raise RegexError("empty regular expression cannot be used as a token pattern")
    return _render(reg, 0)


def _render(reg: Regex, prec: int) -> str:
    match reg:
        case Char(char=c):
            return cstring(c)
        case Seqs(text=s):
            return cstring(s)
        case Alts(chars=s):
            if not s:
                raise RegexError("empty character set in regular expression")
            return f"[{_class_body(s)}]"
        case Seq(left=first, right=rest):
            if _is_empty(first):
                return _render(rest, prec)
            if _is_empty(rest):
                return _render(first, prec)
            return _paren(_render(first, _SEQ) + _render(rest, _SEQ), prec > _SEQ)
        case Alt(left=first, right=other):
            if _is_empty(first) or _is_empty(other):
                # r|eps is r?
                branch = other if _is_empty(first) else first
                if _is_empty(branch):
                    raise RegexError("alternation of empty expressions")
                return _postfix(branch, "?")
            return _paren(_render(first, _ALT) + "|" + _render(other, _ALT), prec > _ALT)
        case Minus(left=first, right=other):
            lhs = _as_class(first)
            # flex reads {-} and {+} left to right, so a union on the right
            # is removed one part at a time
            parts = [_as_class(part) for part in _union_parts(other)]
            if lhs is None or None in parts:
                raise RegexError("difference is only supported between character classes")
            return lhs + "".join(f"{{-}}{part}" for part in parts)
        case Star(body=body):
            return _postfix(body, "*")
        case Plus(body=body):
            return _postfix(body, "+")
        case Opt(body=body):
            return _postfix(body, "?")
        case AnyChar():
            return "."
        case Eps():
            raise RegexError("empty regular expression cannot be rendered here")
    macro = _MACROS.get(type(reg))
    if macro is None:
        raise RegexError(f"unsupported regex node: {type(reg).__name__}")
    return macro


def _postfix(body: Regex, op: str) -> str:
    if _is_empty(body):
        raise RegexError(f"operator {op!r} applied to the empty expression")
    if _needs_group(body):
        return f"({_render(body, 0)}){op}"
    return _render(body, _ATOM) + op


def _needs_group(reg: Regex) -> bool:
    """True if a postfix operator would otherwise bind to only part of reg."""
    if isinstance(reg, Seqs):
        return len(reg.text) > 1
    return isinstance(reg, (Seq, Alt, Minus, Star, Plus, Opt))


def _paren(text: str, wrap: bool) -> str:
    return f"({text})" if wrap else text


def _is_empty(reg: Regex) -> bool:
    match reg:
        case Eps() | Seqs(text=""):
            return True
        case Seq(left=first, right=rest):
            return _is_empty(first) and _is_empty(rest)
    return False


def _union_parts(reg: Regex) -> list[Regex]:
    if isinstance(reg, Alt):
        return _union_parts(reg.left) + _union_parts(reg.right)
    return [reg]


def _as_class(reg: Regex) -> str | None:
    """Render reg as a bracket expression, or None if it is not a character class."""
    match reg:
        case Char(char=c):
            return f"[{_class_body(c)}]"
        case Alts(chars=s) if s:
            return f"[{_class_body(s)}]"
        case AnyChar():
            return "[^\\n]"
        case Alt(left=first, right=other):
            lhs = _as_class(first)
            rhs = _as_class(other)
            if lhs is None or rhs is None:
                return None
            return f"{lhs}{{+}}{rhs}"
    body = _CLASS_BODIES.get(type(reg))
    if body is None:
        return None
    return f"[{body}]"


def _class_body(chars: str) -> str:
    """Escape characters for use inside a flex bracket expression."""
    out: list[str] = []
    for ch in chars:
        if ch in "\\]^-":
            out.append("\\" + ch)
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\r":
            out.append("\\r")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\{ord(ch):03o}")
        else:
            out.append(ch)
    return "".join(out)
