"""Scanner rule model: start states, rules, and the actions they run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

# Start states
INITIAL = "YYINITIAL"
STRING = "STRING"
ESCAPED = "ESCAPED"
CHAR = "CHAR"
CHARESC = "CHARESC"
CHAREND = "CHAREND"

LITERAL_STATES: tuple[str, ...] = (CHAR, CHARESC, CHAREND, STRING, ESCAPED)

# Pattern that matches end of input in the active start states
EOF_PATTERN = "<<EOF>>"

# Built-in terminal identifiers
STRING_TOKEN = "_STRING_"
CHAR_TOKEN = "_CHAR_"
DOUBLE_TOKEN = "_DOUBLE_"
INTEGER_TOKEN = "_INTEGER_"
IDENT_TOKEN = "_IDENT_"
ERROR_TOKEN = "_ERROR_"

BUILTIN_TOKENS: frozenset[str] = frozenset(
    {STRING_TOKEN, CHAR_TOKEN, DOUBLE_TOKEN, INTEGER_TOKEN, IDENT_TOKEN, ERROR_TOKEN}
)


class Source(Enum):
    """Where an assigned token value comes from."""

    TEXT = auto()  # copy of the matched text
    FIRST_CHAR = auto()  # first matched character
    CONST_CHAR = auto()  # a fixed character
    INTEGER = auto()  # matched text parsed as an integer
    DOUBLE = auto()  # matched text parsed as a double
    BUFFER = auto()  # harvested literal buffer


class Slot(Enum):
    """Field of the shared token value union."""

    STRING = "_string"
    CHAR = "_char"
    INT = "_int"
    DOUBLE = "_double"


@dataclass(frozen=True, slots=True)
class Begin:
    """Switch to a start state."""

    state: str


@dataclass(frozen=True, slots=True)
class Return:
    """Hand a token to the parser."""

    token: str


@dataclass(frozen=True, slots=True)
class Skip:
    """Discard the match."""

    reason: str = "skip"


@dataclass(frozen=True, slots=True)
class BufferCreate:
    pass


@dataclass(frozen=True, slots=True)
class BufferAppendChar:
    """Append a fixed character, or the first matched character when None."""

    char: str | None = None


@dataclass(frozen=True, slots=True)
class BufferAppendText:
    """Append the whole matched text."""


@dataclass(frozen=True, slots=True)
class BufferFree:
    pass


@dataclass(frozen=True, slots=True)
class Assign:
    """Store a token value in a slot of the shared value union."""

    slot: Slot
    source: Source
    char: str | None = None


Action = Begin | Return | Skip | BufferCreate | BufferAppendChar | BufferAppendText | BufferFree | Assign


@dataclass(frozen=True, slots=True)
class Rule:
    """One scanner rule: active states, flex pattern, actions, provenance note."""

    states: tuple[str, ...]
    pattern: str
    actions: tuple[Action, ...]
    note: str | None = None

    @property
    def is_eof(self) -> bool:
        return self.pattern == EOF_PATTERN

    def returns(self) -> str | None:
        """The token this rule returns, if any."""
        for action in self.actions:
            if isinstance(action, Return):
                return action.token
        return None


def rule(state: str | tuple[str, ...], pattern: str, *actions: Action, note: str | None = None) -> Rule:
    """Build a Rule active in one state or a tuple of states."""
    states = (state,) if isinstance(state, str) else state
    return Rule(states, pattern, actions, note)
