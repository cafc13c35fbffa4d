"""Error types with formatted location context."""

from __future__ import annotations


class GrammarError(Exception):
    """Raised when a grammar description cannot be turned into a LexicalGrammar.

    ``where`` is the key path inside the document (e.g. ``tokens[2].regex``);
    ``line`` and ``column`` are 1-based and set only when the document text
    itself is malformed.
    """

    def __init__(
        self,
        message: str,
        filename: str = "grammar.json",
        where: str = "",
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.message = message
        self.filename = filename
        self.where = where
        self.line = line
        self.column = column
        super().__init__(self.format())

    def format(self) -> str:
        location = self.filename
        if self.line is not None:
            location += f":{self.line}:{self.column or 1}"
        result = f"error: {self.message}\n  --> {location}"
        if self.where:
            result += f"\n   | in {self.where}"
        return result


class RegexError(Exception):
    """Raised by the regex translator for expressions it cannot render."""

    def __init__(self, message: str, token: str | None = None) -> None:
        self.message = message
        self.token = token
        super().__init__(self.format())

    def format(self) -> str:
        if self.token:
            return f"error: {self.message}\n  --> token {self.token}"
        return f"error: {self.message}"

    def for_token(self, token: str) -> RegexError:
        """Return a copy of this error naming the token pragma it came from."""
        return RegexError(self.message, token)
