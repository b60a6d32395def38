"""Token model of the reference KodiScript engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    NUMBER = auto()
    STRING = auto()
    IDENTIFIER = auto()
    KEYWORD = auto()
    OPERATOR = auto()
    PUNCT = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A lexical token with its 1-based source position."""
    kind: TokenKind
    text: str
    line: int
    column: int

    def describe(self) -> str:
        """Short form used in error messages."""
        if self.kind is TokenKind.EOF:
            return "end of input"
        return repr(self.text)

    def is_(self, kind: TokenKind, text: str) -> bool:
        return self.kind is kind and self.text == text
