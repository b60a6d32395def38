"""
kodiscript_diagnostics/engine/lexer.py — KodiScript tokenizer.

The lexical grammar is a Parsimonious PEG: a source file is a sequence of
whitespace, ``//`` comments and tokens.  Because ``tokens`` always matches,
a lexical error surfaces as an ``IncompleteParseError`` at the first
offending character, which is re-raised as :class:`LexicalError` with the
position embedded in the message.
"""

from __future__ import annotations

import bisect
import logging
from typing import Any, List, Optional

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from kodiscript_diagnostics.engine.tokens import Token, TokenKind
from kodiscript_diagnostics.errors import LexicalError
from kodiscript_diagnostics.language import KEYWORDS

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  LEXICAL GRAMMAR (Parsimonious PEG)
# ═══════════════════════════════════════════════════════════════════

KODI_LEXICAL_GRAMMAR = Grammar(r'''
    tokens      = item*
    item        = ws / comment / number / string / word / operator / punct

    ws          = ~r"[ \t\r\n]+"
    comment     = ~r"//[^\n]*"

    number      = ~r"[0-9]+(?:\.[0-9]+)?"
    string      = ~r'"(?:[^"\\\n]|\\.)*"' / ~r"'(?:[^'\\\n]|\\.)*'"
    word        = ~r"[A-Za-z_][A-Za-z0-9_]*"

    operator    = "?." / "?:" / "??" / "==" / "!=" / "<=" / ">=" / "&&" / "||"
                / "=" / "<" / ">" / "+" / "-" / "*" / "/" / "%" / "!" / "?"
    punct       = "(" / ")" / "{" / "}" / "[" / "]" / "," / ";" / ":" / "."
''')


# ═══════════════════════════════════════════════════════════════════
#  PARSE TREE → TOKEN LIST
# ═══════════════════════════════════════════════════════════════════

class _TokenCollector(NodeVisitor):
    """Turns the lexical parse tree into a flat token list."""

    def __init__(self, source: str) -> None:
        self._line_starts = [0]
        for idx, ch in enumerate(source):
            if ch == "\n":
                self._line_starts.append(idx + 1)

    def position(self, offset: int) -> tuple:
        """1-based (line, column) of a character offset."""
        line_idx = bisect.bisect_right(self._line_starts, offset) - 1
        return line_idx + 1, offset - self._line_starts[line_idx] + 1

    def _token(self, kind: TokenKind, node: Node) -> Token:
        line, column = self.position(node.start)
        return Token(kind, node.text, line, column)

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children or node

    def visit_tokens(self, node: Node, visited_children: List[Any]) -> List[Token]:
        return [tok for tok in visited_children if isinstance(tok, Token)]

    def visit_item(self, node: Node, visited_children: List[Any]) -> Optional[Token]:
        return visited_children[0]

    def visit_ws(self, node: Node, visited_children: List[Any]) -> None:
        return None

    def visit_comment(self, node: Node, visited_children: List[Any]) -> None:
        return None

    def visit_number(self, node: Node, visited_children: List[Any]) -> Token:
        return self._token(TokenKind.NUMBER, node)

    def visit_string(self, node: Node, visited_children: List[Any]) -> Token:
        return self._token(TokenKind.STRING, node)

    def visit_word(self, node: Node, visited_children: List[Any]) -> Token:
        kind = TokenKind.KEYWORD if node.text in KEYWORDS else TokenKind.IDENTIFIER
        return self._token(kind, node)

    def visit_operator(self, node: Node, visited_children: List[Any]) -> Token:
        return self._token(TokenKind.OPERATOR, node)

    def visit_punct(self, node: Node, visited_children: List[Any]) -> Token:
        return self._token(TokenKind.PUNCT, node)


def tokenize(source: str) -> List[Token]:
    """
    Split ``source`` into tokens, ending with an EOF token.

    Raises
    ------
    LexicalError
        On an unterminated string literal or a character outside the
        language.
    """
    collector = _TokenCollector(source)
    try:
        tree = KODI_LEXICAL_GRAMMAR.parse(source)
    except ParseError as exc:
        line, column = collector.position(exc.pos)
        char = source[exc.pos] if exc.pos < len(source) else ""
        if char in ('"', "'"):
            raise LexicalError("Unterminated string literal", line, column) from exc
        raise LexicalError(f"Unexpected character {char!r}", line, column) from exc

    tokens = collector.visit(tree)
    line, column = collector.position(len(source))
    tokens.append(Token(TokenKind.EOF, "", line, column))
    logger.debug("tokenized %d chars into %d tokens", len(source), len(tokens))
    return tokens
