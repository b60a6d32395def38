"""
kodiscript_diagnostics/engine/parser.py — token list → KodiScript AST.

Design principles
-----------------
* **Single-pass, recursive-descent** over the token list produced by
  :func:`kodiscript_diagnostics.engine.lexer.tokenize`.
* **Precedence climbing** for binary operators, lowest first::

      =   ? :   ?: ??   || or   && and   == !=   < <= > >=   + -   * / %

* **Fail-fast with location** – the first unexpected token raises
  :class:`UnexpectedTokenError` whose message ends with
  ``at line N, column M``.
* Statement terminators are optional: ``;`` is skipped where present and an
  expression simply ends at the first token that cannot continue it.
"""

from __future__ import annotations

from typing import Callable, Dict, List, NoReturn, Optional, Sequence

from kodiscript_diagnostics.engine import ast_nodes as A
from kodiscript_diagnostics.engine.tokens import Token, TokenKind
from kodiscript_diagnostics.errors import UnexpectedTokenError

_BINARY_LEVELS: List[Dict[str, str]] = [
    {"?:": "?:", "??": "??"},
    {"||": "||", "or": "||"},
    {"&&": "&&", "and": "&&"},
    {"==": "==", "!=": "!="},
    {"<": "<", "<=": "<=", ">": ">", ">=": ">="},
    {"+": "+", "-": "-"},
    {"*": "*", "/": "/", "%": "%"},
]

_UNARY_OPS = {"!": "!", "-": "-", "not": "!"}


class Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            raise ValueError("token list must end with an EOF token")
        self._tokens = tokens
        self._pos = 0

    # ── token helpers ────────────────────────────────────────────────

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.kind is not TokenKind.EOF:
            self._pos += 1
        return tok

    def _check(self, text: str) -> bool:
        tok = self._current
        return tok.kind is not TokenKind.STRING and tok.text == text

    def _match(self, text: str) -> bool:
        if self._check(text):
            self._advance()
            return True
        return False

    def _expect(self, text: str) -> Token:
        if self._check(text):
            return self._advance()
        self._fail(f"'{text}'")

    def _expect_identifier(self) -> Token:
        if self._current.kind is TokenKind.IDENTIFIER:
            return self._advance()
        self._fail("identifier")

    def _fail(self, *expected: str) -> NoReturn:
        tok = self._current
        raise UnexpectedTokenError(tok.describe(), tok.line, tok.column, expected)

    @staticmethod
    def _loc(tok: Token) -> A.Loc:
        return (tok.line, tok.column)

    # ── statements ───────────────────────────────────────────────────

    def parse_program(self) -> A.Program:
        start = self._current
        statements = []
        while self._current.kind is not TokenKind.EOF:
            if self._match(";"):
                continue
            statements.append(self._statement())
        return A.Program(statements, loc=self._loc(start))

    def _statement(self) -> A.Node:
        tok = self._current
        if tok.kind is TokenKind.KEYWORD:
            handler = self._STATEMENT_KEYWORDS.get(tok.text)
            if handler is not None:
                stmt = handler(self)
                self._match(";")
                return stmt
        if tok.is_(TokenKind.PUNCT, "{"):
            return self._block()
        expr = self._expression()
        self._match(";")
        return A.ExpressionStatement(expr, loc=self._loc(tok))

    def _block(self) -> A.Block:
        start = self._expect("{")
        statements = []
        while not self._check("}"):
            if self._current.kind is TokenKind.EOF:
                self._fail("'}'")
            if self._match(";"):
                continue
            statements.append(self._statement())
        self._advance()
        return A.Block(statements, loc=self._loc(start))

    def _let(self) -> A.LetStatement:
        start = self._advance()
        name = self._expect_identifier()
        self._expect("=")
        return A.LetStatement(name.text, self._expression(), loc=self._loc(start))

    def _return(self) -> A.ReturnStatement:
        start = self._advance()
        if self._check(";") or self._check("}") or self._current.kind is TokenKind.EOF:
            return A.ReturnStatement(None, loc=self._loc(start))
        return A.ReturnStatement(self._expression(), loc=self._loc(start))

    def _if(self) -> A.IfStatement:
        start = self._advance()
        condition = self._expression()
        then_branch = self._block()
        else_branch: Optional[A.Node] = None
        if self._match("else"):
            else_branch = self._if() if self._check("if") else self._block()
        return A.IfStatement(condition, then_branch, else_branch, loc=self._loc(start))

    def _for(self) -> A.ForInStatement:
        start = self._advance()
        parenthesized = self._match("(")
        variable = self._expect_identifier()
        self._expect("in")
        iterable = self._expression()
        if parenthesized:
            self._expect(")")
        body = self._block()
        return A.ForInStatement(variable.text, iterable, body, loc=self._loc(start))

    def _while(self) -> A.WhileStatement:
        start = self._advance()
        condition = self._expression()
        return A.WhileStatement(condition, self._block(), loc=self._loc(start))

    _STATEMENT_KEYWORDS: Dict[str, Callable[["Parser"], A.Node]] = {
        "let": _let,
        "return": _return,
        "if": _if,
        "for": _for,
        "while": _while,
    }

    # ── expressions ──────────────────────────────────────────────────

    def _expression(self) -> A.Node:
        return self._assignment()

    def _assignment(self) -> A.Node:
        start = self._current
        target = self._conditional()
        if self._current.is_(TokenKind.OPERATOR, "="):
            if not isinstance(target, (A.Identifier, A.Member, A.Index)):
                self._fail("expression")
            self._advance()
            return A.Assign(target, self._assignment(), loc=self._loc(start))
        return target

    def _conditional(self) -> A.Node:
        start = self._current
        condition = self._binary(0)
        if not self._current.is_(TokenKind.OPERATOR, "?"):
            return condition
        self._advance()
        then_branch = self._assignment()
        self._expect(":")
        else_branch = self._conditional()
        return A.Conditional(condition, then_branch, else_branch, loc=self._loc(start))

    def _binary(self, level: int) -> A.Node:
        if level == len(_BINARY_LEVELS):
            return self._unary()
        ops = _BINARY_LEVELS[level]
        start = self._current
        left = self._binary(level + 1)
        while self._current.kind in (TokenKind.OPERATOR, TokenKind.KEYWORD) \
                and self._current.text in ops:
            op = ops[self._advance().text]
            right = self._binary(level + 1)
            left = A.Binary(op, left, right, loc=self._loc(start))
        return left

    def _unary(self) -> A.Node:
        tok = self._current
        if tok.kind in (TokenKind.OPERATOR, TokenKind.KEYWORD) and tok.text in _UNARY_OPS:
            self._advance()
            return A.Unary(_UNARY_OPS[tok.text], self._unary(), loc=self._loc(tok))
        return self._postfix()

    def _postfix(self) -> A.Node:
        start = self._current
        expr = self._primary()
        while True:
            if self._match("("):
                expr = A.Call(expr, self._arguments(")"), loc=self._loc(start))
            elif self._check(".") or self._check("?."):
                optional = self._advance().text == "?."
                name = self._expect_identifier()
                expr = A.Member(expr, name.text, optional, loc=self._loc(start))
            elif self._match("["):
                index = self._expression()
                self._expect("]")
                expr = A.Index(expr, index, loc=self._loc(start))
            else:
                return expr

    def _arguments(self, closer: str) -> List[A.Node]:
        args: List[A.Node] = []
        if self._match(closer):
            return args
        while True:
            args.append(self._expression())
            if self._match(closer):
                return args
            if not self._match(","):
                self._fail("','", f"'{closer}'")
            # trailing comma
            if self._match(closer):
                return args

    def _primary(self) -> A.Node:
        tok = self._current
        loc = self._loc(tok)
        if tok.kind is TokenKind.NUMBER:
            self._advance()
            return A.NumberLiteral(float(tok.text), loc=loc)
        if tok.kind is TokenKind.STRING:
            self._advance()
            return A.StringLiteral(tok.text[1:-1], loc=loc)
        if tok.kind is TokenKind.IDENTIFIER:
            self._advance()
            return A.Identifier(tok.text, loc=loc)
        if tok.kind is TokenKind.KEYWORD:
            if tok.text in ("true", "false"):
                self._advance()
                return A.BooleanLiteral(tok.text == "true", loc=loc)
            if tok.text == "null":
                self._advance()
                return A.NullLiteral(loc=loc)
            if tok.text == "fn":
                return self._function()
        if tok.kind is TokenKind.PUNCT:
            if tok.text == "(":
                self._advance()
                expr = self._expression()
                self._expect(")")
                return expr
            if tok.text == "[":
                self._advance()
                return A.ArrayLiteral(self._arguments("]"), loc=loc)
            if tok.text == "{":
                return self._object()
        self._fail("expression")

    def _function(self) -> A.FunctionLiteral:
        start = self._advance()
        self._expect("(")
        params: List[str] = []
        if not self._match(")"):
            while True:
                params.append(self._expect_identifier().text)
                if self._match(")"):
                    break
                if not self._match(","):
                    self._fail("','", "')'")
        return A.FunctionLiteral(params, self._block(), loc=self._loc(start))

    def _object(self) -> A.ObjectLiteral:
        start = self._advance()
        entries = []
        while not self._match("}"):
            key = self._current
            if key.kind is TokenKind.STRING:
                name = key.text[1:-1]
            elif key.kind in (TokenKind.IDENTIFIER, TokenKind.KEYWORD):
                name = key.text
            else:
                self._fail("property name", "'}'")
            self._advance()
            self._expect(":")
            entries.append((name, self._expression()))
            if not self._match(","):
                self._expect("}")
                break
        return A.ObjectLiteral(entries, loc=self._loc(start))


def parse(tokens: Sequence[Token]) -> A.Program:
    """Parse a token list into a :class:`Program`."""
    return Parser(tokens).parse_program()
