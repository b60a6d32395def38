"""
kodiscript_diagnostics.engine — reference KodiScript Script Engine.

The diagnostics core treats the Script Engine as an opaque module exposing

    tokenize(source: str) -> Tokens          # raises on lexical errors
    parse(tokens) -> AST                     # raises on grammar errors

This package is the default implementation of that contract: a Parsimonious
lexical grammar and a recursive-descent parser.  It checks syntax only; the
language interpreter is not part of this project.

>>> from kodiscript_diagnostics.engine import tokenize, parse
>>> program = parse(tokenize("let x = 1"))
>>> program.statements[0].name
'x'
"""

from __future__ import annotations

from kodiscript_diagnostics.engine.lexer import tokenize
from kodiscript_diagnostics.engine.parser import parse
from kodiscript_diagnostics.engine.tokens import Token, TokenKind

__all__ = ["tokenize", "parse", "Token", "TokenKind"]
