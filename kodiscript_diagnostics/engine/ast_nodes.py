"""
AST node definitions for the reference KodiScript engine.

Every node records the (line, column) of its first token in ``loc``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Loc = Tuple[int, int]


@dataclass
class Node:
    loc: Loc = field(default=(1, 1), kw_only=True)


# ─────────────────────────────────────────────────────────────
# Expressions
# ─────────────────────────────────────────────────────────────

@dataclass
class Identifier(Node):
    name: str


@dataclass
class NumberLiteral(Node):
    value: float


@dataclass
class StringLiteral(Node):
    value: str


@dataclass
class BooleanLiteral(Node):
    value: bool


@dataclass
class NullLiteral(Node):
    pass


@dataclass
class ArrayLiteral(Node):
    elements: List[Node] = field(default_factory=list)


@dataclass
class ObjectLiteral(Node):
    entries: List[Tuple[str, Node]] = field(default_factory=list)


@dataclass
class FunctionLiteral(Node):
    params: List[str]
    body: Block


@dataclass
class Unary(Node):
    op: str
    operand: Node


@dataclass
class Binary(Node):
    op: str
    left: Node
    right: Node


@dataclass
class Conditional(Node):
    condition: Node
    then_branch: Node
    else_branch: Node


@dataclass
class Assign(Node):
    target: Node
    value: Node


@dataclass
class Call(Node):
    callee: Node
    args: List[Node] = field(default_factory=list)


@dataclass
class Member(Node):
    obj: Node
    name: str
    optional: bool = False


@dataclass
class Index(Node):
    obj: Node
    index: Node


# ─────────────────────────────────────────────────────────────
# Statements
# ─────────────────────────────────────────────────────────────

@dataclass
class Block(Node):
    statements: List[Node] = field(default_factory=list)


@dataclass
class LetStatement(Node):
    name: str
    value: Node


@dataclass
class ReturnStatement(Node):
    value: Optional[Node] = None


@dataclass
class IfStatement(Node):
    condition: Node
    then_branch: Block
    else_branch: Optional[Node] = None


@dataclass
class ForInStatement(Node):
    variable: str
    iterable: Node
    body: Block


@dataclass
class WhileStatement(Node):
    condition: Node
    body: Block


@dataclass
class ExpressionStatement(Node):
    expression: Node


@dataclass
class Program(Node):
    statements: List[Node] = field(default_factory=list)
