"""
AST node definitions.

The node set is closed: each pass (interpreter, resolver, printer) dispatches
over these classes with an isinstance chain in a single function per pass.
Nodes are frozen once built. Every expression carries a `node_id`, handed out
in construction order, which keys the resolver's side-table.
"""
import itertools
from dataclasses import dataclass, field
from typing import List, Any, Optional

from .tokens import Token


_node_ids = itertools.count(1)


def _next_node_id() -> int:
    return next(_node_ids)


# --- Base Classes for AST Nodes ---

class Expr:
    pass


class Stmt:
    pass


def node_field():
    return field(default_factory=_next_node_id, kw_only=True, compare=False, repr=False)


# --- Concrete Expression Nodes ---

@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr
    node_id: int = node_field()


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr
    node_id: int = node_field()


@dataclass(frozen=True)
class Literal(Expr):
    value: Any
    node_id: int = node_field()


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr
    node_id: int = node_field()


@dataclass(frozen=True)
class Ternary(Expr):
    condition: Expr
    then_branch: Expr
    else_branch: Expr
    node_id: int = node_field()


@dataclass(frozen=True)
class Variable(Expr):
    name: Token
    node_id: int = node_field()


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr
    node_id: int = node_field()


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr
    node_id: int = node_field()


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: List[Expr]
    node_id: int = node_field()


@dataclass(frozen=True)
class AnonymousFunction(Expr):
    keyword: Token
    function: 'Function'
    node_id: int = node_field()


# --- Concrete Statement Nodes ---

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Break(Stmt):
    keyword: Token


@dataclass(frozen=True)
class Function(Stmt):
    # None only for the declaration wrapped by an AnonymousFunction.
    name: Optional[Token]
    params: List[Token]
    body: List[Stmt]


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]
