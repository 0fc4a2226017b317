from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Dict, Optional

from . import ast_nodes as ast
from .errors import ErrorReporter
from .tokens import Token


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()


@dataclass
class VariableState:
    declaration: Token
    defined: bool = False
    used: bool = False


class Resolver:
    """
    The Resolver performs static analysis to resolve all variables,
    ensuring they are declared before use and handling scopes correctly.

    It walks the program once and produces the side-table the interpreter
    uses to find local variables: expression node id -> number of scopes
    between the reference and its binding. Names found in no local scope are
    globals and get no entry.
    """
    def __init__(self, reporter: Optional[ErrorReporter] = None):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.scopes: List[Dict[str, VariableState]] = []
        self.locals: Dict[int, int] = {}
        self.current_function = FunctionType.NONE

    def resolve(self, statements: List[ast.Stmt]) -> Dict[int, int]:
        """Resolves a whole program and returns its side-table."""
        self.scopes = []
        self.locals = {}
        self.current_function = FunctionType.NONE
        self._resolve_statements(statements)
        return dict(self.locals)

    def _resolve_statements(self, statements: List[ast.Stmt]):
        for statement in statements:
            self._resolve_stmt(statement)

    # --- Scope Management ---
    def _begin_scope(self):
        self.scopes.append({})

    def _end_scope(self):
        for name, state in self.scopes.pop().items():
            if not state.used:
                self.reporter.error(state.declaration, f"Local variable '{name}' is never used.")

    def _declare(self, name: Token):
        if not self.scopes: return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.reporter.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = VariableState(name)

    def _define(self, name: Token):
        if not self.scopes: return
        self.scopes[-1][name.lexeme].defined = True

    def _resolve_local(self, expr: ast.Expr, name: Token):
        for distance, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.locals[expr.node_id] = distance
                # Writes count as a use as well as reads.
                scope[name.lexeme].used = True
                return

    def _resolve_function(self, function: ast.Function, function_type: FunctionType):
        enclosing_function = self.current_function
        self.current_function = function_type

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self._resolve_statements(function.body)
        self._end_scope()

        self.current_function = enclosing_function

    # --- Statements ---

    def _resolve_stmt(self, stmt: ast.Stmt):
        if isinstance(stmt, ast.Block):
            self._begin_scope()
            self._resolve_statements(stmt.statements)
            self._end_scope()
        elif isinstance(stmt, ast.Var):
            self._declare(stmt.name)
            if stmt.initializer is not None:
                self._resolve_expr(stmt.initializer)
            self._define(stmt.name)
        elif isinstance(stmt, ast.Function):
            # Defined before the body so the function can refer to itself.
            self._declare(stmt.name)
            self._define(stmt.name)
            self._resolve_function(stmt, FunctionType.FUNCTION)
        elif isinstance(stmt, (ast.Expression, ast.Print)):
            self._resolve_expr(stmt.expression)
        elif isinstance(stmt, ast.If):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self._resolve_stmt(stmt.else_branch)
        elif isinstance(stmt, ast.While):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.body)
        elif isinstance(stmt, ast.Return):
            if self.current_function is FunctionType.NONE:
                self.reporter.error(stmt.keyword, "Can't return from top-level code.")
            if stmt.value is not None:
                self._resolve_expr(stmt.value)
        elif isinstance(stmt, ast.Break):
            pass
        else:
            raise TypeError(f"Unknown statement node: {type(stmt).__name__}")

    # --- Expressions ---

    def _resolve_expr(self, expr: ast.Expr):
        if isinstance(expr, ast.Variable):
            if self.scopes:
                state = self.scopes[-1].get(expr.name.lexeme)
                if state is not None and not state.defined:
                    self.reporter.error(expr.name, "Can't read local variable in its own initializer.")
            self._resolve_local(expr, expr.name)
        elif isinstance(expr, ast.Assign):
            self._resolve_expr(expr.value)
            self._resolve_local(expr, expr.name)
        elif isinstance(expr, (ast.Binary, ast.Logical)):
            self._resolve_expr(expr.left)
            self._resolve_expr(expr.right)
        elif isinstance(expr, ast.Ternary):
            self._resolve_expr(expr.condition)
            self._resolve_expr(expr.then_branch)
            self._resolve_expr(expr.else_branch)
        elif isinstance(expr, ast.Unary):
            self._resolve_expr(expr.right)
        elif isinstance(expr, ast.Grouping):
            self._resolve_expr(expr.expression)
        elif isinstance(expr, ast.Call):
            self._resolve_expr(expr.callee)
            for argument in expr.arguments:
                self._resolve_expr(argument)
        elif isinstance(expr, ast.AnonymousFunction):
            self._resolve_function(expr.function, FunctionType.FUNCTION)
        elif isinstance(expr, ast.Literal):
            pass
        else:
            raise TypeError(f"Unknown expression node: {type(expr).__name__}")
