from typing import List

from . import ast_nodes as ast
from .interpreter import stringify

class AstPrinter:
    """
    A utility class to print the AST in a readable Lisp-like format.
    This is extremely useful for debugging the parser.
    """
    def print_program(self, statements: List[ast.Stmt]) -> str:
        lines = []
        for stmt in statements:
            lines.append(self.print_stmt(stmt))
        return "\n".join(lines)

    # --- Statements ---

    def print_stmt(self, stmt: ast.Stmt) -> str:
        if isinstance(stmt, ast.Expression):
            return self._parenthesize("expr_stmt", stmt.expression)
        if isinstance(stmt, ast.Print):
            return self._parenthesize("print", stmt.expression)
        if isinstance(stmt, ast.Var):
            if stmt.initializer is not None:
                return self._parenthesize(f"var {stmt.name.lexeme}", stmt.initializer)
            return f"(var {stmt.name.lexeme})"
        if isinstance(stmt, ast.Block):
            lines = ["(block"]
            for statement in stmt.statements:
                lines.append(f"  {self.print_stmt(statement)}")
            lines.append(")")
            return "\n".join(lines)
        if isinstance(stmt, ast.If):
            if stmt.else_branch is not None:
                return self._parenthesize("if", stmt.condition, stmt.then_branch, "else", stmt.else_branch)
            return self._parenthesize("if", stmt.condition, stmt.then_branch)
        if isinstance(stmt, ast.While):
            return self._parenthesize("while", stmt.condition, stmt.body)
        if isinstance(stmt, ast.Break):
            return "(break)"
        if isinstance(stmt, ast.Function):
            return self._function(stmt)
        if isinstance(stmt, ast.Return):
            if stmt.value is not None:
                return self._parenthesize("return", stmt.value)
            return "(return)"
        raise TypeError(f"Unknown statement node: {type(stmt).__name__}")

    def _function(self, function: ast.Function) -> str:
        param_str = ", ".join(p.lexeme for p in function.params)
        name = function.name.lexeme if function.name is not None else ""
        lines = [f"(fun {name}({param_str}) {{"]
        for statement in function.body:
            lines.append(f"  {self.print_stmt(statement)}")
        lines.append("})")
        return "\n".join(lines)

    # --- Expressions ---

    def print_expr(self, expr: ast.Expr) -> str:
        if isinstance(expr, (ast.Binary, ast.Logical)):
            return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)
        if isinstance(expr, ast.Ternary):
            return self._parenthesize("?:", expr.condition, expr.then_branch, expr.else_branch)
        if isinstance(expr, ast.Grouping):
            return self._parenthesize("group", expr.expression)
        if isinstance(expr, ast.Literal):
            if isinstance(expr.value, str): return f'"{expr.value}"'
            return stringify(expr.value)
        if isinstance(expr, ast.Unary):
            return self._parenthesize(expr.operator.lexeme, expr.right)
        if isinstance(expr, ast.Variable):
            return expr.name.lexeme
        if isinstance(expr, ast.Assign):
            return self._parenthesize(f"= {expr.name.lexeme}", expr.value)
        if isinstance(expr, ast.Call):
            return self._parenthesize("call", expr.callee, *expr.arguments)
        if isinstance(expr, ast.AnonymousFunction):
            return self._function(expr.function)
        raise TypeError(f"Unknown expression node: {type(expr).__name__}")

    # --- Helper Method ---

    def _parenthesize(self, name: str, *parts) -> str:
        """Helper to format a node and its children."""
        result = [f"({name}"]
        for part in parts:
            if isinstance(part, ast.Expr):
                result.append(f" {self.print_expr(part)}")
            elif isinstance(part, ast.Stmt):
                result.append(f" {self.print_stmt(part)}")
            else:
                result.append(f" {str(part)}")
        result.append(")")
        return "".join(result)
