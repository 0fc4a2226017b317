from typing import Callable, Dict, List, Any, Optional

from . import ast_nodes as ast
from .tokens import Token, TokenType
from .errors import ErrorReporter, LoxRuntimeError
from .environment import Environment
from .callables import LoxCallable, LoxFunction, native_functions
from .completion import BREAK, NORMAL, Completion, CompletionType


def stringify(value: Any) -> str:
    """Converts a runtime value to the text 'print' shows."""
    if value is None: return "nil"
    if isinstance(value, bool): return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


class Interpreter:
    """
    The Interpreter walks the AST and executes the code.

    Statements return a Completion so 'break' and 'return' travel as plain
    values; runtime errors are raised as LoxRuntimeError and caught only in
    interpret().
    """
    def __init__(self, reporter: Optional[ErrorReporter] = None, output: Callable[[str], Any] = print):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.output = output
        self.globals = Environment()
        self.environment = self.globals
        self.locals: Dict[int, int] = {}

        for native in native_functions():
            self.globals.define(native.name, native)

    def interpret(self, statements: List[ast.Stmt], locals: Optional[Dict[int, int]] = None):
        """The main entry point for the interpreter."""
        if locals is not None:
            self.locals.update(locals)
        try:
            for statement in statements:
                self._execute(statement)
        except LoxRuntimeError as error:
            self.reporter.runtime_error(error)

    # --- STATEMENTS ---

    def _execute(self, stmt: ast.Stmt) -> Completion:
        """Executes a single statement and reports how it completed."""
        if isinstance(stmt, ast.Expression):
            self._evaluate(stmt.expression)
            return NORMAL
        if isinstance(stmt, ast.Print):
            self.output(stringify(self._evaluate(stmt.expression)))
            return NORMAL
        if isinstance(stmt, ast.Var):
            value = None
            if stmt.initializer is not None:
                value = self._evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)
            return NORMAL
        if isinstance(stmt, ast.Block):
            return self.execute_block(stmt.statements, Environment(self.environment))
        if isinstance(stmt, ast.If):
            if self._is_truthy(self._evaluate(stmt.condition)):
                return self._execute(stmt.then_branch)
            if stmt.else_branch is not None:
                return self._execute(stmt.else_branch)
            return NORMAL
        if isinstance(stmt, ast.While):
            return self._execute_while(stmt)
        if isinstance(stmt, ast.Break):
            return BREAK
        if isinstance(stmt, ast.Function):
            self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))
            return NORMAL
        if isinstance(stmt, ast.Return):
            value = None
            if stmt.value is not None:
                value = self._evaluate(stmt.value)
            return Completion.returning(value)
        raise TypeError(f"Unknown statement node: {type(stmt).__name__}")

    def _execute_while(self, stmt: ast.While) -> Completion:
        while self._is_truthy(self._evaluate(stmt.condition)):
            completion = self._execute(stmt.body)
            if completion.completion_type is CompletionType.BREAK:
                # Consumed here so it never reaches an enclosing loop.
                break
            if completion.completion_type is CompletionType.RETURN:
                return completion
        return NORMAL

    def execute_block(self, statements: List[ast.Stmt], environment: Environment) -> Completion:
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                completion = self._execute(statement)
                if not completion.is_normal:
                    return completion
            return NORMAL
        finally:
            self.environment = previous

    # --- HELPER METHODS FOR RUNTIME CHECKS ---

    def _is_truthy(self, obj: Any) -> bool:
        """Defines what is 'true' in Lox. False and nil are falsey."""
        if obj is None: return False
        if isinstance(obj, bool): return obj
        return True

    def _is_equal(self, a: Any, b: Any) -> bool:
        """Defines equality in Lox. Values of different types are never equal."""
        if a is None and b is None: return True
        if a is None or b is None: return False
        if type(a) is not type(b): return False
        return a == b

    def _check_number_operand(self, operator: Token, operand: Any):
        if isinstance(operand, float): return
        raise LoxRuntimeError(operator, "Operand must be a number.")

    def _check_number_operands(self, operator: Token, left: Any, right: Any):
        if isinstance(left, float) and isinstance(right, float): return
        raise LoxRuntimeError(operator, "Operands must be numbers.")

    def _look_up_variable(self, name: Token, expr: ast.Expr) -> Any:
        distance = self.locals.get(expr.node_id)
        if distance is not None:
            return self.environment.get_at(distance, name)
        return self.globals.get(name)

    # --- EXPRESSIONS ---

    def _evaluate(self, expr: ast.Expr) -> Any:
        """Evaluates a single expression."""
        if isinstance(expr, ast.Literal):
            return expr.value
        if isinstance(expr, ast.Grouping):
            return self._evaluate(expr.expression)
        if isinstance(expr, ast.Variable):
            return self._look_up_variable(expr.name, expr)
        if isinstance(expr, ast.Assign):
            value = self._evaluate(expr.value)
            distance = self.locals.get(expr.node_id)
            if distance is not None:
                self.environment.assign_at(distance, expr.name, value)
            else:
                self.globals.assign(expr.name, value)
            return value
        if isinstance(expr, ast.Unary):
            return self._unary(expr)
        if isinstance(expr, ast.Binary):
            return self._binary(expr)
        if isinstance(expr, ast.Logical):
            left = self._evaluate(expr.left)
            if expr.operator.token_type == TokenType.OR:
                if self._is_truthy(left):
                    return left
            else: # AND
                if not self._is_truthy(left):
                    return left
            return self._evaluate(expr.right)
        if isinstance(expr, ast.Ternary):
            if self._is_truthy(self._evaluate(expr.condition)):
                return self._evaluate(expr.then_branch)
            return self._evaluate(expr.else_branch)
        if isinstance(expr, ast.Call):
            return self._call(expr)
        if isinstance(expr, ast.AnonymousFunction):
            return LoxFunction(expr.function, self.environment)
        raise TypeError(f"Unknown expression node: {type(expr).__name__}")

    def _unary(self, expr: ast.Unary) -> Any:
        right = self._evaluate(expr.right)
        if expr.operator.token_type == TokenType.MINUS:
            self._check_number_operand(expr.operator, right)
            return -right
        # BANG
        return not self._is_truthy(right)

    def _binary(self, expr: ast.Binary) -> Any:
        left = self._evaluate(expr.left)
        right = self._evaluate(expr.right)
        op_type = expr.operator.token_type

        if op_type == TokenType.COMMA:
            return right

        if op_type == TokenType.MINUS:
            self._check_number_operands(expr.operator, left, right)
            return left - right
        if op_type == TokenType.SLASH:
            self._check_number_operands(expr.operator, left, right)
            if right == 0.0:
                raise LoxRuntimeError(expr.operator, "Division by zero.")
            return left / right
        if op_type == TokenType.STAR:
            self._check_number_operands(expr.operator, left, right)
            return left * right
        if op_type == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            if isinstance(left, str):
                return left + stringify(right)
            if isinstance(right, str):
                return stringify(left) + right
            raise LoxRuntimeError(expr.operator, "Operands must be two numbers or two strings.")

        if op_type == TokenType.GREATER:
            self._check_number_operands(expr.operator, left, right)
            return left > right
        if op_type == TokenType.GREATER_EQUAL:
            self._check_number_operands(expr.operator, left, right)
            return left >= right
        if op_type == TokenType.LESS:
            self._check_number_operands(expr.operator, left, right)
            return left < right
        if op_type == TokenType.LESS_EQUAL:
            self._check_number_operands(expr.operator, left, right)
            return left <= right

        if op_type == TokenType.EQUAL_EQUAL:
            return self._is_equal(left, right)
        if op_type == TokenType.BANG_EQUAL:
            return not self._is_equal(left, right)

        raise LoxRuntimeError(expr.operator, f"Unknown binary operator '{expr.operator.lexeme}'.")

    def _call(self, expr: ast.Call) -> Any:
        callee = self._evaluate(expr.callee)

        arguments = []
        for argument in expr.arguments:
            arguments.append(self._evaluate(argument))

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        return callee.call(self, arguments)
