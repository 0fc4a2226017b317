import pytest

from lox_interpreter.environment import Environment
from lox_interpreter.errors import LoxRuntimeError
from lox_interpreter.tokens import Token, TokenType


def name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, None, 1)


def test_get_walks_the_enclosing_chain():
    outer = Environment()
    outer.define("a", 1.0)
    inner = Environment(Environment(outer))
    assert inner.get(name("a")) == 1.0


def test_get_at_and_assign_at_use_exact_distance():
    outer = Environment()
    outer.define("a", "outer")
    inner = Environment(outer)
    inner.define("a", "inner")

    assert inner.get_at(0, name("a")) == "inner"
    assert inner.get_at(1, name("a")) == "outer"

    inner.assign_at(1, name("a"), "changed")
    assert outer.values["a"] == "changed"
    assert inner.values["a"] == "inner"


def test_assign_to_unbound_name_is_a_runtime_error():
    environment = Environment(Environment())
    with pytest.raises(LoxRuntimeError) as error:
        environment.assign(name("nope"), 1.0)
    assert error.value.message == "Undefined variable 'nope'."


def test_child_keeps_its_parent_alive():
    def make():
        parent = Environment()
        parent.define("x", 42.0)
        return Environment(parent)

    child = make()
    assert child.get(name("x")) == 42.0
