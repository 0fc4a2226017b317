import io

import pytest

from lox_interpreter.errors import ErrorReporter
from lox_interpreter.lox import Lox
from lox_interpreter.tokens import Token, TokenType


def run(source):
    """
    Runs a full lexer -> parser -> resolver -> interpreter pass.
    Returns the printed lines, the diagnostics and the runner.
    """
    stream = io.StringIO()
    lines = []
    lox = Lox(ErrorReporter(stream), output=lines.append)
    lox.run(source)
    return lines, stream.getvalue(), lox


def global_value(lox, name):
    return lox.interpreter.globals.get(Token(TokenType.IDENTIFIER, name, None, 0))


@pytest.mark.parametrize("source, expected", [
    ("print 1 + 2 * 3;", "7"),
    ("print (1 + 2) * 3;", "9"),
    ("print 1, 2, 3;", "3"),
    ("print 3.5;", "3.5"),
    ("print 10 / 4;", "2.5"),
    ("print -3;", "-3"),
    ("print nil;", "nil"),
    ("print !nil;", "true"),
    ('print "a" + "b";', "ab"),
    ('print "n=" + 1;', "n=1"),
    ('print 2.5 + "x";', "2.5x"),
    ('print "is " + true;', "is true"),
    ('print "f: " + clock;', "f: <native fn>"),
    ("print 1 == 1;", "true"),
    ("print 1 != 2;", "true"),
    ('print 1 == "1";', "false"),
    ("print 1 == true;", "false"),
    ("print nil == false;", "false"),
    ("print nil == nil;", "true"),
    ("print 2 >= 2;", "true"),
    ("print 1 < 0;", "false"),
    ("print 100000000000000000000;", "1e+20"),
    ("print 0.0000001;", "1e-07"),
])
def test_expressions(source, expected):
    lines, output, _ = run(source)
    assert output == ""
    assert lines == [expected]


@pytest.mark.parametrize("source, expected", [
    ("print 0 ? 1 : 2;", "1"),
    ('print "" ? 1 : 2;', "1"),
    ("print nil ? 1 : 2;", "2"),
    ("print false ? 1 : true ? 2 : 3;", "2"),
])
def test_truthiness(source, expected):
    lines, _, _ = run(source)
    assert lines == [expected]


def test_logical_operators_return_operands():
    lines, _, _ = run('print "a" or "b"; print nil or "b"; print false and "a"; print 1 and 2;')
    assert lines == ["a", "b", "false", "2"]


def test_short_circuit_skips_right_operand():
    source = """
    var calls = 0;
    fun touch() { calls = calls + 1; return true; }
    var a = true or touch();
    var b = false and touch();
    var c = true ? 1 : touch();
    print calls;
    """
    lines, _, _ = run(source)
    assert lines == ["0"]


def test_for_loop_runs_exactly_three_times():
    lines, _, _ = run("for (var i = 0; i < 3; i = i + 1) print i;")
    assert lines == ["0", "1", "2"]


def test_while_loop_and_final_state():
    source = """
    var i = 0;
    var total = 0;
    while (i < 5) {
        total = total + i;
        i = i + 1;
    }
    """
    _, _, lox = run(source)
    # 0 + 1 + 2 + 3 + 4 = 10
    assert global_value(lox, "total") == 10.0
    assert global_value(lox, "i") == 5.0


def test_shadowing_leaves_outer_binding_untouched():
    lines, _, _ = run('var a = "global"; { var a = "local"; print a; } print a;')
    assert lines == ["local", "global"]


def test_if_else():
    lines, _, _ = run("var x = 10; if (x > 5) x = 20; else x = 0; print x; if (x < 0) print 1;")
    assert lines == ["20"]


def test_closures_give_independent_counters():
    source = """
    fun makeCounter() {
        var i = 0;
        fun inc() {
            i = i + 1;
            return i;
        }
        return inc;
    }
    var first = makeCounter();
    var second = makeCounter();
    print first();
    print first();
    print second();
    """
    lines, output, _ = run(source)
    assert output == ""
    assert lines == ["1", "2", "1"]


def test_closures_share_one_captured_environment():
    source = """
    var get;
    var set;
    fun pair() {
        var value = "initial";
        fun getter() { return value; }
        fun setter(v) { value = v; }
        get = getter;
        set = setter;
    }
    pair();
    set("updated");
    print get();
    """
    lines, _, _ = run(source)
    assert lines == ["updated"]


def test_closure_binds_to_definition_scope_not_later_shadowing():
    source = """
    var a = "global";
    {
        fun show() { print a; }
        show();
        var a = "block";
        show();
        print a;
    }
    """
    lines, output, _ = run(source)
    assert output == ""
    assert lines == ["global", "global", "block"]


def test_recursion():
    source = """
    fun fib(n) {
        if (n <= 1) return n;
        return fib(n - 2) + fib(n - 1);
    }
    print fib(8);
    """
    lines, _, _ = run(source)
    assert lines == ["21"]


def test_return_unwinds_through_nested_loops_and_blocks():
    source = """
    fun find() {
        for (var i = 0; i < 10; i = i + 1) {
            while (true) {
                if (i == 3) { return i; }
                break;
            }
        }
        return -1;
    }
    print find();
    """
    lines, _, _ = run(source)
    assert lines == ["3"]


def test_function_without_return_yields_nil():
    lines, _, _ = run("fun f() {} print f(); fun g() { return; } print g();")
    assert lines == ["nil", "nil"]


def test_break_only_exits_the_inner_loop():
    source = """
    for (var i = 0; i < 3; i = i + 1) {
        for (var j = 0; j < 3; j = j + 1) {
            if (j == 1) break;
            print i + ":" + j;
        }
    }
    print "done";
    """
    lines, _, _ = run(source)
    assert lines == ["0:0", "1:0", "2:0", "done"]


def test_break_stops_statements_after_it():
    lines, _, _ = run("while (true) { print 1; break; print 2; } print 3;")
    assert lines == ["1", "3"]


def test_anonymous_functions_and_chained_calls():
    source = """
    fun adder(a) { return fun (b) { return a + b; }; }
    print adder(1)(2);
    var twice = fun (f, x) { return f(f(x)); };
    print twice(fun (n) { return n * 2; }, 3);
    print fun () {};
    """
    lines, output, _ = run(source)
    assert output == ""
    assert lines == ["3", "12", "<fn>"]


def test_function_values_print_their_name():
    lines, _, _ = run("fun hello() {} print hello; print clock;")
    assert lines == ["<fn hello>", "<native fn>"]


def test_clock_returns_seconds():
    lines, _, lox = run("var t = clock(); print t > 0;")
    assert lines == ["true"]
    assert isinstance(global_value(lox, "t"), float)


@pytest.mark.parametrize("source, expected_error", [
    ("1 / 0;", "Division by zero."),
    ("-7 / 0;", "Division by zero."),
    ("0 / 0;", "Division by zero."),
    ('"a" - 1;', "Operands must be numbers."),
    ("true * 2;", "Operands must be numbers."),
    ('"a" < "b";', "Operands must be numbers."),
    ('-"a";', "Operand must be a number."),
    ("nil + 1;", "Operands must be two numbers or two strings."),
    ("undefined = 1;", "Undefined variable 'undefined'."),
    ("print missing;", "Undefined variable 'missing'."),
    ('"not a function"();', "Can only call functions and classes."),
    ("fun f(a, b) { return a + b; } f(1);", "Expected 2 arguments but got 1."),
    ("clock(1);", "Expected 0 arguments but got 1."),
])
def test_runtime_errors(source, expected_error):
    lines, output, lox = run(source)
    assert lox.had_runtime_error
    assert not lox.had_error
    assert expected_error in output
    assert "[Line 1]" in output


def test_runtime_error_stops_the_remaining_statements():
    lines, output, lox = run("print 1;\nprint 1 / 0;\nprint 2;")
    assert lines == ["1"]
    assert "[Line 2]" in output
    assert lox.had_runtime_error


def test_runtime_error_inside_block_restores_environment():
    stream = io.StringIO()
    lines = []
    lox = Lox(ErrorReporter(stream), output=lines.append)
    lox.run('var a = "outer"; { var a = "inner"; print a / 2; }')
    assert lox.had_runtime_error
    assert lox.interpreter.environment is lox.interpreter.globals

    lox.reporter.reset()
    lox.run("print a;")
    assert lines == ["outer"]


def test_static_errors_prevent_execution():
    lines, output, lox = run('print "before"; { var a = a; }')
    assert lox.had_error
    assert lines == []
    assert "own initializer" in output


def test_parse_errors_prevent_execution():
    lines, _, lox = run('print "before"; print ;')
    assert lox.had_error
    assert lines == []


def test_globals_persist_across_runs():
    stream = io.StringIO()
    lines = []
    lox = Lox(ErrorReporter(stream), output=lines.append)
    lox.run("var count = 1;")
    lox.run("fun bump() { count = count + 1; return count; }")
    lox.run("print bump();")
    assert lines == ["2"]
