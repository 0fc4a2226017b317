import io

from lox_interpreter.errors import ErrorReporter
from lox_interpreter.lexer import Lexer
from lox_interpreter.tokens import TokenType


def scan(source):
    stream = io.StringIO()
    reporter = ErrorReporter(stream)
    tokens = Lexer(source, reporter).scan_tokens()
    return tokens, reporter, stream.getvalue()


def token_types(source):
    tokens, _, _ = scan(source)
    return [t.token_type for t in tokens]


def test_punctuation_and_operators():
    assert token_types("(){},.-+;*?:! != = == > >= < <= /") == [
        TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
        TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS, TokenType.SEMICOLON,
        TokenType.STAR, TokenType.QUESTION, TokenType.COLON, TokenType.BANG, TokenType.BANG_EQUAL,
        TokenType.EQUAL, TokenType.EQUAL_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL,
        TokenType.LESS, TokenType.LESS_EQUAL, TokenType.SLASH, TokenType.EOF,
    ]


def test_keywords_and_identifiers():
    assert token_types("var breakfast break fun nil print") == [
        TokenType.VAR, TokenType.IDENTIFIER, TokenType.BREAK, TokenType.FUN,
        TokenType.NIL, TokenType.PRINT, TokenType.EOF,
    ]


def test_numbers_are_always_floats():
    tokens, _, _ = scan("12 3.5")
    assert tokens[0].literal == 12.0
    assert isinstance(tokens[0].literal, float)
    assert tokens[1].literal == 3.5


def test_strings_and_line_counting():
    tokens, _, _ = scan('"a\nb" x')
    assert tokens[0].token_type == TokenType.STRING
    assert tokens[0].literal == "a\nb"
    assert tokens[1].line == 2


def test_comments_are_skipped():
    assert token_types("// line comment\n/* block\ncomment */ x") == [TokenType.IDENTIFIER, TokenType.EOF]


def test_unexpected_character_is_reported_and_scanning_continues():
    tokens, reporter, output = scan("@ x")
    assert reporter.had_error
    assert "Unexpected character" in output
    assert tokens[0].token_type == TokenType.IDENTIFIER


def test_unterminated_string():
    _, reporter, output = scan('"never closed')
    assert reporter.had_error
    assert "Unterminated string." in output


def test_unterminated_block_comment():
    tokens, reporter, output = scan("/* open")
    assert reporter.had_error
    assert "Unterminated block comment." in output
    assert [t.token_type for t in tokens] == [TokenType.EOF]
