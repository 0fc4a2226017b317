from .errors import ErrorReporter, LoxRuntimeError
from .interpreter import Interpreter
from .lexer import Lexer
from .lox import Lox
from .parser import Parser
from .resolver import Resolver
