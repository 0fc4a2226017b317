import argparse
import sys
from typing import Optional

from .ast_printer import AstPrinter
from .errors import ErrorReporter
from .interpreter import Interpreter
from .lexer import Lexer
from .parser import Parser
from .resolver import Resolver


EXIT_USAGE = 64
EXIT_STATIC_ERROR = 65
EXIT_RUNTIME_ERROR = 70


class Lox:
    """Runs source text through lexer, parser, resolver and interpreter."""
    def __init__(self, reporter: Optional[ErrorReporter] = None, output=print):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.output = output
        # One interpreter per session so globals survive between REPL lines.
        self.interpreter = Interpreter(self.reporter, output)

    @property
    def had_error(self) -> bool:
        return self.reporter.had_error

    @property
    def had_runtime_error(self) -> bool:
        return self.reporter.had_runtime_error

    def run(self, source: str, print_ast: bool = False):
        tokens = Lexer(source, self.reporter).scan_tokens()
        statements = Parser(tokens, self.reporter).parse()
        if self.had_error:
            return

        if print_ast:
            self.output(AstPrinter().print_program(statements))
            return

        locals = Resolver(self.reporter).resolve(statements)
        # A program with static errors is never executed.
        if self.had_error:
            return

        self.interpreter.interpret(statements, locals)

    def run_file(self, path: str, print_ast: bool = False) -> int:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
        self.run(source, print_ast)
        if self.had_error: return EXIT_STATIC_ERROR
        if self.had_runtime_error: return EXIT_RUNTIME_ERROR
        return 0

    def run_prompt(self, print_ast: bool = False):
        print("Lox REPL (Ctrl+C to exit)")
        while True:
            try:
                line = input("> ")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting.")
                break
            if not line: continue
            self.run(line, print_ast)
            self.reporter.reset()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="lox", description="Tree-walking Lox interpreter.")
    parser.add_argument("script", nargs="?", help="script to run (if omitted, starts the REPL)")
    parser.add_argument("--print-ast", action="store_true", help="print the parsed program instead of running it")
    args = parser.parse_args(argv)

    lox = Lox()
    if args.script is None:
        lox.run_prompt(args.print_ast)
        return 0

    try:
        return lox.run_file(args.script, args.print_ast)
    except OSError as error:
        print(f"Could not read '{args.script}': {error.strerror}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
