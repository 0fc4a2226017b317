import os
import sys
from typing import Optional, TextIO

from termcolor import colored

from .tokens import Token, TokenType


class LoxRuntimeError(RuntimeError):
    """Custom exception for reporting runtime errors."""
    def __init__(self, token: Token, message: str):
        self.token = token
        self.message = message
        super().__init__(self.message)


class ErrorReporter:
    """
    Collects diagnostics from every stage of the pipeline.

    Static errors (scanner, parser, resolver) may be reported many times per
    run and only set `had_error`. A runtime error sets `had_runtime_error`.
    The runner checks both flags to decide whether to interpret and which
    exit code to use.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False

    def line_error(self, line: int, message: str):
        """Reports an error that only has a line, e.g. from the scanner."""
        self._report(line, "", message)

    def error(self, token: Token, message: str):
        """Reports a static error at the given token."""
        if token.token_type == TokenType.EOF:
            self._report(token.line, " at end", message)
        else:
            self._report(token.line, f" at '{token.lexeme}'", message)

    def runtime_error(self, error: LoxRuntimeError):
        self._write(error.token.line, "RuntimeError", "", error.message)
        self.had_runtime_error = True

    def reset(self):
        self.had_error = False
        self.had_runtime_error = False

    def _report(self, line: int, where: str, message: str):
        self._write(line, "Error", where, message)
        self.had_error = True

    def _write(self, line: int, label: str, where: str, message: str):
        # Resolved lazily so redirect_stderr() in tests is honoured.
        target = self.stream if self.stream is not None else sys.stderr
        label = colored(label, "red", attrs=["bold"], **_colour_options(target))
        print(f"[Line {line}] {label}{where}: {message}", file=target)


def _colour_options(target: TextIO) -> dict:
    """Colour follows the stream written to, not sys.stdout."""
    if not (hasattr(target, "isatty") and target.isatty()):
        return {"no_color": True}
    if "NO_COLOR" in os.environ or "ANSI_COLORS_DISABLED" in os.environ:
        return {"no_color": True}
    return {"force_color": True}
