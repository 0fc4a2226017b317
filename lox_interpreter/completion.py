from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class CompletionType(Enum):
    NORMAL = auto()
    BREAK = auto()
    RETURN = auto()


@dataclass(frozen=True)
class Completion:
    """
    How a statement finished executing.

    Blocks hand any non-normal completion straight back to their caller,
    loops consume BREAK, and function calls consume RETURN and take its value.
    This keeps 'break' and 'return' out of the exception machinery, which is
    reserved for LoxRuntimeError.
    """
    completion_type: CompletionType
    value: Any = None

    @staticmethod
    def returning(value: Any) -> 'Completion':
        return Completion(CompletionType.RETURN, value)

    @property
    def is_normal(self) -> bool:
        return self.completion_type is CompletionType.NORMAL


NORMAL = Completion(CompletionType.NORMAL)
BREAK = Completion(CompletionType.BREAK)
