"""
Native functions available in the global environment.
The language ships exactly one: `clock`.
"""

import time
from typing import TYPE_CHECKING, Any, List

from .callables import LoxCallable

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


class Clock(LoxCallable):
    """Returns elapsed time in fractional seconds since an arbitrary epoch."""

    def arity(self) -> int:
        return 0

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> float:
        return float(time.perf_counter())

    def __str__(self) -> str:
        return "<native fn>"
