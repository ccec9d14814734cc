"""
Execution outcomes of a statement.

A `return` does not unwind the Python stack with an exception: every statement
execution hands back either COMPLETED or a Returning carrying the value.
Blocks and loops stop and pass a Returning upwards untouched; the function
call that owns the frame is the only place that consumes it.
"""

from dataclasses import dataclass
from typing import Any, Union


class Completed:
    """The statement ran to its end; execution continues with the next one."""

    def __repr__(self) -> str:
        return "COMPLETED"


COMPLETED = Completed()


@dataclass(frozen=True)
class Returning:
    """A `return` statement is unwinding towards its enclosing function call."""

    value: Any = None


ExecutionOutcome = Union[Completed, Returning]
