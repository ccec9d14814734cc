"""
Defines the run context threaded through every pipeline stage.

Instead of process-wide "had error" flags, each stage receives a RunContext
and records what it finds there. The context is what the pipeline hands back
to its caller, who decides whether to abort a batch run or to reset the
context and keep reading REPL lines.
"""

from dataclasses import dataclass, field
from typing import List, Literal

from pydantic import BaseModel

from .exceptions import LoxError, LoxRuntimeError


class Diagnostic(BaseModel):
    """A single reported error, detached from the exception that produced it."""

    stage: Literal["scan", "parse", "resolve", "runtime"]
    code: str
    line: int
    where: str = ""
    message: str

    @property
    def is_runtime(self) -> bool:
        return self.stage == "runtime"

    def __str__(self) -> str:
        label = "Runtime error" if self.is_runtime else "Error"
        return f"[line {self.line}] {label}{self.where}: {self.message}"


@dataclass
class RunContext:
    """Accumulated diagnostics of one run (a script, or a single REPL line)."""

    diagnostics: List[Diagnostic] = field(default_factory=list)
    had_error: bool = False
    had_runtime_error: bool = False

    def report(self, error: LoxError) -> Diagnostic:
        diagnostic = Diagnostic(
            stage=error.stage,
            code=error.code.name,
            line=error.line,
            where=error.where,
            message=error.message,
        )
        self.diagnostics.append(diagnostic)

        if isinstance(error, LoxRuntimeError):
            self.had_runtime_error = True
        else:
            self.had_error = True
        return diagnostic

    def errors_for(self, stage: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.stage == stage]

    @property
    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]

    def reset(self):
        """Clears the flags and diagnostics so the next REPL line starts clean."""
        self.diagnostics = []
        self.had_error = False
        self.had_runtime_error = False
