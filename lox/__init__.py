"""
A tree-walking interpreter for the Lox scripting language.

The four pipeline stages are exposed individually (scan, parse, resolve,
interpret) and chained by run_source.
"""

from .diagnostics import Diagnostic, RunContext
from .interpreter import Interpreter, interpret
from .parser.core.parser import parse
from .pipeline import InterpreterPipeline, run_source
from .scanner.scanner import scan
from .semantic_analyser.core.resolver import resolve

__all__ = [
    "Diagnostic",
    "Interpreter",
    "InterpreterPipeline",
    "RunContext",
    "interpret",
    "parse",
    "resolve",
    "run_source",
    "scan",
]
