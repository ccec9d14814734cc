"""
Utility functions for the Lox interpreter, including terminal coloring,
and a JSON artifact serializer for the pipeline stage dumps.
"""

import json
from enum import Enum

from pydantic import BaseModel


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


class ArtifactEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, BaseModel):
            # AST fields are typed with the Expr/Stmt base classes; dump the concrete node.
            return o.model_dump(mode="json", serialize_as_any=True)
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, set):
            return list(o)
        return super().default(o)
