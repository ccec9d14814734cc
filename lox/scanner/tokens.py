"""
Defines the lexical units produced by the scanner stage.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class TokenType(Enum):

    # --- Single-character tokens ---
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    LEFT_BRACE = "LEFT_BRACE"
    RIGHT_BRACE = "RIGHT_BRACE"
    COMMA = "COMMA"
    DOT = "DOT"
    MINUS = "MINUS"
    PLUS = "PLUS"
    SEMICOLON = "SEMICOLON"
    SLASH = "SLASH"
    STAR = "STAR"

    # --- One or two character tokens ---
    BANG = "BANG"
    BANG_EQUAL = "BANG_EQUAL"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"

    # --- Literals ---
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # --- Keywords ---
    AND = "AND"
    CLASS = "CLASS"
    ELSE = "ELSE"
    FALSE = "FALSE"
    FUN = "FUN"
    FOR = "FOR"
    IF = "IF"
    NIL = "NIL"
    OR = "OR"
    PRINT = "PRINT"
    RETURN = "RETURN"
    SUPER = "SUPER"
    THIS = "THIS"
    TRUE = "TRUE"
    VAR = "VAR"
    WHILE = "WHILE"

    EOF = "EOF"


class Token(BaseModel):
    """A single lexeme with its kind, its literal value (if any) and its source line."""

    model_config = ConfigDict(frozen=True)

    kind: TokenType
    lexeme: str
    # float first so integer inputs are coerced to numbers
    literal: Optional[Union[float, str]] = None
    line: int

    def __str__(self) -> str:
        return f"{self.kind.value} {self.lexeme} {'nil' if self.literal is None else self.literal}"
