"""
Custom exception types for the Lox interpreter.
"""

from enum import Enum
from typing import Optional

from lox.scanner.tokens import Token, TokenType


class ErrorCode(Enum):

    # --- Scan Errors ---
    UNEXPECTED_CHARACTER = "Unexpected character '{char}'."
    UNTERMINATED_STRING = "Unterminated string."

    # --- Parse Errors ---
    # 'expected' is a short description such as "';' after value" or "variable name".
    EXPECTED_TOKEN = "Expect {expected}."
    EXPECT_EXPRESSION = "Expect expression."
    INVALID_ASSIGNMENT_TARGET = "Invalid assignment target."
    TOO_MANY_ARGUMENTS = "Can't have more than {limit} arguments."
    TOO_MANY_PARAMETERS = "Can't have more than {limit} parameters."

    # --- Resolution Errors ---
    DUPLICATE_VARIABLE = "Already a variable with this name in this scope."
    SELF_REFERENTIAL_INITIALIZER = "Can't read local variable in its own initializer."
    TOP_LEVEL_RETURN = "Can't return from top-level code."
    RETURN_VALUE_FROM_INITIALIZER = "Can't return a value from an initializer."
    THIS_OUTSIDE_CLASS = "Can't use 'this' outside of a class."
    SUPER_OUTSIDE_CLASS = "Can't use 'super' outside of a class."
    SUPER_WITHOUT_SUPERCLASS = "Can't use 'super' in a class with no superclass."
    SELF_INHERITANCE = "A class can't inherit from itself."

    # --- Runtime Errors ---
    OPERAND_MUST_BE_NUMBER = "Operand must be a number."
    OPERANDS_MUST_BE_NUMBERS = "Operands must be numbers."
    OPERANDS_MUST_BE_NUMBERS_OR_STRINGS = "Operands must be two numbers or two strings."
    NOT_CALLABLE = "Can only call functions and classes."
    ARGUMENT_COUNT_MISMATCH = "Expected {expected} arguments but got {provided}."
    ONLY_INSTANCES_HAVE_PROPERTIES = "Only instances have properties."
    ONLY_INSTANCES_HAVE_FIELDS = "Only instances have fields."
    UNDEFINED_PROPERTY = "Undefined property '{name}'."
    UNDEFINED_VARIABLE = "Undefined variable '{name}'."
    SUPERCLASS_MUST_BE_CLASS = "Superclass must be a class."
    STACK_OVERFLOW = "Stack overflow."


class LoxError(Exception):
    """
    Base class for every error the language reports to its user.
    The message is built from the ErrorCode template and the keyword details;
    the location comes from the offending token when there is one.
    """

    stage = "error"

    def __init__(
        self,
        code: ErrorCode,
        token: Optional[Token] = None,
        line: Optional[int] = None,
        **kwargs,
    ):
        self.code = code
        self.token = token
        self.details = kwargs
        self.message = code.value.format(**kwargs)

        if line is None and token is not None:
            line = token.line
        self.line = line if line is not None else 0

        super().__init__(self.message)

    @property
    def where(self) -> str:
        """The location suffix of a report: '', ' at end' or " at '<lexeme>'"."""
        if self.token is None:
            return ""
        if self.token.kind == TokenType.EOF:
            return " at end"
        return f" at '{self.token.lexeme}'"


class ScanError(LoxError):
    stage = "scan"


class ParseError(LoxError):
    stage = "parse"


class ResolutionError(LoxError):
    stage = "resolve"


class LoxRuntimeError(LoxError):
    stage = "runtime"


# Raised when the interpreter reaches a state that only a bug can produce.
class InternalInterpreterError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
