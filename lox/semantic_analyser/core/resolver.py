from enum import Enum, auto
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from lox.config import INITIALIZER_NAME, SUPER_KEYWORD, THIS_KEYWORD
from lox.diagnostics import RunContext
from lox.exceptions import ErrorCode, InternalInterpreterError, ResolutionError
from lox.parser.core.classes import *
from lox.scanner.tokens import Token

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    """
    Static pass run between parsing and execution.

    It walks the AST once, tracking the lexical scopes that will exist at run
    time, and tells the interpreter how many frames separate each local
    variable reference from the frame that declares it. It also reports the
    semantic errors that can be detected without running the program.

    Each scope maps a name to False while its initializer is being resolved
    ("declared") and to True once it is usable ("defined"). The global scope
    is never pushed: names that are not found in any scope are left for the
    interpreter to look up dynamically in the globals.
    """

    def __init__(self, interpreter: "Interpreter", context: RunContext):
        self.interpreter = interpreter
        self.context = context
        self.scopes: List[Dict[str, bool]] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements: List[Stmt]):
        for statement in statements:
            self._resolve_statement(statement)

    # --- Statements ---

    def _resolve_statement(self, stmt: Stmt):
        match stmt:
            case Block():
                self._begin_scope()
                self.resolve(stmt.statements)
                self._end_scope()
            case ClassDecl():
                self._resolve_class(stmt)
            case ExpressionStmt():
                self._resolve_expression(stmt.expression)
            case FunDecl():
                # Defined before the body so the function can refer to itself.
                self._declare(stmt.name)
                self._define(stmt.name)
                self._resolve_function(stmt, FunctionType.FUNCTION)
            case If():
                self._resolve_expression(stmt.condition)
                self._resolve_statement(stmt.then_branch)
                if stmt.else_branch is not None:
                    self._resolve_statement(stmt.else_branch)
            case Print():
                self._resolve_expression(stmt.expression)
            case Return():
                self._resolve_return(stmt)
            case VarDecl():
                self._declare(stmt.name)
                if stmt.initializer is not None:
                    self._resolve_expression(stmt.initializer)
                self._define(stmt.name)
            case While():
                self._resolve_expression(stmt.condition)
                self._resolve_statement(stmt.body)
            case _:
                raise InternalInterpreterError(f"Resolver has no rule for statement '{type(stmt).__name__}'.")

    def _resolve_class(self, stmt: ClassDecl):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self._error(stmt.superclass.name, ErrorCode.SELF_INHERITANCE)
            self.current_class = ClassType.SUBCLASS
            self._resolve_expression(stmt.superclass)

            self._begin_scope()
            self.scopes[-1][SUPER_KEYWORD] = True

        self._begin_scope()
        self.scopes[-1][THIS_KEYWORD] = True

        for method in stmt.methods:
            declaration = FunctionType.INITIALIZER if method.name.lexeme == INITIALIZER_NAME else FunctionType.METHOD
            self._resolve_function(method, declaration)

        self._end_scope()

        if stmt.superclass is not None:
            self._end_scope()

        self.current_class = enclosing_class

    def _resolve_return(self, stmt: Return):
        if self.current_function == FunctionType.NONE:
            self._error(stmt.keyword, ErrorCode.TOP_LEVEL_RETURN)

        if stmt.value is not None:
            if self.current_function == FunctionType.INITIALIZER:
                self._error(stmt.keyword, ErrorCode.RETURN_VALUE_FROM_INITIALIZER)
            self._resolve_expression(stmt.value)

    def _resolve_function(self, function: FunDecl, function_type: FunctionType):
        enclosing_function = self.current_function
        self.current_function = function_type

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self.resolve(function.body)
        self._end_scope()

        self.current_function = enclosing_function

    # --- Expressions ---

    def _resolve_expression(self, expr: Expr):
        match expr:
            case Assign():
                self._resolve_expression(expr.value)
                self._resolve_local(expr, expr.name)
            case Binary() | Logical():
                self._resolve_expression(expr.left)
                self._resolve_expression(expr.right)
            case Call():
                self._resolve_expression(expr.callee)
                for argument in expr.arguments:
                    self._resolve_expression(argument)
            case Get():
                # Properties are looked up dynamically; only the object is resolved.
                self._resolve_expression(expr.object)
            case Grouping():
                self._resolve_expression(expr.expression)
            case Literal():
                pass
            case Set():
                self._resolve_expression(expr.value)
                self._resolve_expression(expr.object)
            case Super():
                if self.current_class == ClassType.NONE:
                    self._error(expr.keyword, ErrorCode.SUPER_OUTSIDE_CLASS)
                elif self.current_class != ClassType.SUBCLASS:
                    self._error(expr.keyword, ErrorCode.SUPER_WITHOUT_SUPERCLASS)
                self._resolve_local(expr, expr.keyword)
            case This():
                if self.current_class == ClassType.NONE:
                    self._error(expr.keyword, ErrorCode.THIS_OUTSIDE_CLASS)
                else:
                    self._resolve_local(expr, expr.keyword)
            case Unary():
                self._resolve_expression(expr.right)
            case Variable():
                if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
                    self._error(expr.name, ErrorCode.SELF_REFERENTIAL_INITIALIZER)
                self._resolve_local(expr, expr.name)
            case _:
                raise InternalInterpreterError(f"Resolver has no rule for expression '{type(expr).__name__}'.")

    # --- Scope bookkeeping ---

    def _begin_scope(self):
        self.scopes.append({})

    def _end_scope(self):
        self.scopes.pop()

    def _declare(self, name: Token):
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self._error(name, ErrorCode.DUPLICATE_VARIABLE)
        scope[name.lexeme] = False

    def _define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: Expr, name: Token):
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return
        # Not found: assumed global.

    def _error(self, token: Token, code: ErrorCode):
        self.context.report(ResolutionError(code, token=token))


def resolve(statements: List[Stmt], interpreter: "Interpreter", context: Optional[RunContext] = None):
    """Resolves local variable distances into the interpreter, reporting semantic errors."""
    Resolver(interpreter, context if context is not None else RunContext()).resolve(statements)


def describe_resolution(locals_table: Dict[Expr, int]) -> List[Dict[str, Union[str, int]]]:
    """Flattens the scope-distance table into a serializable list, in source order."""
    entries = []
    for expr, depth in locals_table.items():
        name = _reference_token(expr)
        entries.append({"name": name.lexeme, "line": name.line, "kind": expr.kind, "depth": depth})
    return sorted(entries, key=lambda entry: entry["line"])


def _reference_token(expr: Expr) -> Token:
    match expr:
        case Variable() | Assign():
            return expr.name
        case This() | Super():
            return expr.keyword
        case _:
            raise InternalInterpreterError(f"'{type(expr).__name__}' is not a resolvable reference.")
