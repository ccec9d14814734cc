import math
import sys
from typing import Dict, List, Optional, TextIO

from .config import CLOCK_NATIVE_NAME, INITIALIZER_NAME, RECURSION_LIMIT, SUPER_KEYWORD, THIS_KEYWORD
from .diagnostics import RunContext
from .exceptions import ErrorCode, InternalInterpreterError, LoxRuntimeError
from .parser.core.classes import *
from .runtime.callables import LoxCallable, LoxClass, LoxFunction, LoxInstance
from .runtime.environment import Environment
from .runtime.natives import Clock
from .runtime.outcome import COMPLETED, ExecutionOutcome, Returning
from .runtime.values import Value, is_equal, is_number, is_truthy, stringify
from .scanner.tokens import Token, TokenType


class Interpreter:
    """
    Tree-walking evaluator for resolved statements.

    One interpreter owns one global environment for its whole lifetime, which
    is what lets a REPL keep definitions from one line to the next. The
    scope-distance table filled by the resolver lives here too and is only
    read during evaluation.
    """

    def __init__(self, context: Optional[RunContext] = None, output: Optional[TextIO] = None):
        self.context = context if context is not None else RunContext()
        self.output = output
        self.globals = Environment()
        self.environment = self.globals
        self.locals: Dict[Expr, int] = {}

        self.globals.define(CLOCK_NATIVE_NAME, Clock())

        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

    def interpret(self, statements: List[Stmt]):
        """
        Executes the statements in order. A runtime error is reported to the
        run context and halts the remaining statements of this run.
        """
        try:
            for statement in statements:
                if isinstance(self.execute(statement), Returning):
                    break
        except LoxRuntimeError as error:
            self.context.report(error)

    def resolve(self, expr: Expr, depth: int):
        """Called by the resolver to record the scope distance of a local reference."""
        self.locals[expr] = depth

    # --- Statements ---

    def execute(self, stmt: Stmt) -> ExecutionOutcome:
        match stmt:
            case Block():
                return self.execute_block(stmt.statements, Environment(self.environment))
            case ClassDecl():
                self._execute_class(stmt)
            case ExpressionStmt():
                self.evaluate(stmt.expression)
            case FunDecl():
                function = LoxFunction(stmt, self.environment, is_initializer=False)
                self.environment.define(stmt.name.lexeme, function)
            case If():
                if is_truthy(self.evaluate(stmt.condition)):
                    return self.execute(stmt.then_branch)
                if stmt.else_branch is not None:
                    return self.execute(stmt.else_branch)
            case Print():
                value = self.evaluate(stmt.expression)
                print(stringify(value), file=self.output if self.output is not None else sys.stdout)
            case Return():
                value = None
                if stmt.value is not None:
                    value = self.evaluate(stmt.value)
                return Returning(value)
            case VarDecl():
                value = None
                if stmt.initializer is not None:
                    value = self.evaluate(stmt.initializer)
                self.environment.define(stmt.name.lexeme, value)
            case While():
                while is_truthy(self.evaluate(stmt.condition)):
                    outcome = self.execute(stmt.body)
                    if isinstance(outcome, Returning):
                        return outcome
            case _:
                raise InternalInterpreterError(f"Interpreter has no rule for statement '{type(stmt).__name__}'.")
        return COMPLETED

    def execute_block(self, statements: List[Stmt], environment: Environment) -> ExecutionOutcome:
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                outcome = self.execute(statement)
                if isinstance(outcome, Returning):
                    return outcome
            return COMPLETED
        finally:
            self.environment = previous

    def _execute_class(self, stmt: ClassDecl):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(ErrorCode.SUPERCLASS_MUST_BE_CLASS, token=stmt.superclass.name)

        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define(SUPER_KEYWORD, superclass)

        methods = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == INITIALIZER_NAME
            methods[method.name.lexeme] = LoxFunction(method, self.environment, is_initializer)

        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)

    # --- Expressions ---

    def evaluate(self, expr: Expr) -> Value:
        match expr:
            case Assign():
                value = self.evaluate(expr.value)
                distance = self.locals.get(expr)
                if distance is not None:
                    self.environment.assign_at(distance, expr.name, value)
                else:
                    self.globals.assign(expr.name, value)
                return value
            case Binary():
                return self._evaluate_binary(expr)
            case Call():
                return self._evaluate_call(expr)
            case Get():
                obj = self.evaluate(expr.object)
                if isinstance(obj, LoxInstance):
                    return obj.get(expr.name)
                raise LoxRuntimeError(ErrorCode.ONLY_INSTANCES_HAVE_PROPERTIES, token=expr.name)
            case Grouping():
                return self.evaluate(expr.expression)
            case Literal():
                return expr.value
            case Logical():
                left = self.evaluate(expr.left)
                if expr.operator.kind == TokenType.OR:
                    if is_truthy(left):
                        return left
                elif not is_truthy(left):
                    return left
                return self.evaluate(expr.right)
            case Set():
                obj = self.evaluate(expr.object)
                if not isinstance(obj, LoxInstance):
                    raise LoxRuntimeError(ErrorCode.ONLY_INSTANCES_HAVE_FIELDS, token=expr.name)
                value = self.evaluate(expr.value)
                obj.set(expr.name, value)
                return value
            case Super():
                return self._evaluate_super(expr)
            case This():
                return self._look_up_variable(expr.keyword, expr)
            case Unary():
                return self._evaluate_unary(expr)
            case Variable():
                return self._look_up_variable(expr.name, expr)
            case _:
                raise InternalInterpreterError(f"Interpreter has no rule for expression '{type(expr).__name__}'.")

    def _look_up_variable(self, name: Token, expr: Expr) -> Value:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def _evaluate_unary(self, expr: Unary) -> Value:
        right = self.evaluate(expr.right)

        match expr.operator.kind:
            case TokenType.BANG:
                return not is_truthy(right)
            case TokenType.MINUS:
                _check_number_operand(expr.operator, right)
                return -right
        raise InternalInterpreterError(f"Unknown unary operator '{expr.operator.lexeme}'.")

    def _evaluate_binary(self, expr: Binary) -> Value:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        match operator.kind:
            case TokenType.BANG_EQUAL:
                return not is_equal(left, right)
            case TokenType.EQUAL_EQUAL:
                return is_equal(left, right)
            case TokenType.PLUS:
                if is_number(left) and is_number(right):
                    return left + right
                if isinstance(left, str) and isinstance(right, str):
                    return left + right
                raise LoxRuntimeError(ErrorCode.OPERANDS_MUST_BE_NUMBERS_OR_STRINGS, token=operator)

        _check_number_operands(operator, left, right)

        match operator.kind:
            case TokenType.GREATER:
                return left > right
            case TokenType.GREATER_EQUAL:
                return left >= right
            case TokenType.LESS:
                return left < right
            case TokenType.LESS_EQUAL:
                return left <= right
            case TokenType.MINUS:
                return left - right
            case TokenType.STAR:
                return left * right
            case TokenType.SLASH:
                return _divide(left, right)
        raise InternalInterpreterError(f"Unknown binary operator '{operator.lexeme}'.")

    def _evaluate_call(self, expr: Call) -> Value:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(ErrorCode.NOT_CALLABLE, token=expr.paren)

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                ErrorCode.ARGUMENT_COUNT_MISMATCH,
                token=expr.paren,
                expected=callee.arity(),
                provided=len(arguments),
            )

        try:
            return callee.call(self, arguments)
        except RecursionError:
            # The innermost call frame converts it; outer frames let the LoxRuntimeError through.
            raise LoxRuntimeError(ErrorCode.STACK_OVERFLOW, token=expr.paren) from None

    def _evaluate_super(self, expr: Super) -> Value:
        distance = self.locals[expr]
        superclass = self.environment.get_at(distance, SUPER_KEYWORD)
        # `this` is bound in the frame just inside the one holding `super`.
        instance = self.environment.get_at(distance - 1, THIS_KEYWORD)

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(ErrorCode.UNDEFINED_PROPERTY, token=expr.method, name=expr.method.lexeme)
        return method.bind(instance)


def _check_number_operand(operator: Token, operand: Value):
    if is_number(operand):
        return
    raise LoxRuntimeError(ErrorCode.OPERAND_MUST_BE_NUMBER, token=operator)


def _check_number_operands(operator: Token, left: Value, right: Value):
    if is_number(left) and is_number(right):
        return
    raise LoxRuntimeError(ErrorCode.OPERANDS_MUST_BE_NUMBERS, token=operator)


def _divide(left: float, right: float) -> float:
    """IEEE-754 division: a zero divisor gives an infinity or NaN instead of raising."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def interpret(statements: List[Stmt], interpreter: Optional[Interpreter] = None) -> Interpreter:
    """Runs resolved statements on the given (or a fresh) interpreter and returns it."""
    interpreter = interpreter if interpreter is not None else Interpreter()
    interpreter.interpret(statements)
    return interpreter
