"""
The callable part of the runtime object model: user functions (closures),
classes and their instances.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from lox.config import INITIALIZER_NAME, THIS_KEYWORD
from lox.exceptions import ErrorCode, LoxRuntimeError
from lox.parser.core.classes import FunDecl
from lox.scanner.tokens import Token

from .environment import Environment
from .outcome import Returning

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


class LoxCallable(ABC):
    """Anything that can appear as the callee of a call expression."""

    @abstractmethod
    def arity(self) -> int:
        pass

    @abstractmethod
    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        pass


class LoxFunction(LoxCallable):
    def __init__(self, declaration: FunDecl, closure: Environment, is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def bind(self, instance: "LoxInstance") -> "LoxFunction":
        """Returns a new function whose closure defines `this` as the given instance."""
        environment = Environment(self.closure)
        environment.define(THIS_KEYWORD, instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        # A fresh frame per call, parented to the closure and not to the caller.
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        outcome = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.get_at(0, THIS_KEYWORD)
        if isinstance(outcome, Returning):
            return outcome.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"


class LoxClass(LoxCallable):
    def __init__(self, name: str, superclass: Optional["LoxClass"], methods: Dict[str, LoxFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[LoxFunction]:
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method(INITIALIZER_NAME)
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> "LoxInstance":
        instance = LoxInstance(self)
        initializer = self.find_method(INITIALIZER_NAME)
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        # Always the instance, whatever init returned.
        return instance

    def __str__(self) -> str:
        return self.name


class LoxInstance:
    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(ErrorCode.UNDEFINED_PROPERTY, token=name, name=name.lexeme)

    def set(self, name: Token, value: Any):
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"
