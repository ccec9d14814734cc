from typing import List

from lox.exceptions import InternalInterpreterError
from lox.runtime.values import stringify

from .core.classes import *


class AstPrinter:
    """Renders AST nodes as fully parenthesized prefix expressions, e.g. `(* (- 123) (group 45.67))`."""

    def print(self, node: Node) -> str:
        if isinstance(node, Stmt):
            return self._statement(node)
        return self._expression(node)

    def print_program(self, statements: List[Stmt]) -> str:
        return "\n".join(self._statement(stmt) for stmt in statements)

    def _expression(self, expr: Expr) -> str:
        match expr:
            case Assign():
                return self._parenthesize(f"= {expr.name.lexeme}", expr.value)
            case Binary() | Logical():
                return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)
            case Call():
                return self._parenthesize("call", expr.callee, *expr.arguments)
            case Get():
                return self._parenthesize(f". {expr.name.lexeme}", expr.object)
            case Grouping():
                return self._parenthesize("group", expr.expression)
            case Literal():
                if isinstance(expr.value, str):
                    return f'"{expr.value}"'
                return stringify(expr.value)
            case Set():
                return self._parenthesize(f"= . {expr.name.lexeme}", expr.object, expr.value)
            case Super():
                return f"(super {expr.method.lexeme})"
            case This():
                return "this"
            case Unary():
                return self._parenthesize(expr.operator.lexeme, expr.right)
            case Variable():
                return expr.name.lexeme
        raise InternalInterpreterError(f"AstPrinter has no rule for expression '{type(expr).__name__}'.")

    def _statement(self, stmt: Stmt) -> str:
        match stmt:
            case Block():
                return self._parenthesize_parts("block", [self._statement(s) for s in stmt.statements])
            case ClassDecl():
                head = f"class {stmt.name.lexeme}"
                if stmt.superclass is not None:
                    head += f" < {stmt.superclass.name.lexeme}"
                return self._parenthesize_parts(head, [self._statement(m) for m in stmt.methods])
            case ExpressionStmt():
                return self._parenthesize(";", stmt.expression)
            case FunDecl():
                params = " ".join(p.lexeme for p in stmt.params)
                body = [self._statement(s) for s in stmt.body]
                return self._parenthesize_parts(f"fun {stmt.name.lexeme} ({params})", body)
            case If():
                parts = [self._expression(stmt.condition), self._statement(stmt.then_branch)]
                if stmt.else_branch is not None:
                    parts.append(self._statement(stmt.else_branch))
                return self._parenthesize_parts("if", parts)
            case Print():
                return self._parenthesize("print", stmt.expression)
            case Return():
                if stmt.value is None:
                    return "(return)"
                return self._parenthesize("return", stmt.value)
            case VarDecl():
                if stmt.initializer is None:
                    return f"(var {stmt.name.lexeme})"
                return self._parenthesize(f"var {stmt.name.lexeme}", stmt.initializer)
            case While():
                return self._parenthesize_parts("while", [self._expression(stmt.condition), self._statement(stmt.body)])
        raise InternalInterpreterError(f"AstPrinter has no rule for statement '{type(stmt).__name__}'.")

    def _parenthesize(self, name: str, *exprs: Expr) -> str:
        return self._parenthesize_parts(name, [self._expression(e) for e in exprs])

    @staticmethod
    def _parenthesize_parts(name: str, parts: List[str]) -> str:
        if not parts:
            return f"({name})"
        return f"({name} {' '.join(parts)})"
