"""
Defines the formal data structures (contracts) for the Abstract Syntax Tree (AST)
produced by the parser stage.

Each node is a pydantic model tagged with a literal `kind`, so the two node
families (expressions and statements) are closed sets of variants that later
stages match on. Nodes keep the tokens they were built from, which carry the
source line used for error reporting.

Expression nodes hash by identity: the resolver keys its scope-distance table
by the node object itself, so two structurally identical references to `a`
in different places never share an entry. `==` still compares fields.
"""

from typing import List, Literal as Tag, Optional, Union

from pydantic import BaseModel

from lox.scanner.tokens import Token


class ASTNode(BaseModel):
    """A base class for all AST nodes."""

    kind: str


# --- Expressions ---


class Expr(ASTNode):
    def __hash__(self) -> int:
        return id(self)


class Assign(Expr):
    kind: Tag["assign"] = "assign"
    name: Token
    value: Expr


class Binary(Expr):
    kind: Tag["binary"] = "binary"
    left: Expr
    operator: Token
    right: Expr


class Call(Expr):
    kind: Tag["call"] = "call"
    callee: Expr
    # The closing parenthesis, used to locate runtime errors raised by the call.
    paren: Token
    arguments: List[Expr]


class Get(Expr):
    kind: Tag["get"] = "get"
    object: Expr
    name: Token


class Grouping(Expr):
    kind: Tag["grouping"] = "grouping"
    expression: Expr


class Literal(Expr):
    kind: Tag["literal"] = "literal"
    # float must come before bool so that integer inputs are coerced to numbers
    value: Union[float, bool, str, None] = None


class Logical(Expr):
    kind: Tag["logical"] = "logical"
    left: Expr
    operator: Token
    right: Expr


class Set(Expr):
    kind: Tag["set"] = "set"
    object: Expr
    name: Token
    value: Expr


class Super(Expr):
    kind: Tag["super"] = "super"
    keyword: Token
    method: Token


class This(Expr):
    kind: Tag["this"] = "this"
    keyword: Token


class Unary(Expr):
    kind: Tag["unary"] = "unary"
    operator: Token
    right: Expr


class Variable(Expr):
    kind: Tag["variable"] = "variable"
    name: Token


# --- Statements ---


class Stmt(ASTNode):
    pass


class Block(Stmt):
    kind: Tag["block"] = "block"
    statements: List[Stmt]


class ExpressionStmt(Stmt):
    kind: Tag["expression"] = "expression"
    expression: Expr


class FunDecl(Stmt):
    kind: Tag["function"] = "function"
    name: Token
    params: List[Token]
    body: List[Stmt]


class ClassDecl(Stmt):
    kind: Tag["class"] = "class"
    name: Token
    superclass: Optional[Variable] = None
    methods: List[FunDecl]


class If(Stmt):
    kind: Tag["if"] = "if"
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


class Print(Stmt):
    kind: Tag["print"] = "print"
    expression: Expr


class Return(Stmt):
    kind: Tag["return"] = "return"
    keyword: Token
    value: Optional[Expr] = None


class VarDecl(Stmt):
    kind: Tag["var"] = "var"
    name: Token
    initializer: Optional[Expr] = None


class While(Stmt):
    kind: Tag["while"] = "while"
    condition: Expr
    body: Stmt


# A generic type hint for any node in the AST
Node = Union[Expr, Stmt]
