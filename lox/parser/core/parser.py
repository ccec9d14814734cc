from typing import List, Optional

from lox.config import MAX_CALL_ARGUMENTS, STATEMENT_START_TOKENS
from lox.diagnostics import RunContext
from lox.exceptions import ErrorCode, ParseError
from lox.scanner.tokens import Token, TokenType

from .classes import *


class Parser:
    """
    Recursive-descent parser turning the token stream into a list of statements.

    Each grammar rule is one method, ordered from the lowest precedence
    (assignment) down to primary expressions, so operator precedence falls out
    of the call structure. A syntax error aborts only the declaration being
    parsed: it is reported to the run context, the parser synchronizes on the
    next statement boundary and carries on, so a single pass collects every
    independent error in the file.
    """

    def __init__(self, tokens: List[Token], context: RunContext):
        self.tokens = tokens
        self.context = context
        self.current = 0

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self._is_at_end():
            statement = self._declaration()
            if statement is not None:
                statements.append(statement)
        return statements

    # --- Declarations ---

    def _declaration(self) -> Optional[Stmt]:
        try:
            if self._match(TokenType.CLASS):
                return self._class_declaration()
            if self._match(TokenType.FUN):
                return self._function("function")
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self._synchronize()
            return None

    def _class_declaration(self) -> ClassDecl:
        name = self._consume(TokenType.IDENTIFIER, "class name")

        superclass = None
        if self._match(TokenType.LESS):
            self._consume(TokenType.IDENTIFIER, "superclass name")
            superclass = Variable(name=self._previous())

        self._consume(TokenType.LEFT_BRACE, "'{' before class body")

        methods: List[FunDecl] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            methods.append(self._function("method"))

        self._consume(TokenType.RIGHT_BRACE, "'}' after class body")
        return ClassDecl(name=name, superclass=superclass, methods=methods)

    def _function(self, kind: str) -> FunDecl:
        name = self._consume(TokenType.IDENTIFIER, f"{kind} name")
        self._consume(TokenType.LEFT_PAREN, f"'(' after {kind} name")

        params: List[Token] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_CALL_ARGUMENTS:
                    self._report(self._peek(), ErrorCode.TOO_MANY_PARAMETERS, limit=MAX_CALL_ARGUMENTS)
                params.append(self._consume(TokenType.IDENTIFIER, "parameter name"))
                if not self._match(TokenType.COMMA):
                    break

        self._consume(TokenType.RIGHT_PAREN, "')' after parameters")
        self._consume(TokenType.LEFT_BRACE, f"'{{' before {kind} body")
        body = self._block()
        return FunDecl(name=name, params=params, body=body)

    def _var_declaration(self) -> VarDecl:
        name = self._consume(TokenType.IDENTIFIER, "variable name")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "';' after variable declaration")
        return VarDecl(name=name, initializer=initializer)

    # --- Statements ---

    def _statement(self) -> Stmt:
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.RETURN):
            return self._return_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.LEFT_BRACE):
            return Block(statements=self._block())
        return self._expression_statement()

    def _for_statement(self) -> Stmt:
        """
        Desugars `for (init; cond; incr) body` into
        `{ init; while (cond) { body; incr; } }`.
        A missing condition becomes the literal `true`.
        """
        self._consume(TokenType.LEFT_PAREN, "'(' after 'for'")

        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "';' after loop condition")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "')' after for clauses")

        body = self._statement()

        if increment is not None:
            body = Block(statements=[body, ExpressionStmt(expression=increment)])
        if condition is None:
            condition = Literal(value=True)
        loop = While(condition=condition, body=body)

        return Block(statements=[initializer, loop] if initializer is not None else [loop])

    def _if_statement(self) -> If:
        self._consume(TokenType.LEFT_PAREN, "'(' after 'if'")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "')' after if condition")

        then_branch = self._statement()
        else_branch = None
        # The 'else' binds to the nearest 'if'.
        if self._match(TokenType.ELSE):
            else_branch = self._statement()

        return If(condition=condition, then_branch=then_branch, else_branch=else_branch)

    def _print_statement(self) -> Print:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "';' after value")
        return Print(expression=value)

    def _return_statement(self) -> Return:
        keyword = self._previous()
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()

        self._consume(TokenType.SEMICOLON, "';' after return value")
        return Return(keyword=keyword, value=value)

    def _while_statement(self) -> While:
        self._consume(TokenType.LEFT_PAREN, "'(' after 'while'")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "')' after condition")
        return While(condition=condition, body=self._statement())

    def _block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            statement = self._declaration()
            if statement is not None:
                statements.append(statement)

        self._consume(TokenType.RIGHT_BRACE, "'}' after block")
        return statements

    def _expression_statement(self) -> ExpressionStmt:
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "';' after expression")
        return ExpressionStmt(expression=expr)

    # --- Expressions ---

    def _expression(self) -> Expr:
        return self._assignment()

    def _assignment(self) -> Expr:
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, Variable):
                return Assign(name=expr.name, value=value)
            if isinstance(expr, Get):
                return Set(object=expr.object, name=expr.name, value=value)

            # Reported but not raised: the parser is not confused, no need to synchronize.
            self._report(equals, ErrorCode.INVALID_ASSIGNMENT_TARGET)

        return expr

    def _or(self) -> Expr:
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            expr = Logical(left=expr, operator=operator, right=self._and())
        return expr

    def _and(self) -> Expr:
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            expr = Logical(left=expr, operator=operator, right=self._equality())
        return expr

    def _equality(self) -> Expr:
        return self._binary_left_assoc(self._comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self) -> Expr:
        return self._binary_left_assoc(
            self._term,
            TokenType.GREATER,
            TokenType.GREATER_EQUAL,
            TokenType.LESS,
            TokenType.LESS_EQUAL,
        )

    def _term(self) -> Expr:
        return self._binary_left_assoc(self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self) -> Expr:
        return self._binary_left_assoc(self._unary, TokenType.SLASH, TokenType.STAR)

    def _binary_left_assoc(self, operand, *operators: TokenType) -> Expr:
        """Helper to build a left-associative tree for any binary precedence level."""
        expr = operand()
        while self._match(*operators):
            operator = self._previous()
            expr = Binary(left=expr, operator=operator, right=operand())
        return expr

    def _unary(self) -> Expr:
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return Unary(operator=operator, right=self._unary())
        return self._call()

    def _call(self) -> Expr:
        expr = self._primary()

        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "property name after '.'")
                expr = Get(object=expr, name=name)
            else:
                break

        return expr

    def _finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_CALL_ARGUMENTS:
                    self._report(self._peek(), ErrorCode.TOO_MANY_ARGUMENTS, limit=MAX_CALL_ARGUMENTS)
                arguments.append(self._expression())
                if not self._match(TokenType.COMMA):
                    break

        paren = self._consume(TokenType.RIGHT_PAREN, "')' after arguments")
        return Call(callee=callee, paren=paren, arguments=arguments)

    def _primary(self) -> Expr:
        if self._match(TokenType.FALSE):
            return Literal(value=False)
        if self._match(TokenType.TRUE):
            return Literal(value=True)
        if self._match(TokenType.NIL):
            return Literal(value=None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return Literal(value=self._previous().literal)

        if self._match(TokenType.SUPER):
            keyword = self._previous()
            self._consume(TokenType.DOT, "'.' after 'super'")
            method = self._consume(TokenType.IDENTIFIER, "superclass method name")
            return Super(keyword=keyword, method=method)

        if self._match(TokenType.THIS):
            return This(keyword=self._previous())

        if self._match(TokenType.IDENTIFIER):
            return Variable(name=self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "')' after expression")
            return Grouping(expression=expr)

        raise self._report(self._peek(), ErrorCode.EXPECT_EXPRESSION)

    # --- Token stream helpers ---

    def _match(self, *kinds: TokenType) -> bool:
        for kind in kinds:
            if self._check(kind):
                self._advance()
                return True
        return False

    def _consume(self, kind: TokenType, expected: str) -> Token:
        if self._check(kind):
            return self._advance()
        raise self._report(self._peek(), ErrorCode.EXPECTED_TOKEN, expected=expected)

    def _check(self, kind: TokenType) -> bool:
        if self._is_at_end():
            return False
        return self._peek().kind == kind

    def _advance(self) -> Token:
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().kind == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _previous(self) -> Token:
        return self.tokens[self.current - 1]

    # --- Error handling ---

    def _report(self, token: Token, code: ErrorCode, **kwargs) -> ParseError:
        error = ParseError(code, token=token, **kwargs)
        self.context.report(error)
        return error

    def _synchronize(self):
        """Discards tokens until the start of the next statement."""
        self._advance()

        while not self._is_at_end():
            if self._previous().kind == TokenType.SEMICOLON:
                return
            if self._peek().kind in STATEMENT_START_TOKENS:
                return
            self._advance()


def parse(tokens: List[Token], context: Optional[RunContext] = None) -> List[Stmt]:
    """Parses the token stream into statements, reporting syntax errors to the context."""
    return Parser(tokens, context if context is not None else RunContext()).parse()
