from typing import List, Optional

from lox.config import KEYWORDS, ONE_OR_TWO_CHAR_TOKENS, SINGLE_CHAR_TOKENS, WHITESPACE
from lox.diagnostics import RunContext
from lox.exceptions import ErrorCode, ScanError

from .tokens import Token, TokenType


class Scanner:
    """
    Converts raw source text into an ordered list of Tokens in a single forward pass.
    Lexical errors are reported to the run context and the offending input is skipped,
    so one scan can surface every bad character in the file.
    """

    def __init__(self, source: str, context: RunContext):
        self.source = source
        self.context = context
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> List[Token]:
        while not self._is_at_end():
            self.start = self.current
            self._scan_token()

        self.tokens.append(Token(kind=TokenType.EOF, lexeme="", literal=None, line=self.line))
        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[char])
        elif char in ONE_OR_TWO_CHAR_TOKENS:
            with_equal, alone = ONE_OR_TWO_CHAR_TOKENS[char]
            self._add_token(with_equal if self._match("=") else alone)
        elif char == "/":
            if self._match("/"):
                # A comment goes until the end of the line.
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)
        elif char in WHITESPACE:
            pass
        elif char == "\n":
            self.line += 1
        elif char == '"':
            self._string()
        elif _is_digit(char):
            self._number()
        elif _is_alpha(char):
            self._identifier()
        else:
            self.context.report(ScanError(ErrorCode.UNEXPECTED_CHARACTER, line=self.line, char=char))

    def _identifier(self):
        while _is_alpha_numeric(self._peek()):
            self._advance()

        text = self.source[self.start : self.current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _number(self):
        while _is_digit(self._peek()):
            self._advance()

        # Look for a fractional part; a trailing '.' stays a separate DOT token.
        if self._peek() == "." and _is_digit(self._peek_next()):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self.start : self.current]))

    def _string(self):
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == "\n":
                self.line += 1
            self._advance()

        if self._is_at_end():
            self.context.report(ScanError(ErrorCode.UNTERMINATED_STRING, line=self.line))
            return

        # The closing quote.
        self._advance()
        self._add_token(TokenType.STRING, self.source[self.start + 1 : self.current - 1])

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self.current]

    def _peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def _is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def _advance(self) -> str:
        self.current += 1
        return self.source[self.current - 1]

    def _add_token(self, kind: TokenType, literal=None):
        text = self.source[self.start : self.current]
        self.tokens.append(Token(kind=kind, lexeme=text, literal=literal, line=self.line))


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_alpha(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def _is_alpha_numeric(char: str) -> bool:
    return _is_alpha(char) or _is_digit(char)


def scan(source: str, context: Optional[RunContext] = None) -> List[Token]:
    """Scans the source text into tokens, reporting lexical errors to the context."""
    return Scanner(source, context if context is not None else RunContext()).scan_tokens()
