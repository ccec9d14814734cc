"""
Static configuration data for the Lox interpreter.
This includes the keyword table, operator tables, parser limits,
pipeline stage names and the process exit codes used by the CLI.
"""

from lox.scanner.tokens import TokenType

KEYWORDS = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}

SINGLE_CHAR_TOKENS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# Maps the first character to (kind when followed by '=', kind otherwise).
ONE_OR_TWO_CHAR_TOKENS = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

WHITESPACE = {" ", "\r", "\t"}

# Tokens that start a new declaration or statement; the parser resumes here after an error.
STATEMENT_START_TOKENS = {
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}

MAX_CALL_ARGUMENTS = 255

# Each Lox call nests about six Python frames.
RECURSION_LIMIT = 10000

INITIALIZER_NAME = "init"
THIS_KEYWORD = "this"
SUPER_KEYWORD = "super"
CLOCK_NATIVE_NAME = "clock"

# Order matters: the pipeline runs the stages in this sequence.
PIPELINE_STAGES = ("tokens", "ast", "resolution")

EXIT_STATIC_ERROR = 65
EXIT_NO_INPUT = 66
EXIT_RUNTIME_ERROR = 70
