import pytest

from lox.diagnostics import RunContext
from lox.scanner.scanner import Scanner, scan
from lox.scanner.tokens import TokenType as T


def kinds_of(source: str):
    return [token.kind for token in scan(source)]


@pytest.mark.parametrize(
    "source, expected_kinds",
    [
        ("(){},.-+;*/", [T.LEFT_PAREN, T.RIGHT_PAREN, T.LEFT_BRACE, T.RIGHT_BRACE, T.COMMA, T.DOT, T.MINUS, T.PLUS, T.SEMICOLON, T.STAR, T.SLASH]),
        ("! != = == < <= > >=", [T.BANG, T.BANG_EQUAL, T.EQUAL, T.EQUAL_EQUAL, T.LESS, T.LESS_EQUAL, T.GREATER, T.GREATER_EQUAL]),
        ("!==", [T.BANG_EQUAL, T.EQUAL]),
        ("or orchid classy class _under", [T.OR, T.IDENTIFIER, T.IDENTIFIER, T.CLASS, T.IDENTIFIER]),
        ("and else false for fun if nil print return super this true var while", [
            T.AND, T.ELSE, T.FALSE, T.FOR, T.FUN, T.IF, T.NIL, T.PRINT, T.RETURN, T.SUPER, T.THIS, T.TRUE, T.VAR, T.WHILE,
        ]),
        ("", []),
        ("   \t\r\n  ", []),
    ],
    ids=["single_chars", "one_or_two_chars", "maximal_munch", "keywords_vs_identifiers", "all_keywords", "empty", "only_whitespace"],
)
def test_token_kinds(source, expected_kinds):
    assert kinds_of(source) == expected_kinds + [T.EOF]


@pytest.mark.parametrize(
    "source, expected",
    [
        ("123", [(T.NUMBER, 123.0)]),
        ("12.5", [(T.NUMBER, 12.5)]),
        ("1.", [(T.NUMBER, 1.0), (T.DOT, None)]),
        (".5", [(T.DOT, None), (T.NUMBER, 5.0)]),
        ("1.2.3", [(T.NUMBER, 1.2), (T.DOT, None), (T.NUMBER, 3.0)]),
    ],
    ids=["integer", "fraction", "trailing_dot", "leading_dot", "two_dots"],
)
def test_number_literals(source, expected):
    tokens = scan(source)[:-1]
    assert [(t.kind, t.literal) for t in tokens] == expected
    for token in tokens:
        if token.kind == T.NUMBER:
            assert isinstance(token.literal, float)


def test_string_literal_keeps_lexeme_quotes_but_not_literal():
    # --- ARRANGE & ACT ---
    token = scan('"hello world"')[0]

    # --- ASSERT ---
    assert token.kind == T.STRING
    assert token.lexeme == '"hello world"'
    assert token.literal == "hello world"


def test_string_has_no_escape_sequences():
    token = scan(r'"a\nb"')[0]
    assert token.literal == "a\\nb"


def test_multi_line_string_advances_line_counter():
    # --- ARRANGE ---
    source = 'var a = "first\nsecond";\nprint a;'

    # --- ACT ---
    tokens = scan(source)

    # --- ASSERT ---
    string_token = next(t for t in tokens if t.kind == T.STRING)
    print_token = next(t for t in tokens if t.kind == T.PRINT)
    assert string_token.literal == "first\nsecond"
    assert print_token.line == 3


def test_comments_are_skipped():
    tokens = scan("// a comment\nprint 1; // trailing comment")
    assert [t.kind for t in tokens] == [T.PRINT, T.NUMBER, T.SEMICOLON, T.EOF]
    assert tokens[0].line == 2


def test_comment_at_end_of_file_without_newline():
    assert kinds_of("print 1;//") == [T.PRINT, T.NUMBER, T.SEMICOLON, T.EOF]


def test_eof_carries_final_line():
    tokens = scan("a\nb\nc")
    assert tokens[-1].kind == T.EOF
    assert tokens[-1].lexeme == ""
    assert tokens[-1].line == 3


def test_unexpected_character_is_reported_and_scanning_continues():
    # --- ARRANGE ---
    context = RunContext()

    # --- ACT ---
    tokens = Scanner("var a = 1 @ 2;", context).scan_tokens()

    # --- ASSERT ---
    assert context.had_error
    assert context.messages == ["Unexpected character '@'."]
    assert context.diagnostics[0].line == 1
    assert [t.kind for t in tokens] == [T.VAR, T.IDENTIFIER, T.EQUAL, T.NUMBER, T.NUMBER, T.SEMICOLON, T.EOF]


def test_every_bad_character_is_reported():
    context = RunContext()
    scan("@\n#\n$", context)

    assert [d.line for d in context.diagnostics] == [1, 2, 3]
    assert all(d.stage == "scan" for d in context.diagnostics)


def test_unterminated_string_is_reported_at_last_line():
    # --- ARRANGE ---
    context = RunContext()

    # --- ACT ---
    tokens = scan('print "abc\ndef', context)

    # --- ASSERT ---
    assert [t.kind for t in tokens] == [T.PRINT, T.EOF]
    assert context.messages == ["Unterminated string."]
    assert context.diagnostics[0].line == 2
    assert str(context.diagnostics[0]) == "[line 2] Error: Unterminated string."


def test_token_str_form():
    token = scan("42")[0]
    assert str(token) == "NUMBER 42 42.0"
