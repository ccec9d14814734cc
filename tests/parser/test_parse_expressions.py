import pytest

from lox.parser.ast_printer import AstPrinter
from lox.parser.core.classes import *
from tests.utils.assertion_helper import assert_asts_equal
from tests.utils.factory_helpers import (
    get_assign,
    get_binary,
    get_call,
    get_literal,
    get_logical,
    get_unary,
    get_variable,
    parse_expression,
)


@pytest.mark.parametrize(
    "source, expected",
    [
        ("1 + 2 * 3", "(+ 1 (* 2 3))"),
        ("(1 + 2) * 3", "(* (group (+ 1 2)) 3)"),
        ("1 - 2 - 3", "(- (- 1 2) 3)"),
        ("8 / 4 / 2", "(/ (/ 8 4) 2)"),
        ("-!x", "(- (! x))"),
        ("!!true", "(! (! true))"),
        ("1 < 2 == true", "(== (< 1 2) true)"),
        ("a != b == c", "(== (!= a b) c)"),
        ("1 + 2 >= 3 - 4", "(>= (+ 1 2) (- 3 4))"),
        ("a or b and c", "(or a (and b c))"),
        ("a and b or c and d", "(or (and a b) (and c d))"),
        ("a == b and c", "(and (== a b) c)"),
    ],
    ids=[
        "factor_binds_tighter_than_term",
        "grouping_overrides_precedence",
        "term_is_left_associative",
        "factor_is_left_associative",
        "nested_unary",
        "double_negation",
        "comparison_binds_tighter_than_equality",
        "equality_is_left_associative",
        "term_binds_tighter_than_comparison",
        "and_binds_tighter_than_or",
        "or_of_ands",
        "equality_binds_tighter_than_and",
    ],
)
def test_operator_precedence(source, expected):
    assert AstPrinter().print(parse_expression(source)) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("a = b = 3", "(= a (= b 3))"),
        ("obj.field = 1", "(= . field obj 1)"),
        ("a.b.c = d", "(= . c (. b a) d)"),
        ("a = b or c", "(= a (or b c))"),
    ],
    ids=["right_associative", "property_assignment", "nested_property_assignment", "assignment_has_lowest_precedence"],
)
def test_assignment(source, expected):
    assert AstPrinter().print(parse_expression(source)) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("f()", "(call f)"),
        ("f(1, 2)", "(call f 1 2)"),
        ("f()()", "(call (call f))"),
        ("a.b.c()", "(call (. c (. b a)))"),
        ("a.b(1).c", "(. c (call (. b a) 1))"),
        ("this.x", "(. x this)"),
        ("super.method", "(super method)"),
        ("super.method(1)", "(call (super method) 1)"),
        ("-f(1)", "(- (call f 1))"),
    ],
    ids=["no_args", "two_args", "chained_calls", "call_on_property", "property_on_call", "this_property", "super_access", "super_call", "unary_of_call"],
)
def test_calls_and_properties(source, expected):
    assert AstPrinter().print(parse_expression(source)) == expected


@pytest.mark.parametrize(
    "source, expected_value",
    [
        ("1", 1.0),
        ("2.5", 2.5),
        ('"text"', "text"),
        ("true", True),
        ("false", False),
        ("nil", None),
    ],
    ids=["integer_number", "fraction_number", "string", "true", "false", "nil"],
)
def test_primary_literals(source, expected_value):
    expr = parse_expression(source)

    assert isinstance(expr, Literal)
    assert type(expr.value) is type(expected_value)
    assert expr.value == expected_value


def test_binary_ast_structure():
    # --- ARRANGE ---
    expected = get_binary(get_literal(1.0), "+", get_binary(get_literal(2.0), "*", get_variable("x")))

    # --- ACT ---
    actual = parse_expression("1 + 2 * x")

    # --- ASSERT ---
    assert_asts_equal(actual, expected)


def test_logical_and_unary_ast_structure():
    expected = get_logical(get_unary("!", get_variable("a")), "or", get_variable("b"))
    assert_asts_equal(parse_expression("!a or b"), expected)


def test_assignment_ast_structure():
    expected = get_assign("total", get_call(get_variable("sum"), [get_literal(1.0), get_literal("two")]))
    assert_asts_equal(parse_expression('total = sum(1, "two")'), expected)


def test_grouping_is_kept_as_a_node():
    expr = parse_expression("(nil)")

    assert isinstance(expr, Grouping)
    assert isinstance(expr.expression, Literal)


def test_call_keeps_closing_paren_token_for_error_reporting():
    expr = parse_expression("f(\n1\n)")

    assert isinstance(expr, Call)
    assert expr.paren.lexeme == ")"
    assert expr.paren.line == 3
