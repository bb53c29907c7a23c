"""Tests for the recursive descent parser."""

from __future__ import annotations

import sys

import pytest

from filterrules.exceptions import LexError, ParseError
from filterrules.models import FieldType
from filterrules.nodes import BinaryOp, Comparison, FieldRef, LiteralValue, UnaryOp
from filterrules.parser import Parser, parse, parse_tokens
from filterrules.tokenizer import Token, TokenType, tokenize


def _num(value: int | float) -> LiteralValue:
    return LiteralValue(value, FieldType.NUMBER)


# =============================================================================
# Primaries and comparisons
# =============================================================================


def test_parse_simple_comparison() -> None:
    """Test parsing a field compared with a number."""
    expr = parse("price < 350000")
    assert expr == Comparison("<", FieldRef("price"), _num(350000))


def test_parse_number_literals() -> None:
    """Test integer and decimal number literals."""
    assert parse("1") == _num(1)
    assert parse("-2.5") == _num(-2.5)
    literal = parse("3")
    assert isinstance(literal, LiteralValue)
    assert isinstance(literal.value, int)


def test_parse_boolean_literal() -> None:
    """Test boolean literals become booleans."""
    expr = parse("carParkIncluded == true")
    assert expr == Comparison(
        "==", FieldRef("carParkIncluded"), LiteralValue(True, FieldType.BOOLEAN)
    )
    assert parse("false") == LiteralValue(False, FieldType.BOOLEAN)


def test_parse_string_literal() -> None:
    """Test string literals keep their unescaped value."""
    expr = parse("status != 'rejected'")
    assert expr == Comparison("!=", FieldRef("status"), LiteralValue("rejected", FieldType.STRING))


def test_parse_bare_field() -> None:
    """Test that a bare field is a valid expression on its own."""
    assert parse("petsAllowed") == FieldRef("petsAllowed")


def test_parse_literal_on_left() -> None:
    """Test that either side of a comparison may be a literal."""
    assert parse("350000 > price") == Comparison(">", _num(350000), FieldRef("price"))


def test_parse_field_to_field_comparison() -> None:
    """Test comparing two fields."""
    assert parse("price <= previousPrice") == Comparison(
        "<=", FieldRef("price"), FieldRef("previousPrice")
    )


@pytest.mark.parametrize("op", ["==", "!=", "<", ">", "<=", ">="])
def test_parse_every_comparison_operator(op: str) -> None:
    """Test that each comparison operator produces a Comparison node."""
    expr = parse(f"bedrooms {op} 2")
    assert isinstance(expr, Comparison)
    assert expr.op == op


# =============================================================================
# Logical operators and precedence
# =============================================================================


def test_parse_and() -> None:
    """Test parsing an AND of two comparisons."""
    expr = parse("price < 350000 && bedrooms >= 2")
    assert expr == BinaryOp(
        "&&",
        Comparison("<", FieldRef("price"), _num(350000)),
        Comparison(">=", FieldRef("bedrooms"), _num(2)),
    )


def test_parse_or() -> None:
    """Test parsing an OR of two comparisons."""
    expr = parse("a == 1 || b == 2")
    assert isinstance(expr, BinaryOp)
    assert expr.op == "||"


def test_and_binds_tighter_than_or() -> None:
    """Test that `a || b && c` parses as `a || (b && c)`."""
    expr = parse("a == 1 || b == 2 && c == 3")
    assert isinstance(expr, BinaryOp)
    assert expr.op == "||"
    assert isinstance(expr.right, BinaryOp)
    assert expr.right.op == "&&"


def test_and_is_left_associative() -> None:
    """Test that `a && b && c` parses as `(a && b) && c`."""
    expr = parse("a && b && c")
    assert expr == BinaryOp("&&", BinaryOp("&&", FieldRef("a"), FieldRef("b")), FieldRef("c"))


def test_or_is_left_associative() -> None:
    """Test that `a || b || c` parses as `(a || b) || c`."""
    expr = parse("a || b || c")
    assert expr == BinaryOp("||", BinaryOp("||", FieldRef("a"), FieldRef("b")), FieldRef("c"))


def test_parentheses_override_precedence() -> None:
    """Test that grouping changes the tree shape."""
    expr = parse("(price < 350000 || bedrooms < 1) && carParkIncluded == true")
    assert isinstance(expr, BinaryOp)
    assert expr.op == "&&"
    assert isinstance(expr.left, BinaryOp)
    assert expr.left.op == "||"
    assert isinstance(expr.right, Comparison)


def test_redundant_parentheses() -> None:
    """Test that nested parentheses collapse to the inner node."""
    assert parse("((price < 1))") == parse("price < 1")


def test_not_applies_to_comparison() -> None:
    """Test that `!a == b` negates the whole comparison."""
    expr = parse("!petsAllowed == true")
    assert expr == UnaryOp(
        "!", Comparison("==", FieldRef("petsAllowed"), LiteralValue(True, FieldType.BOOLEAN))
    )


def test_not_binds_tighter_than_and() -> None:
    """Test that `!a && b` parses as `(!a) && b`."""
    expr = parse("!a && b")
    assert expr == BinaryOp("&&", UnaryOp("!", FieldRef("a")), FieldRef("b"))


def test_double_negation() -> None:
    """Test that NOT nests."""
    assert parse("!!a") == UnaryOp("!", UnaryOp("!", FieldRef("a")))


def test_not_of_group() -> None:
    """Test negating a parenthesized expression."""
    expr = parse("!(petsAllowed == true)")
    assert isinstance(expr, UnaryOp)
    assert isinstance(expr.operand, Comparison)


# =============================================================================
# Errors
# =============================================================================


def test_chained_comparison_is_rejected() -> None:
    """Test that `a < b < c` is a syntax error."""
    with pytest.raises(ParseError) as exc:
        parse("1 < price < 5")
    assert exc.value.position == 10
    assert "chained" in str(exc.value)


def test_empty_expression() -> None:
    """Test that an empty expression reports unexpected end."""
    with pytest.raises(ParseError) as exc:
        parse("")
    assert exc.value.position == 0
    assert "end of expression" in str(exc.value)


def test_whitespace_only_expression() -> None:
    """Test that whitespace alone is not an expression."""
    with pytest.raises(ParseError):
        parse("   ")


def test_missing_right_operand() -> None:
    """Test a comparison without a right-hand side."""
    with pytest.raises(ParseError) as exc:
        parse("price <")
    assert exc.value.position == 7


def test_missing_left_operand() -> None:
    """Test a comparison without a left-hand side."""
    with pytest.raises(ParseError) as exc:
        parse("< 5")
    assert exc.value.position == 0
    assert "Missing operand" in str(exc.value)


def test_dangling_logical_operator() -> None:
    """Test an AND without a right operand."""
    with pytest.raises(ParseError):
        parse("a == 1 &&")


def test_unbalanced_open_paren() -> None:
    """Test a missing closing parenthesis."""
    with pytest.raises(ParseError) as exc:
        parse("(a == 1")
    assert "Expected ')'" in str(exc.value)
    assert exc.value.position == 7


def test_unbalanced_close_paren() -> None:
    """Test a stray closing parenthesis."""
    with pytest.raises(ParseError) as exc:
        parse("a == 1)")
    assert exc.value.position == 6


def test_empty_parentheses() -> None:
    """Test that `()` is not an expression."""
    with pytest.raises(ParseError):
        parse("()")


def test_trailing_tokens() -> None:
    """Test that tokens after a complete expression are rejected."""
    with pytest.raises(ParseError) as exc:
        parse("price < 1 bedrooms")
    assert "Unexpected token 'bedrooms'" in str(exc.value)


@pytest.mark.parametrize(("word", "suggestion"), [("and", "&&"), ("OR", "||")])
def test_sql_keywords_suggest_operators(word: str, suggestion: str) -> None:
    """Test hints when users type SQL-style boolean keywords."""
    with pytest.raises(ParseError) as exc:
        parse(f"a == 1 {word} b == 2")
    assert suggestion in str(exc.value)


def test_lex_errors_propagate_from_parse() -> None:
    """Test that parse() surfaces tokenizer errors unchanged."""
    with pytest.raises(LexError):
        parse("a == 'open")


# =============================================================================
# Token-level entry points
# =============================================================================


def test_parse_tokens_matches_parse() -> None:
    """Test parsing an explicit token list."""
    text = "bedrooms >= 2 || bathrooms > 1"
    assert parse_tokens(tokenize(text)) == parse(text)


def test_parser_requires_eof_terminated_tokens() -> None:
    """Test that a token list without EOF is rejected up front."""
    with pytest.raises(ParseError) as exc:
        Parser([Token(TokenType.IDENTIFIER, "a", 0)])
    assert exc.value.position == 0
    with pytest.raises(ParseError):
        parse_tokens([])


def test_parsed_tree_is_immutable() -> None:
    """Test that AST nodes cannot be mutated."""
    expr = parse("price < 1")
    with pytest.raises(AttributeError):
        expr.op = ">"  # type: ignore[misc]


@pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits"), reason="interpreter has no integer digit limit"
)
def test_oversized_integer_literal_is_parse_error() -> None:
    """Test that a literal beyond the interpreter's integer digit limit reports its position."""
    with pytest.raises(ParseError) as exc:
        parse("price < " + "9" * 5000)
    assert exc.value.position == 8
    assert "Invalid number" in str(exc.value)


def test_long_flat_chain_parses() -> None:
    """Test that a long `&&` chain builds a left-nested tree."""
    expr = parse(" && ".join(["price > 0"] * 2000))
    assert isinstance(expr, BinaryOp)
    assert expr.op == "&&"
    assert isinstance(expr.left, BinaryOp)
