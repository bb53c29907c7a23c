"""
Recursive descent parser for filter expressions.

Grammar (lowest to highest precedence):

    orExpr     := andExpr ( "||" andExpr )*
    andExpr    := unaryExpr ( "&&" unaryExpr )*
    unaryExpr  := "!" unaryExpr | comparison
    comparison := primary ( compOp primary )?
    primary    := IDENTIFIER | NUMBER | BOOLEAN | STRING | "(" orExpr ")"

A comparison takes at most one operator, so `a < b < c` is a syntax error rather
than a chained comparison.
"""

from __future__ import annotations

from .exceptions import ParseError
from .models import FieldType
from .nodes import BinaryOp, Comparison, FieldRef, LiteralValue, Node, UnaryOp
from .tokenizer import Token, TokenType, tokenize

_KEYWORD_HINTS = {
    "AND": "Hint: Use '&&' for AND: expr1 && expr2",
    "OR": "Hint: Use '||' for OR: expr1 || expr2",
    "NOT": "Hint: Use '!' for NOT: !(expr)",
}


class Parser:
    """Recursive descent parser over a token list."""

    def __init__(self, tokens: list[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ParseError("Token stream must end with an EOF token", position=0)
        self.tokens = tokens
        self.pos = 0

    def _current(self) -> Token:
        """Get current token."""
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        """Advance to next token and return previous."""
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _unexpected(self, token: Token) -> ParseError:
        if token.type == TokenType.EOF:
            return ParseError(
                f"Unexpected end of expression at position {token.pos}", position=token.pos
            )
        message = f"Unexpected token '{token.value}' at position {token.pos}"
        hint = _KEYWORD_HINTS.get(token.value.upper()) if token.type == TokenType.IDENTIFIER else None
        if hint:
            message = f"{message}. {hint}"
        return ParseError(message, position=token.pos)

    def parse(self) -> Node:
        """Parse the token stream into an AST."""
        expr = self._parse_or_expr()

        token = self._current()
        if token.type != TokenType.EOF:
            if token.type == TokenType.OPERATOR:
                raise ParseError(
                    f"Unexpected operator '{token.value}' at position {token.pos}. "
                    "Comparisons cannot be chained; combine them with '&&'",
                    position=token.pos,
                )
            raise self._unexpected(token)

        return expr

    def _parse_or_expr(self) -> Node:
        """Parse OR expressions (lowest precedence)."""
        left = self._parse_and_expr()

        while self._current().type == TokenType.OR:
            self._advance()  # consume ||
            right = self._parse_and_expr()
            left = BinaryOp("||", left, right)

        return left

    def _parse_and_expr(self) -> Node:
        """Parse AND expressions (medium precedence)."""
        left = self._parse_unary_expr()

        while self._current().type == TokenType.AND:
            self._advance()  # consume &&
            right = self._parse_unary_expr()
            left = BinaryOp("&&", left, right)

        return left

    def _parse_unary_expr(self) -> Node:
        """Parse NOT expressions (high precedence)."""
        if self._current().type == TokenType.NOT:
            self._advance()  # consume !
            operand = self._parse_unary_expr()  # NOT is right-associative
            return UnaryOp("!", operand)

        return self._parse_comparison()

    def _parse_comparison(self) -> Node:
        """Parse a primary optionally followed by one comparison operator and primary."""
        left = self._parse_primary()

        if self._current().type == TokenType.OPERATOR:
            op_token = self._advance()
            right = self._parse_primary()
            return Comparison(op_token.value, left, right)  # type: ignore[arg-type]

        return left

    def _parse_primary(self) -> Node:
        """Parse atoms: field references, literals or parenthesized expressions."""
        token = self._current()

        if token.type == TokenType.LPAREN:
            self._advance()  # consume (
            expr = self._parse_or_expr()
            closing = self._current()
            if closing.type != TokenType.RPAREN:
                raise ParseError(
                    f"Expected ')' after expression at position {closing.pos}",
                    position=closing.pos,
                )
            self._advance()  # consume )
            return expr

        if token.type == TokenType.NUMBER:
            self._advance()
            try:
                value = _parse_number(token.value)
            except ValueError:
                # int() refuses literals beyond the interpreter's digit limit
                raise ParseError(
                    f"Invalid number '{token.value[:20]}...' at position {token.pos}",
                    position=token.pos,
                ) from None
            return LiteralValue(value, FieldType.NUMBER)

        if token.type == TokenType.BOOLEAN:
            self._advance()
            return LiteralValue(token.value == "true", FieldType.BOOLEAN)

        if token.type == TokenType.STRING:
            self._advance()
            return LiteralValue(token.value, FieldType.STRING)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return FieldRef(token.value)

        if token.type == TokenType.OPERATOR:
            raise ParseError(
                f"Missing operand before operator '{token.value}' at position {token.pos}",
                position=token.pos,
            )

        raise self._unexpected(token)


def _parse_number(text: str) -> int | float:
    return float(text) if "." in text else int(text)


def parse_tokens(tokens: list[Token]) -> Node:
    """
    Parse a token list (as produced by `tokenize`) into an AST.

    Raises:
        ParseError: If the tokens do not match the grammar or lack a final EOF token
    """
    return Parser(tokens).parse()


def parse(expression: str) -> Node:
    """
    Parse a filter expression string into an AST.

    Args:
        expression: The filter expression to parse

    Returns:
        The root node of the parsed expression

    Raises:
        LexError: If the expression contains an unterminated string or an
            unrecognized character
        ParseError: If the tokens do not match the grammar

    Examples:
        parse("price < 350000")
        # Comparison("<", FieldRef("price"), LiteralValue(350000, FieldType.NUMBER))

        parse("(price < 350000 || bedrooms < 1) && carParkIncluded == true")
        # BinaryOp("&&", BinaryOp("||", ...), Comparison("==", ...))
    """
    return parse_tokens(tokenize(expression))
