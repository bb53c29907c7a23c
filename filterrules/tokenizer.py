"""
Tokenizer for filter expressions.

Turns an expression such as `price < 350000 && petsAllowed == true` into a flat list of
tokens, always terminated by an EOF token.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .exceptions import LexError


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    IDENTIFIER = auto()  # Field name
    NUMBER = auto()  # -12, 3.5
    STRING = auto()  # "text" or 'text'
    BOOLEAN = auto()  # true, false
    OPERATOR = auto()  # ==, !=, <, >, <=, >=
    AND = auto()  # &&
    OR = auto()  # ||
    NOT = auto()  # !
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    EOF = auto()  # End of input


@dataclass(frozen=True)
class Token:
    """A token from the expression string."""

    type: TokenType
    value: str
    pos: int  # Position in original string for error messages


_WHITESPACE = " \t\n\r\f\v"
_DIGITS = "0123456789"
_IDENT_START = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_"
_IDENT_CHARS = _IDENT_START + _DIGITS

# Two-character tokens are matched before any single-character token.
_TWO_CHAR_TOKENS = {
    "&&": TokenType.AND,
    "||": TokenType.OR,
    "==": TokenType.OPERATOR,
    "!=": TokenType.OPERATOR,
    "<=": TokenType.OPERATOR,
    ">=": TokenType.OPERATOR,
}

_ONE_CHAR_TOKENS = {
    "<": TokenType.OPERATOR,
    ">": TokenType.OPERATOR,
    "!": TokenType.NOT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

_HINTS = {
    "=": "Hint: Use '==' for equality",
    "&": "Hint: Use '&&' for AND",
    "|": "Hint: Use '||' for OR",
}


class Tokenizer:
    """Single-pass tokenizer over an expression string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < self.length else ""

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def _read_number(self) -> Token:
        start = self.pos
        if self._peek() == "-":
            self.pos += 1
        while self._peek() and self._peek() in _DIGITS:
            self.pos += 1
        # A fraction needs at least one digit after the dot
        if self._peek() == "." and self._peek(1) and self._peek(1) in _DIGITS:
            self.pos += 1
            while self._peek() and self._peek() in _DIGITS:
                self.pos += 1
        return Token(TokenType.NUMBER, self.text[start : self.pos], start)

    def _read_string(self) -> Token:
        quote = self.text[self.pos]
        start = self.pos
        self.pos += 1  # Skip opening quote
        result: list[str] = []

        while self.pos < self.length:
            ch = self.text[self.pos]
            if ch == quote:
                self.pos += 1  # Skip closing quote
                return Token(TokenType.STRING, "".join(result), start)
            if ch == "\\":
                # Backslash takes the next character literally
                self.pos += 1
                if self.pos < self.length:
                    result.append(self.text[self.pos])
                    self.pos += 1
            else:
                result.append(ch)
                self.pos += 1

        raise LexError(f"Unterminated string starting at position {start}", position=start)

    def _read_identifier(self) -> Token:
        start = self.pos
        while self._peek() and self._peek() in _IDENT_CHARS:
            self.pos += 1
        value = self.text[start : self.pos]
        if value in ("true", "false"):
            return Token(TokenType.BOOLEAN, value, start)
        return Token(TokenType.IDENTIFIER, value, start)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire expression string."""
        tokens: list[Token] = []

        while True:
            self._skip_whitespace()

            if self.pos >= self.length:
                tokens.append(Token(TokenType.EOF, "", self.pos))
                break

            ch = self.text[self.pos]
            pair = self.text[self.pos : self.pos + 2]

            if pair in _TWO_CHAR_TOKENS:
                tokens.append(Token(_TWO_CHAR_TOKENS[pair], pair, self.pos))
                self.pos += 2
            elif ch in _ONE_CHAR_TOKENS:
                tokens.append(Token(_ONE_CHAR_TOKENS[ch], ch, self.pos))
                self.pos += 1
            elif ch in _DIGITS or (ch == "-" and self._peek(1) and self._peek(1) in _DIGITS):
                tokens.append(self._read_number())
            elif ch in ("'", '"'):
                tokens.append(self._read_string())
            elif ch in _IDENT_START:
                tokens.append(self._read_identifier())
            else:
                message = f"Unexpected character '{ch}' at position {self.pos}"
                if ch in _HINTS:
                    message = f"{message}. {_HINTS[ch]}"
                raise LexError(message, position=self.pos)

        return tokens


def tokenize(text: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens ending with EOF."""
    return Tokenizer(text).tokenize()
