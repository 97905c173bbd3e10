import re
from enum import Enum, auto
from typing import List, NamedTuple

from cell_interpreter.errors import (
    CommaNotAllowed,
    FunctionRequiresParens,
    InvalidCharacters,
)


class TokenType(Enum):
    NUMBER = auto()
    CELL = auto()
    OPERATOR = auto()
    FUNCTION = auto()
    LPAREN = auto()
    RPAREN = auto()


class Token(NamedTuple):
    type: TokenType
    value: str
    position: int


# Alternatives are tried in order, so the word operators win over cell
# references that start with the same letters.
TOKEN_REGEX = re.compile(
    r"(?P<word>mod|div|inc|dec)"
    r"|(?P<symbol><>|<=|>=|[+\-*/=<>()])"
    r"|(?P<cell>[a-z]+[0-9]+)"
    r"|(?P<number>[0-9]+(?:\.[0-9]+)?)",
    re.IGNORECASE | re.ASCII,
)

FUNCTIONS = {"inc", "dec"}
IGNORED_CHARACTERS = " \t\r\n"


class FormulaTokenizer:
    def __init__(self, expression: str):
        self.expression = expression
        self.formula = expression.translate(str.maketrans("", "", IGNORED_CHARACTERS))

    def tokenize(self) -> List[Token]:
        """Tokenize the formula and return list of tokens."""
        if "," in self.expression:
            raise CommaNotAllowed("Comma is not allowed")

        tokens = []
        covered = 0
        for match in TOKEN_REGEX.finditer(self.formula):
            tokens.append(self._make_token(match))
            covered += len(match.group())

        if covered != len(self.formula):
            raise InvalidCharacters(
                f"Invalid characters in formula: {self._stray_characters()!r}"
            )

        self._check_function_calls(tokens)
        return tokens

    def _make_token(self, match: re.Match) -> Token:
        value = match.group()
        start = match.start()
        kind = match.lastgroup
        if kind == "word":
            value = value.lower()
            if value in FUNCTIONS:
                return Token(TokenType.FUNCTION, value, start)
            return Token(TokenType.OPERATOR, value, start)
        if kind == "symbol":
            if value == "(":
                return Token(TokenType.LPAREN, value, start)
            if value == ")":
                return Token(TokenType.RPAREN, value, start)
            return Token(TokenType.OPERATOR, value, start)
        if kind == "cell":
            return Token(TokenType.CELL, value.upper(), start)
        return Token(TokenType.NUMBER, value, start)

    def _check_function_calls(self, tokens: List[Token]) -> None:
        """inc/dec only work as calls: the next token must be '('."""
        for i, token in enumerate(tokens):
            if token.type != TokenType.FUNCTION:
                continue
            if i + 1 >= len(tokens) or tokens[i + 1].type != TokenType.LPAREN:
                raise FunctionRequiresParens(
                    f"Function {token.value} requires parentheses "
                    f"at position {token.position}"
                )

    def _stray_characters(self) -> str:
        return TOKEN_REGEX.sub("", self.formula)


def tokenize(expression: str) -> List[Token]:
    """Helper function to tokenize a formula string."""
    return FormulaTokenizer(expression).tokenize()
