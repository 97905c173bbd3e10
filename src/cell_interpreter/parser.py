from collections import deque
from typing import Deque, List

from cell_interpreter.errors import MismatchedParentheses
from .tokenizer import Token, TokenType, FormulaTokenizer

PRECEDENCE = {
    "inc": 4,
    "dec": 4,
    "*": 3,
    "/": 3,
    "mod": 3,
    "div": 3,
    "+": 2,
    "-": 2,
    "=": 1,
    "<": 1,
    ">": 1,
    "<=": 1,
    ">=": 1,
    "<>": 1,
}


def precedence(op: str) -> int:
    # '(' and anything unknown sit at the bottom
    return PRECEDENCE.get(op, 0)


# Helper function to parse a formula string into postfix order.
def parse_formula(formula: str) -> Deque[Token]:
    """Helper function to parse a formula string into a postfix queue."""
    tokens = FormulaTokenizer(formula).tokenize()
    return PostfixParser(tokens).parse()


def to_postfix(tokens: List[Token]) -> Deque[Token]:
    return PostfixParser(tokens).parse()


class PostfixParser:
    """Shunting-yard conversion from infix tokens to a postfix queue.

    `inc` and `dec` are prefix functions: they wait on the operator stack under
    their opening parenthesis and are emitted as soon as that group closes.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.output: Deque[Token] = deque()
        self.stack: List[Token] = []

    def parse(self) -> Deque[Token]:
        """Convert the tokens into postfix order."""
        self.output = deque()
        self.stack = []

        for token in self.tokens:
            match token.type:
                case TokenType.NUMBER | TokenType.CELL:
                    self.output.append(token)
                case TokenType.FUNCTION | TokenType.LPAREN:
                    self.stack.append(token)
                case TokenType.RPAREN:
                    self._close_group(token)
                case TokenType.OPERATOR:
                    self._push_operator(token)

        while self.stack:
            top = self.stack.pop()
            if top.type == TokenType.LPAREN:
                raise MismatchedParentheses(
                    f"Unclosed parenthesis at position {top.position}"
                )
            self.output.append(top)

        return self.output

    def _push_operator(self, token: Token) -> None:
        # Ties pop first, so operators of equal rank associate to the left
        while self.stack and precedence(self.stack[-1].value) >= precedence(
            token.value
        ):
            self.output.append(self.stack.pop())
        self.stack.append(token)

    def _close_group(self, token: Token) -> None:
        while self.stack and self.stack[-1].type != TokenType.LPAREN:
            self.output.append(self.stack.pop())

        if not self.stack:
            raise MismatchedParentheses(
                f"Unexpected ')' at position {token.position}"
            )
        self.stack.pop()  # discard '('

        if self.stack and self.stack[-1].type == TokenType.FUNCTION:
            self.output.append(self.stack.pop())
