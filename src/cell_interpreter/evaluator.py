from decimal import Decimal, DecimalException
from typing import Callable, Iterable, List

from cell_interpreter.errors import (
    CommaInCell,
    InvalidExpression,
    MissingOperand,
    MissingOperands,
    NumberOutOfRange,
)
from cell_interpreter.operators import BINARY_OPERATORS, UNARY_FUNCTIONS
from cell_interpreter.tokenizer import Token, TokenType
from cell_interpreter.types import CellValue, coerce_to_number

CellResolver = Callable[[str], CellValue]


class PostfixEvaluator:
    """Stack machine running a postfix token queue.

    Cell references are looked up through `resolve_cell` and pushed with their
    type intact; coercion to a number only happens when an operator consumes
    its operands.
    """

    def __init__(self, resolve_cell: CellResolver):
        self.resolve_cell = resolve_cell
        self.stack: List[CellValue] = []

    def evaluate(self, postfix: Iterable[Token]) -> CellValue:
        self.stack = []

        for token in postfix:
            match token.type:
                case TokenType.NUMBER:
                    self.stack.append(Decimal(token.value))
                case TokenType.CELL:
                    self.stack.append(self._evaluate_cell_ref(token))
                case TokenType.FUNCTION:
                    self._apply_function(token)
                case TokenType.OPERATOR:
                    self._apply_operator(token)
                case _:
                    raise InvalidExpression(
                        f"Unexpected token {token.value!r} at position {token.position}"
                    )

        if len(self.stack) != 1:
            raise InvalidExpression(
                f"Invalid expression: {len(self.stack)} values left on the stack"
            )
        return self.stack.pop()

    def _evaluate_cell_ref(self, token: Token) -> CellValue:
        value = self.resolve_cell(token.value)
        if isinstance(value, str) and "," in value:
            raise CommaInCell(f"Cell {token.value} contains a comma")
        return value

    def _apply_function(self, token: Token) -> None:
        if not self.stack:
            raise MissingOperand(f"Missing operand for {token.value}")
        operand = coerce_to_number(self.stack.pop())
        try:
            result = UNARY_FUNCTIONS[token.value](operand)
        except DecimalException as e:
            raise NumberOutOfRange(f"Cannot compute {token.value}({operand})") from e
        self.stack.append(result)

    def _apply_operator(self, token: Token) -> None:
        if len(self.stack) < 2:
            raise MissingOperands(f"Missing operands for '{token.value}'")
        # The right operand was pushed last
        right = self.stack.pop()
        left = self.stack.pop()
        operator = BINARY_OPERATORS[token.value]
        left, right = coerce_to_number(left), coerce_to_number(right)
        try:
            result = operator(left, right)
        except DecimalException as e:
            raise NumberOutOfRange(
                f"Cannot compute {left} {token.value} {right}"
            ) from e
        self.stack.append(result)


def evaluate_postfix(postfix: Iterable[Token], resolve_cell: CellResolver) -> CellValue:
    return PostfixEvaluator(resolve_cell).evaluate(postfix)
