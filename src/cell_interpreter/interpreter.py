import logging
from decimal import Decimal
from functools import partial

from cell_interpreter.errors import (
    CellOutOfBounds,
    ChainTooLong,
    CommaNotAllowed,
    CycleDetected,
)
from cell_interpreter.evaluator import CellResolver, PostfixEvaluator, evaluate_postfix
from cell_interpreter.parser import parse_formula
from cell_interpreter.store import CellStore
from cell_interpreter.types import CellValue, parse_decimal
from cell_interpreter.utils import alias_target, normalize_cell_name, split_cell_name

# Each level of a reference chain costs three Python frames, so this keeps a
# long chain well under the default recursion limit.
MAX_CHAIN_LENGTH = 200


def evaluate(expression: str, resolve_cell: CellResolver) -> CellValue:
    """Evaluate a formula, looking up cell references through `resolve_cell`.

    A blank expression is zero and a bare decimal literal is returned as is,
    without going through the tokenizer. A leading '=' is optional.
    """
    if not expression.strip():
        return Decimal(0)

    # Checked before the literal shortcut so "1,5" is an error, not a number
    if "," in expression:
        raise CommaNotAllowed("Comma is not allowed")

    number = parse_decimal(expression)
    if number is not None:
        return number

    if expression.startswith("="):
        expression = expression[1:]
    postfix = parse_formula(expression)
    return evaluate_postfix(postfix, resolve_cell)


class CellInterpreter:
    def __init__(self, store: CellStore, max_chain_length: int = MAX_CHAIN_LENGTH):
        self.store = store
        self.max_chain_length = max_chain_length

    def resolve(self, name: str) -> CellValue:
        """Compute the value of a cell, following its references."""
        return self._resolve_cell(name, ())

    def evaluate(self, expression: str) -> CellValue:
        """Evaluate an ad-hoc formula against the cells of the store."""
        return evaluate(expression, self.resolve)

    def _resolve_cell(self, name: str, visited: tuple[str, ...]) -> CellValue:
        # `visited` is the chain of cells currently being resolved above this
        # call. Tuples are immutable, so sibling references each extend their
        # own copy and never see each other's cells.
        name = normalize_cell_name(name)
        if name in visited:
            cycle = CycleDetected(visited + (name,))
            logging.debug(str(cycle))
            raise cycle
        visited = visited + (name,)
        if len(visited) > self.max_chain_length:
            logging.debug(
                f"Giving up on {visited[0]} after {len(visited)} nested references"
            )
            raise ChainTooLong(visited, self.max_chain_length)

        row, column = split_cell_name(name)
        if not (
            1 <= row <= self.store.row_count and 1 <= column <= self.store.column_count
        ):
            raise CellOutOfBounds(
                f"Cell {name} is outside the grid "
                f"({self.store.row_count} rows, {self.store.column_count} columns)"
            )

        text = self.store.get_text(name)
        if not text:
            return Decimal(0)

        if not text.startswith("="):
            number = parse_decimal(text)
            return number if number is not None else text

        # A lone reference passes the target's value through, text included
        if target := alias_target(text):
            return self._resolve_cell(target, visited)

        # Straight to the evaluator: fewer frames per chain level than evaluate()
        resolve_ref = partial(self._resolve_cell, visited=visited)
        return PostfixEvaluator(resolve_ref).evaluate(parse_formula(text[1:]))
