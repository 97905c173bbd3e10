from typing import Mapping

from cell_interpreter.errors import CycleDetected, FormulaError
from cell_interpreter.interpreter import CellInterpreter, MAX_CHAIN_LENGTH
from cell_interpreter.types import CellValue, format_value
from cell_interpreter.utils import cell_name, normalize_cell_name, split_cell_name

DEFAULT_ROWS = 5
DEFAULT_COLUMNS = 5

# Shown in place of a value when a formula cannot be computed
CYCLE_MARKER = "Cycle"
ERROR_MARKER = "Error"


class Sheet:
    """A grid of cells holding the text the user typed.

    The sheet doubles as the interpreter's cell store. Values are never
    cached: every display recomputes from the stored expressions.
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        columns: int = DEFAULT_COLUMNS,
        cells: Mapping[str, str] | None = None,
        max_chain_length: int = MAX_CHAIN_LENGTH,
    ):
        self.rows = rows
        self.columns = columns
        self.expressions: dict[str, str] = {}
        for name, text in (cells or {}).items():
            self.expressions[normalize_cell_name(name)] = text
        self.dirty = False
        self.interpreter = CellInterpreter(self, max_chain_length=max_chain_length)

    # CellStore interface
    @property
    def row_count(self) -> int:
        return self.rows

    @property
    def column_count(self) -> int:
        return self.columns

    def get_text(self, name: str) -> str | None:
        return self.expressions.get(normalize_cell_name(name))

    def get(self, name: str) -> str:
        return self.expressions.get(normalize_cell_name(name), "")

    def set(self, name: str, text: str) -> None:
        name = normalize_cell_name(name)
        split_cell_name(name)  # validate
        if self.get(name) == text:
            return
        self.expressions[name] = text
        self.dirty = True

    def clear(self, name: str) -> None:
        if self.expressions.pop(normalize_cell_name(name), None) is not None:
            self.dirty = True

    def mark_clean(self) -> None:
        self.dirty = False

    def add_row(self) -> None:
        self.rows += 1
        self.dirty = True

    def add_column(self) -> None:
        self.columns += 1
        self.dirty = True

    def delete_row(self) -> None:
        """Remove the last row along with everything stored in it."""
        if self.rows == 0:
            return
        for column in range(1, self.columns + 1):
            self.expressions.pop(cell_name(self.rows, column), None)
        self.rows -= 1
        self.dirty = True

    def delete_column(self) -> None:
        """Remove the last column along with everything stored in it."""
        if self.columns == 0:
            return
        for row in range(1, self.rows + 1):
            self.expressions.pop(cell_name(row, self.columns), None)
        self.columns -= 1
        self.dirty = True

    def value(self, name: str) -> CellValue:
        return self.interpreter.resolve(name)

    def evaluate(self, expression: str) -> CellValue:
        return self.interpreter.evaluate(expression)

    def display(self, name: str, show_values: bool = True) -> str:
        """Text shown for a cell in expression mode or value mode."""
        expression = self.get(name)
        if not show_values or not expression.startswith("="):
            return expression
        try:
            return format_value(self.value(name))
        except CycleDetected:
            return CYCLE_MARKER
        except FormulaError:
            return ERROR_MARKER

    def display_grid(self, show_values: bool = True) -> list[list[str]]:
        return [
            [
                self.display(cell_name(row, column), show_values)
                for column in range(1, self.columns + 1)
            ]
            for row in range(1, self.rows + 1)
        ]

    def is_calculation_result(self, name: str, text: str) -> bool:
        """Whether `text` is just the rendered value of the cell.

        Lets an editor ignore a value-mode edit that did not change anything.
        """
        try:
            return text == format_value(self.value(name))
        except FormulaError:
            return False

    def names(self) -> list[str]:
        return [
            cell_name(row, column)
            for row in range(1, self.rows + 1)
            for column in range(1, self.columns + 1)
        ]

    def __repr__(self) -> str:
        return (
            f"Sheet(rows={self.rows}, columns={self.columns}, "
            f"cells={len(self.expressions)})"
        )
