from cell_interpreter.errors import FormulaError
from cell_interpreter.interpreter import CellInterpreter, evaluate
from cell_interpreter.sheet import Sheet
from cell_interpreter.store import CellStore, DictCellStore, WorksheetCellStore
from cell_interpreter.types import CellValue

__all__ = [
    "CellInterpreter",
    "CellStore",
    "CellValue",
    "DictCellStore",
    "FormulaError",
    "Sheet",
    "WorksheetCellStore",
    "evaluate",
]
