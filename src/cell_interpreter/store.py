from datetime import date, datetime, time
from decimal import Decimal
from typing import Mapping, Protocol, runtime_checkable

from openpyxl.worksheet.worksheet import Worksheet

from cell_interpreter.utils import normalize_cell_name, split_cell_name


@runtime_checkable
class CellStore(Protocol):
    """Read-only view of the cells an interpreter resolves against."""

    @property
    def row_count(self) -> int: ...

    @property
    def column_count(self) -> int: ...

    def get_text(self, name: str) -> str | None:
        """Return the raw stored text of a cell, or None if it is empty."""
        ...


class DictCellStore:
    def __init__(self, cells: Mapping[str, str], rows: int, columns: int):
        self.cells = {normalize_cell_name(k): v for k, v in cells.items()}
        self.rows = rows
        self.columns = columns

    @property
    def row_count(self) -> int:
        return self.rows

    @property
    def column_count(self) -> int:
        return self.columns

    def get_text(self, name: str) -> str | None:
        return self.cells.get(normalize_cell_name(name))


def cell_text(value) -> str | None:
    """Render an openpyxl cell value as the text a user would have typed."""
    if value is None:
        return None
    if isinstance(value, bool):
        # bool before int: True is an int
        return str(value).upper()
    if isinstance(value, (int, float, Decimal)):
        return format(Decimal(str(value)), "f")
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


class WorksheetCellStore:
    """Cell store backed by an openpyxl worksheet.

    The extent is the worksheet's used range. Formulas are read as their
    '=...' text, so the workbook must be loaded without `data_only`.
    """

    def __init__(self, ws: Worksheet):
        self.ws = ws

    @property
    def row_count(self) -> int:
        return self.ws.max_row

    @property
    def column_count(self) -> int:
        return self.ws.max_column

    def get_text(self, name: str) -> str | None:
        row, column = split_cell_name(name)
        # ws.cell() creates missing cells, which would grow the used range
        if row > self.ws.max_row or column > self.ws.max_column:
            return None
        return cell_text(self.ws.cell(row=row, column=column).value)
