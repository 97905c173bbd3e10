import re

from openpyxl.utils import column_index_from_string, get_column_letter

from cell_interpreter.errors import CellOutOfBounds, InvalidCellReference

# Constants
CELL_NAME_REGEX = re.compile(r"^([A-Z]+)([0-9]+)$")
ALIAS_REGEX = re.compile(r"^=([A-Za-z]+[0-9]+)$")


def normalize_cell_name(name: str) -> str:
    return name.upper()


def split_cell_name(name: str) -> tuple[int, int]:
    """Split a cell name into 1-based (row, column) coordinates."""
    match = CELL_NAME_REGEX.match(normalize_cell_name(name))
    if not match:
        raise InvalidCellReference(f"Invalid cell reference: {name}")
    col, row = match.groups()
    try:
        column = column_index_from_string(col)
    except ValueError:
        # Well formed, but past the last column openpyxl knows about
        raise CellOutOfBounds(f"Column {col} of {name} is out of range")
    return int(row), column


def cell_name(row: int, column: int) -> str:
    return f"{column_as_str(column)}{row}"


def alias_target(text: str) -> str | None:
    """Return the referenced cell if `text` is exactly '=' plus one cell name."""
    match = ALIAS_REGEX.match(text)
    if match:
        return normalize_cell_name(match.group(1))
    return None


def column_as_str(col: int | str):
    if isinstance(col, int):
        col = get_column_letter(col)
    return col
