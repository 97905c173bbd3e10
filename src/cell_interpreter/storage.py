"""Saving and loading sheets.

Three formats are supported, picked from the file extension:

- `.xlcx`: XML with the grid size and every stored expression (default)
- `.csv`: one line per row, expressions only, grid size inferred on load
- `.xlsx`: an Excel workbook written with openpyxl

The xlsx round trip is lossy. A loaded workbook only keeps its used range, so
empty trailing rows and columns are dropped, and numeric literals come back as
openpyxl reads them (`1.50` loads as `1.5`, `007` as `7`).
"""

import csv
import io
import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from cell_interpreter.errors import StorageError
from cell_interpreter.sheet import Sheet
from cell_interpreter.store import cell_text
from cell_interpreter.types import parse_decimal
from cell_interpreter.utils import cell_name, column_as_str, split_cell_name


def to_xml(sheet: Sheet) -> str:
    root = ET.Element("SavedData")
    ET.SubElement(root, "Rows").text = str(sheet.rows)
    ET.SubElement(root, "Cols").text = str(sheet.columns)
    cells = ET.SubElement(root, "Cells")
    for name, text in sheet.expressions.items():
        record = ET.SubElement(cells, "CellRecord")
        ET.SubElement(record, "Name").text = name
        ET.SubElement(record, "Value").text = text
    ET.indent(root)
    return '<?xml version="1.0" encoding="utf-8"?>\n' + ET.tostring(
        root, encoding="unicode"
    )


def _local_name(tag: str) -> str:
    # Files written by other serializers may carry namespaces
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _read_int(root: ET.Element, name: str) -> int:
    element = _child(root, name)
    if element is None or element.text is None:
        raise StorageError(f"Missing <{name}> element")
    try:
        return int(element.text.strip())
    except ValueError:
        raise StorageError(f"Invalid <{name}> value: {element.text!r}")


def from_xml(content: str) -> Sheet:
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise StorageError(f"Malformed XML: {e}") from e
    if _local_name(root.tag) != "SavedData":
        raise StorageError(f"Unexpected root element <{_local_name(root.tag)}>")

    sheet = Sheet(rows=_read_int(root, "Rows"), columns=_read_int(root, "Cols"))
    cells = _child(root, "Cells")
    records = list(cells) if cells is not None else []
    for record in records:
        name = _child(record, "Name")
        value = _child(record, "Value")
        if name is None or not name.text:
            logging.warning("Skipping cell record without a name")
            continue
        sheet.expressions[name.text.strip().upper()] = (
            value.text if value is not None and value.text is not None else ""
        )
    return sheet


def to_csv(sheet: Sheet) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    for row in range(1, sheet.rows + 1):
        writer.writerow(
            [
                sheet.get(cell_name(row, column))
                for column in range(1, sheet.columns + 1)
            ]
        )
    return buffer.getvalue()


def from_csv(content: str) -> Sheet:
    """Rebuild a sheet from CSV text.

    Blank lines are skipped, the widest line sets the column count and empty
    fields leave their cell empty.
    """
    expressions: dict[str, str] = {}
    rows = 0
    columns = 0
    for values in csv.reader(io.StringIO(content)):
        if not values:
            continue
        rows += 1
        columns = max(columns, len(values))
        for column, text in enumerate(values, start=1):
            if text:
                expressions[cell_name(rows, column)] = text
    return Sheet(rows=rows, columns=columns, cells=expressions)


def to_workbook(sheet: Sheet, title: str = "Sheet1") -> Workbook:
    """Write the stored expressions to a new workbook.

    Numeric literals become numbers, everything else is written as text, so
    formulas land in Excel as (likely invalid) Excel formulas.
    """
    wb = Workbook()
    ws = wb.active
    assert ws is not None
    ws.title = title
    for name, text in sheet.expressions.items():
        row, column = split_cell_name(name)
        number = parse_decimal(text) if not text.startswith("=") else None
        ws.cell(row=row, column=column, value=number if number is not None else text)
    return wb


def from_worksheet(ws: Worksheet) -> Sheet:
    expressions: dict[str, str] = {}
    for row in ws.iter_rows():
        for cell in row:
            text = cell_text(cell.value)
            if text:
                expressions[cell.coordinate] = text
    return Sheet(rows=ws.max_row, columns=ws.max_column, cells=expressions)


def from_workbook(wb: Workbook, title: str | None = None) -> Sheet:
    ws = wb[title] if title else wb.active
    if ws is None:
        raise StorageError("Workbook has no active worksheet")
    return from_worksheet(ws)


def to_dataframe(sheet: Sheet, show_values: bool = True) -> pd.DataFrame:
    """The grid as displayed, one column per sheet column."""
    return pd.DataFrame(
        sheet.display_grid(show_values),
        columns=[column_as_str(c) for c in range(1, sheet.columns + 1)],
        index=pd.RangeIndex(1, sheet.rows + 1),
    )


def save(sheet: Sheet, path: str | Path) -> None:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        to_workbook(sheet).save(path)
    elif suffix == ".csv":
        path.write_text(to_csv(sheet), encoding="utf-8", newline="")
    else:
        path.write_text(to_xml(sheet), encoding="utf-8")
    sheet.mark_clean()


def load(path: str | Path) -> Sheet:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return from_workbook(load_workbook(path))
    content = path.read_text(encoding="utf-8")
    if suffix == ".csv":
        return from_csv(content)
    return from_xml(content)
