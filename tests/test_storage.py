import pytest

from cell_interpreter.errors import StorageError
from cell_interpreter.sheet import Sheet
from cell_interpreter.storage import (
    from_csv,
    from_xml,
    load,
    save,
    to_csv,
    to_dataframe,
    to_xml,
)


@pytest.fixture
def sheet():
    return Sheet(
        rows=3,
        columns=4,
        cells={"A1": "5", "B2": "=A1 + 1", "C1": "label", "D3": "=inc(B2)"},
    )


class TestXml:
    def test_round_trip(self, sheet):
        loaded = from_xml(to_xml(sheet))
        assert (loaded.rows, loaded.columns) == (3, 4)
        assert loaded.expressions == sheet.expressions
        assert loaded.value("D3") == 7

    def test_document_layout(self, sheet):
        xml = to_xml(sheet)
        assert "<Rows>3</Rows>" in xml
        assert "<Cols>4</Cols>" in xml
        assert "<Name>B2</Name>" in xml
        assert "<Value>=A1 + 1</Value>" in xml

    def test_reads_namespaced_documents(self):
        content = (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            '<SavedData xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
            'xmlns:xsd="http://www.w3.org/2001/XMLSchema">\n'
            "  <Rows>2</Rows>\n"
            "  <Cols>3</Cols>\n"
            "  <Cells>\n"
            "    <CellRecord><Name>A1</Name><Value>=1+1</Value></CellRecord>\n"
            "    <CellRecord><Name>b2</Name><Value /></CellRecord>\n"
            "    <CellRecord><Value>orphan</Value></CellRecord>\n"
            "  </Cells>\n"
            "</SavedData>\n"
        )
        sheet = from_xml(content)
        assert (sheet.rows, sheet.columns) == (2, 3)
        assert sheet.expressions == {"A1": "=1+1", "B2": ""}
        assert not sheet.dirty

    def test_malformed(self):
        with pytest.raises(StorageError):
            from_xml("<SavedData><Rows>1</Rows>")
        with pytest.raises(StorageError):
            from_xml("<Other />")
        with pytest.raises(StorageError):
            from_xml("<SavedData><Cols>1</Cols></SavedData>")
        with pytest.raises(StorageError):
            from_xml("<SavedData><Rows>x</Rows><Cols>1</Cols></SavedData>")


class TestCsv:
    def test_quoting(self):
        sheet = Sheet(
            rows=2, columns=2, cells={"A1": "a,b", "B1": "=A1", "A2": 'say "hi"'}
        )
        assert to_csv(sheet) == '"a,b",=A1\r\n"say ""hi""",\r\n'

    def test_round_trip(self, sheet):
        loaded = from_csv(to_csv(sheet))
        assert (loaded.rows, loaded.columns) == (3, 4)
        assert loaded.expressions == sheet.expressions

    def test_blank_lines_and_ragged_rows(self):
        sheet = from_csv("1,2\n\n3\n,,,4\n")
        assert (sheet.rows, sheet.columns) == (3, 4)
        assert sheet.expressions == {"A1": "1", "B1": "2", "A2": "3", "D3": "4"}


class TestFiles:
    @pytest.mark.parametrize("filename", ["table.xlcx", "table.csv", "table.xlsx"])
    def test_save_and_load(self, sheet, tmp_path, filename):
        sheet.set("A1", "6")
        assert sheet.dirty
        path = tmp_path / filename
        save(sheet, path)
        assert not sheet.dirty

        loaded = load(path)
        assert loaded.expressions == sheet.expressions
        assert loaded.value("D3") == 8
        assert loaded.display("C1") == "label"

    def test_xlsx_extent_is_used_range(self, tmp_path):
        sheet = Sheet(rows=10, columns=10, cells={"A1": "1", "B2": "=A1 * 3"})
        path = tmp_path / "table.xlsx"
        save(sheet, path)
        loaded = load(path)
        assert (loaded.rows, loaded.columns) == (2, 2)
        assert loaded.value("B2") == 3

    def test_xlsx_rerenders_numeric_literals(self, tmp_path):
        sheet = Sheet(rows=1, columns=3, cells={"A1": "1.50", "B1": "007", "C1": "x"})
        path = tmp_path / "table.xlsx"
        save(sheet, path)
        assert load(path).expressions == {"A1": "1.5", "B1": "7", "C1": "x"}


class TestDataFrame:
    def test_values(self, sheet):
        df = to_dataframe(sheet)
        assert list(df.columns) == ["A", "B", "C", "D"]
        assert list(df.index) == [1, 2, 3]
        assert df.loc[1, "A"] == "5"
        assert df.loc[2, "B"] == "6"
        assert df.loc[3, "D"] == "7"

    def test_expressions(self, sheet):
        df = to_dataframe(sheet, show_values=False)
        assert df.loc[2, "B"] == "=A1 + 1"
        assert df.loc[1, "D"] == ""
