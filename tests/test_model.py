import pytest

from opensheet.model import (
    Cell,
    CellError,
    CellFormat,
    CellType,
    Sheet,
    Workbook,
)


def test_empty_cell():
    c = Cell()
    assert c.type is CellType.EMPTY
    assert c.is_empty
    assert c.display_text == ""


def test_number_cell():
    c = Cell("42")
    assert c.type is CellType.NUMBER
    assert c.value == 42.0
    assert not c.is_empty


def test_decimal_number_cell():
    c = Cell("42.5")
    assert c.type is CellType.NUMBER
    assert c.value == 42.5


def test_negative_number():
    c = Cell("-3.14")
    assert c.type is CellType.NUMBER
    assert c.value == pytest.approx(-3.14)


def test_text_cell():
    c = Cell("Hello World")
    assert c.type is CellType.TEXT
    assert c.value == "Hello World"


def test_boolean_true():
    c = Cell("TRUE")
    assert c.type is CellType.BOOLEAN
    assert c.value is True


def test_boolean_false():
    c = Cell("FALSE")
    assert c.type is CellType.BOOLEAN
    assert c.value is False


def test_formula_cell():
    c = Cell("=SUM(A1:A5)")
    assert c.type is CellType.FORMULA
    assert c.has_formula
    assert c.raw == "=SUM(A1:A5)"


def test_error_cell():
    c = Cell()
    c.set_error(CellError.DIV_ZERO)
    assert c.type is CellType.ERROR
    assert c.display_text == "#DIV/0!"


def test_cell_format():
    c = Cell("test")
    fmt = CellFormat(bold=True, foreground="#ff0000")
    c.format = fmt
    assert c.format.bold is True
    assert c.format.foreground == "#ff0000"


def test_format_default():
    c = Cell("test")
    assert not c.format.bold
    assert not c.format.italic
    assert c.format == CellFormat()


def test_set_raw_updates_type():
    c = Cell("hello")
    assert c.type is CellType.TEXT
    c.set_raw("123")
    assert c.type is CellType.NUMBER
    c.set_raw("")
    assert c.type is CellType.EMPTY


def test_comment():
    c = Cell("data")
    c.comment = "This is a note"
    assert c.comment == "This is a note"


def test_hyperlink():
    c = Cell("Click here")
    c.hyperlink = "https://example.com"
    assert c.hyperlink == "https://example.com"


@pytest.mark.parametrize(
    "error, text",
    [
        (CellError.DIV_ZERO, "#DIV/0!"),
        (CellError.NAME, "#NAME?"),
        (CellError.VALUE, "#VALUE!"),
        (CellError.REF, "#REF!"),
        (CellError.CIRCULAR, "#CIRC!"),
    ],
)
def test_error_strings(error, text):
    assert Cell.error_string(error) == text


def test_sheet_name():
    assert Sheet("TestSheet").name == "TestSheet"


def test_set_get_cell():
    s = Sheet("S")
    s.set_cell(1, 1, "hello")
    assert s.cell(1, 1).raw == "hello"
    assert s.has_cell(1, 1)
    assert not s.has_cell(2, 2)


def test_empty_raw_is_no_cell():
    s = Sheet("S")
    s.set_cell(1, 1, "")
    assert not s.has_cell(1, 1)


def test_clear_cell():
    s = Sheet("S")
    s.set_cell(2, 3, "data")
    assert s.has_cell(2, 3)
    s.clear_cell(2, 3)
    assert not s.has_cell(2, 3)


def test_used_range_and_max():
    s = Sheet("S")
    s.set_cell(5, 3, "val")
    s.set_cell(2, 8, "val")
    assert s.used_range() == (5, 8)
    assert s.max_row == 5
    assert s.max_col == 8


def test_accessing_missing_cell_does_not_grow_range():
    s = Sheet("S")
    assert s.cell(10, 10).is_empty
    assert s.used_range() == (0, 0)
    assert not s.has_cell(10, 10)


def test_iter_cells_row_major():
    s = Sheet("S")
    s.set_cell(2, 1, "c")
    s.set_cell(1, 2, "b")
    s.set_cell(1, 1, "a")
    assert [(r, c, cell.raw) for r, c, cell in s.iter_cells()] == [
        (1, 1, "a"),
        (1, 2, "b"),
        (2, 1, "c"),
    ]


def test_freeze_and_visibility():
    s = Sheet("S")
    s.freeze_row = 2
    s.freeze_col = 1
    assert (s.freeze_row, s.freeze_col) == (2, 1)
    assert s.visible
    s.visible = False
    assert not s.visible


def test_add_sheets():
    wb = Workbook()
    wb.add_sheet("Sheet1")
    wb.add_sheet("Sheet2")
    assert wb.sheet_count == 2
    assert wb.sheet(0).name == "Sheet1"
    assert wb.sheet(1).name == "Sheet2"


def test_sheet_by_name():
    wb = Workbook()
    wb.add_sheet("Alpha")
    wb.add_sheet("Beta")
    assert wb.sheet("Alpha").name == "Alpha"
    assert wb.sheet("BETA").name == "Beta"
    assert wb.sheet("Gamma") is None
    assert wb.sheet(5) is None


def test_sheet_names():
    wb = Workbook()
    for name in ("One", "Two", "Three"):
        wb.add_sheet(name)
    assert wb.sheet_names() == ["One", "Two", "Three"]


def test_duplicate_sheet_name_is_renamed():
    wb = Workbook()
    wb.add_sheet("Sheet")
    second = wb.add_sheet("Sheet")
    assert second.name != "Sheet"
    assert wb.sheet_count == 2


def test_active_sheet_default():
    wb = Workbook()
    wb.add_sheet("X")
    wb.add_sheet("Y")
    wb.active_sheet_index = 1
    assert wb.active_sheet.name == "Y"