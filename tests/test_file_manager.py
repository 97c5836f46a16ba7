import pytest

from opensheet.file_manager import FileFormat, detect_format, open_workbook, save_workbook
from opensheet.model import FileFormatError, Workbook


def _sample() -> Workbook:
    wb = Workbook()
    sheet = wb.add_sheet("Data")
    sheet.set_cell(1, 1, "Product")
    sheet.set_cell(1, 2, "Price")
    sheet.set_cell(2, 1, "Widget")
    sheet.set_cell(2, 2, "9.99")
    return wb


@pytest.mark.parametrize(
    "path, expected",
    [
        ("book.opensheet", FileFormat.OPENSHEET),
        ("BOOK.OpenSheet", FileFormat.OPENSHEET),
        ("report.xlsx", FileFormat.XLSX),
        ("report.xls", FileFormat.XLSX),
        ("data.csv", FileFormat.CSV),
        ("data.tsv", FileFormat.CSV),
        ("notes.TXT", FileFormat.CSV),
        ("archive.tar.gz", FileFormat.UNKNOWN),
        ("noextension", FileFormat.UNKNOWN),
        ("/some/dir.csv/file", FileFormat.UNKNOWN),
    ],
)
def test_detect_format(path, expected):
    assert detect_format(path) is expected


def test_open_missing_file(tmp_path):
    missing = tmp_path / "absent.csv"
    with pytest.raises(FileFormatError, match="File not found"):
        open_workbook(missing)


def test_open_unsupported_format(tmp_path):
    path = tmp_path / "thing.doc"
    path.write_text("hello", encoding="utf-8")
    with pytest.raises(FileFormatError, match="Unsupported format: doc"):
        open_workbook(path)


def test_save_none_workbook(tmp_path):
    with pytest.raises(FileFormatError, match="No workbook to save"):
        save_workbook(None, tmp_path / "x.opensheet")


@pytest.mark.parametrize("name", ["book.opensheet", "book.xlsx", "book.csv"])
def test_round_trip(tmp_path, name):
    path = tmp_path / name
    written = save_workbook(_sample(), path)
    assert written == path
    loaded = open_workbook(path)
    sheet = loaded.sheet(0)
    assert sheet.cell(1, 1).raw == "Product"
    assert sheet.cell(1, 2).raw == "Price"
    assert sheet.cell(2, 1).raw == "Widget"
    assert sheet.cell(2, 2).raw == "9.99"


def test_opensheet_round_trip_keeps_sheet_name(tmp_path):
    path = tmp_path / "named.opensheet"
    save_workbook(_sample(), path)
    assert open_workbook(path).sheet_names() == ["Data"]


def test_unknown_extension_saved_as_opensheet(tmp_path):
    path = tmp_path / "book.dat"
    written = save_workbook(_sample(), path)
    assert written == tmp_path / "book.dat.opensheet"
    assert written.exists()
    assert not path.exists()
    assert open_workbook(written).sheet(0).cell(2, 1).raw == "Widget"


def test_csv_saves_active_sheet(tmp_path):
    wb = Workbook()
    wb.add_sheet("First").set_cell(1, 1, "first-sheet")
    wb.add_sheet("Second").set_cell(1, 1, "second-sheet")
    wb.active_sheet_index = 1
    path = tmp_path / "active.csv"
    save_workbook(wb, path)
    loaded = open_workbook(path)
    assert loaded.sheet_count == 1
    assert loaded.sheet(0).cell(1, 1).raw == "second-sheet"


def test_open_empty_csv_raises(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(FileFormatError, match="Empty file"):
        open_workbook(path)


def test_open_corrupt_xlsx_raises(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(FileFormatError):
        open_workbook(path)