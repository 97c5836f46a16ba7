"""Opening and saving workbooks in the format chosen by the file extension."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from .csv_io import CsvReader, CsvWriter
from .model import FileFormatError, Workbook
from .opensheet_format import read_workbook, write_workbook
from .xlsx import read_xlsx, write_xlsx


class FileFormat(Enum):
    OPENSHEET = "opensheet"
    XLSX = "xlsx"
    CSV = "csv"
    UNKNOWN = "unknown"


_EXTENSIONS: dict[str, FileFormat] = {
    "opensheet": FileFormat.OPENSHEET,
    "xlsx": FileFormat.XLSX,
    "xls": FileFormat.XLSX,
    "csv": FileFormat.CSV,
    "tsv": FileFormat.CSV,
    "txt": FileFormat.CSV,
}


def _suffix(path) -> str:
    name = Path(path).name
    return name.rsplit(".", 1)[1] if "." in name else ""


def detect_format(path) -> FileFormat:
    """Classify ``path`` by its extension, ignoring case."""
    return _EXTENSIONS.get(_suffix(path).lower(), FileFormat.UNKNOWN)


def open_workbook(path) -> Workbook:
    """Read the workbook at ``path`` with the reader its extension calls for."""
    path = Path(path)
    if not path.exists():
        raise FileFormatError(f"File not found: {path}")
    fmt = detect_format(path)
    if fmt is FileFormat.OPENSHEET:
        return read_workbook(path)
    if fmt is FileFormat.XLSX:
        return read_xlsx(path)
    if fmt is FileFormat.CSV:
        return CsvReader().read(path)
    raise FileFormatError(f"Unsupported format: {_suffix(path)}")


def save_workbook(workbook: Workbook, path) -> Path:
    """Save ``workbook`` in the format its extension calls for; return the path written.

    Delimited text holds only the active sheet. An unknown extension is saved in
    the native format with ``.opensheet`` appended to the name.
    """
    if workbook is None:
        raise FileFormatError("No workbook to save")
    path = Path(path)
    fmt = detect_format(path)
    if fmt is FileFormat.OPENSHEET:
        write_workbook(workbook, path)
    elif fmt is FileFormat.XLSX:
        write_xlsx(workbook, path)
    elif fmt is FileFormat.CSV:
        CsvWriter().write(workbook, path, workbook.active_sheet_index)
    else:
        path = path.with_name(path.name + ".opensheet")
        write_workbook(workbook, path)
    return path