"""Workbook, sheet and cell model shared by the file formats."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class FileFormatError(Exception):
    """Raised when a workbook cannot be read or written."""


class CellType(Enum):
    EMPTY = "empty"
    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"
    FORMULA = "formula"
    ERROR = "error"


class CellError(Enum):
    DIV_ZERO = "#DIV/0!"
    NAME = "#NAME?"
    VALUE = "#VALUE!"
    REF = "#REF!"
    CIRCULAR = "#CIRC!"


@dataclass
class CellFormat:
    """Visual formatting of a cell; colours are ``#rrggbb`` strings."""

    bold: bool = False
    italic: bool = False
    underline: bool = False
    wrap_text: bool = False
    foreground: str = "#000000"
    background: Optional[str] = None
    number_format: str = "General"
    alignment: int = 0


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Cell:
    """A single cell: raw input, inferred type, value and decorations."""

    def __init__(self, raw: str = "") -> None:
        self.format = CellFormat()
        self.comment = ""
        self.hyperlink = ""
        self.merged = False
        self.merge_rows = 1
        self.merge_cols = 1
        self.set_raw(raw)

    @property
    def raw(self) -> str:
        return self._raw

    def set_raw(self, raw: str) -> None:
        """Replace the raw input and infer the type and value from it."""
        self._raw = raw
        self.error: Optional[CellError] = None
        text = raw.strip()
        if raw == "":
            self.type, self.value = CellType.EMPTY, None
        elif raw.startswith("="):
            self.type, self.value = CellType.FORMULA, None
        elif text.upper() in ("TRUE", "FALSE"):
            self.type, self.value = CellType.BOOLEAN, text.upper() == "TRUE"
        elif _NUMBER_RE.fullmatch(text):
            self.type, self.value = CellType.NUMBER, float(text)
        else:
            self.type, self.value = CellType.TEXT, raw

    def set_error(self, error: CellError) -> None:
        self.type = CellType.ERROR
        self.error = error
        self.value = error.value

    @staticmethod
    def error_string(error: CellError) -> str:
        return error.value

    @property
    def is_empty(self) -> bool:
        return self.type is CellType.EMPTY

    @property
    def has_formula(self) -> bool:
        return self.type is CellType.FORMULA

    @property
    def display_text(self) -> str:
        if self.type is CellType.EMPTY:
            return ""
        if self.type is CellType.ERROR and self.error is not None:
            return self.error.value
        if self.type is CellType.FORMULA:
            return self._raw if self.value is None else _format_value(self.value)
        return self._raw

    def __repr__(self) -> str:
        return f"Cell({self._raw!r})"


class Sheet:
    """A named grid of cells addressed by 1-based (row, column)."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.visible = True
        self.freeze_row = 0
        self.freeze_col = 0
        self._cells: dict[tuple[int, int], Cell] = {}

    def set_cell(self, row: int, col: int, raw: str) -> None:
        """Set a cell's raw input; an empty string removes the cell."""
        if raw == "":
            self._cells.pop((row, col), None)
            return
        existing = self._cells.get((row, col))
        if existing is None:
            self._cells[(row, col)] = Cell(raw)
        else:
            existing.set_raw(raw)

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at (row, col), creating an empty one if needed."""
        return self._cells.setdefault((row, col), Cell())

    def has_cell(self, row: int, col: int) -> bool:
        found = self._cells.get((row, col))
        return found is not None and not found.is_empty

    def clear_cell(self, row: int, col: int) -> None:
        self._cells.pop((row, col), None)

    def iter_cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Yield (row, col, cell) for every non-empty cell in row-major order."""
        for (row, col), cell in sorted(self._cells.items()):
            if not cell.is_empty:
                yield row, col, cell

    def used_range(self) -> tuple[int, int]:
        """Return (rows, cols) covering every non-empty cell."""
        rows = cols = 0
        for row, col, _ in self.iter_cells():
            rows, cols = max(rows, row), max(cols, col)
        return rows, cols

    @property
    def max_row(self) -> int:
        return self.used_range()[0]

    @property
    def max_col(self) -> int:
        return self.used_range()[1]

    def __repr__(self) -> str:
        return f"Sheet({self.name!r})"


class Workbook:
    """An ordered collection of sheets."""

    def __init__(self) -> None:
        self.sheets: list[Sheet] = []
        self.active_sheet_index = 0

    def _unique_name(self, name: str) -> str:
        base = name or f"Sheet{len(self.sheets) + 1}"
        candidate, suffix = base, 2
        while self.sheet(candidate) is not None:
            candidate = f"{base} ({suffix})"
            suffix += 1
        return candidate

    def add_sheet(self, name: str) -> Sheet:
        """Append a sheet, renaming it if the name is already taken."""
        sheet = Sheet(self._unique_name(name))
        self.sheets.append(sheet)
        return sheet

    def sheet(self, key: Union[int, str]) -> Optional[Sheet]:
        """Look a sheet up by index or by case-insensitive name."""
        if isinstance(key, int):
            return self.sheets[key] if 0 <= key < len(self.sheets) else None
        wanted = key.casefold()
        return next((s for s in self.sheets if s.name.casefold() == wanted), None)

    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]

    @property
    def sheet_count(self) -> int:
        return len(self.sheets)

    @property
    def active_sheet(self) -> Optional[Sheet]:
        return self.sheet(self.active_sheet_index)