"""Reading and writing delimited text files."""

from __future__ import annotations

from pathlib import Path

from .model import FileFormatError, Workbook

_CANDIDATES = (",", ";", "\t", "|")


class CsvReader:
    """Reads a delimited text file into a one-sheet workbook."""

    def __init__(self, delimiter: str = ",", quote_char: str = '"') -> None:
        self.delimiter = delimiter
        self.quote_char = quote_char

    @staticmethod
    def detect_delimiter(first_line: str) -> str:
        """Pick the most frequent of comma, semicolon, tab and pipe."""
        counts = {d: first_line.count(d) for d in _CANDIDATES}
        best = max(counts.values())
        if best == 0:
            return ","
        for candidate in ("\t", ",", ";"):
            if counts[candidate] == best:
                return candidate
        return "|"

    def read(self, path) -> Workbook:
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileFormatError(f"Cannot open file: {path}") from exc

        if self.delimiter == ",":
            self.delimiter = self.detect_delimiter(content.split("\n", 1)[0])

        rows = self.parse(content)
        if not rows:
            raise FileFormatError("Empty file")

        workbook = Workbook()
        sheet = workbook.add_sheet(path.name.split(".", 1)[0])
        for r, row in enumerate(rows, start=1):
            for c, value in enumerate(row, start=1):
                if value:
                    sheet.set_cell(r, c, value)
        return workbook

    def parse(self, content: str) -> list[list[str]]:
        """Split text into rows of fields, dropping leading and trailing blank rows."""
        result: list[list[str]] = []
        for line in content.split("\n"):
            trimmed = line.strip()
            if not trimmed and not result:
                continue
            result.append(self.parse_line(trimmed))
        while result and not "".join(result[-1]).strip():
            result.pop()
        return result

    def parse_line(self, line: str) -> list[str]:
        """Split one line into fields, honouring quotes and doubled quotes."""
        fields: list[str] = []
        current: list[str] = []
        in_quote = False
        chars = iter(enumerate(line))
        for i, ch in chars:
            if ch == self.quote_char:
                if in_quote and line[i + 1:i + 2] == self.quote_char:
                    current.append(ch)
                    next(chars, None)
                else:
                    in_quote = not in_quote
            elif ch == self.delimiter and not in_quote:
                fields.append("".join(current))
                current = []
            else:
                current.append(ch)
        fields.append("".join(current))
        return fields


class CsvWriter:
    """Writes one sheet of a workbook as delimited text."""

    def __init__(self, delimiter: str = ",", quote_char: str = '"') -> None:
        self.delimiter = delimiter
        self.quote_char = quote_char

    def write(self, workbook: Workbook, path, sheet_index: int = 0) -> None:
        sheet = workbook.sheet(sheet_index) if workbook is not None else None
        if sheet is None:
            raise FileFormatError("Invalid workbook or sheet index")
        rows, cols = sheet.used_range()
        try:
            with open(path, "w", encoding="utf-8") as out:
                for r in range(1, rows + 1):
                    fields = (
                        self.escape_field(sheet.cell(r, c).display_text)
                        for c in range(1, cols + 1)
                    )
                    out.write(self.delimiter.join(fields) + "\n")
        except OSError as exc:
            raise FileFormatError(f"Cannot write file: {path}") from exc

    def escape_field(self, field: str) -> str:
        """Quote a field if it holds the delimiter, the quote or a line break."""
        if not any(ch in field for ch in (self.delimiter, self.quote_char, "\n", "\r")):
            return field
        q = self.quote_char
        return q + field.replace(q, q + q) + q