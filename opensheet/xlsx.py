"""Reading and writing Office Open XML spreadsheet (``.xlsx``) files."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
import zipfile
from datetime import date, timedelta
from itertools import groupby
from pathlib import Path

from .model import CellType, FileFormatError, Sheet, Workbook

MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
CONTENT_TYPES_NS = "http://schemas.openxmlformats.org/package/2006/content-types"

_CT_PREFIX = "application/vnd.openxmlformats-officedocument.spreadsheetml"

_STYLES_XML = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<styleSheet xmlns="' + MAIN_NS.encode() + b'">'
    b'<fonts count="1"><font><sz val="11"/><name val="Calibri"/></font></fonts>'
    b'<fills count="2"><fill><patternFill patternType="none"/></fill>'
    b'<fill><patternFill patternType="gray125"/></fill></fills>'
    b'<borders count="1"><border><left/><right/><top/><bottom/><diagonal/></border></borders>'
    b'<cellStyleXfs count="1"><xf numFmtId="0" fontId="0" fillId="0" borderId="0"/></cellStyleXfs>'
    b'<cellXfs count="1"><xf numFmtId="0" fontId="0" fillId="0" borderId="0" xfId="0"/></cellXfs>'
    b"</styleSheet>"
)

_RELS_XML = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<Relationships xmlns="' + PACKAGE_REL_NS.encode() + b'">'
    b'<Relationship Id="rId1" Type="' + REL_NS.encode() + b'/officeDocument" '
    b'Target="xl/workbook.xml"/>'
    b"</Relationships>"
)

_ADDRESS_RE = re.compile(r"([A-Za-z]*)(.*)", re.DOTALL)


# ---------- addresses and dates ----------

def decode_address(address: str) -> tuple[int, int]:
    """Turn an ``A1``-style address into 1-based ``(row, col)``."""
    letters, rest = _ADDRESS_RE.fullmatch(address).groups()
    col = 0
    for ch in letters.upper():
        col = col * 26 + (ord(ch) - ord("A") + 1)
    row = _to_int(rest)
    if row <= 0 or col <= 0:
        raise ValueError(f"Invalid cell address: {address!r}")
    return row, col


def column_letters(index: int) -> str:
    """Turn a 1-based column index into its letters (1 -> ``A``, 27 -> ``AA``)."""
    if index < 1:
        raise ValueError(f"Column index must be positive, got {index}")
    letters = ""
    while index > 0:
        index -= 1
        letters = chr(ord("A") + index % 26) + letters
        index //= 26
    return letters


def excel_serial_to_date(serial: float) -> str:
    """Format a spreadsheet date serial as ``dd/mm/yyyy``, skipping the 1900 leap bug."""
    days = int(serial)
    if days > 59:
        days -= 1
    return (date(1899, 12, 31) + timedelta(days=days)).strftime("%d/%m/%Y")


def _to_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return 0


# ---------- reading ----------

def _local(tag: object) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _parse_xml(data: bytes, part: str) -> ET.Element:
    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise FileFormatError(f"Malformed XML in {part}") from exc


def _entry(archive: zipfile.ZipFile, name: str) -> bytes:
    try:
        return archive.read(name)
    except KeyError:
        return b""


def _parse_shared_strings(data: bytes) -> list[str]:
    root = _parse_xml(data, "xl/sharedStrings.xml")
    return [
        "".join(t.text or "" for t in si.iter() if _local(t.tag) == "t")
        for si in root.iter()
        if _local(si.tag) == "si"
    ]


def _parse_workbook(data: bytes) -> tuple[Workbook, list[str]]:
    root = _parse_xml(data, "xl/workbook.xml")
    workbook = Workbook()
    sheet_files: list[str] = []
    for element in root.iter():
        if _local(element.tag) != "sheet":
            continue
        name = element.get("name") or f"Sheet{workbook.sheet_count + 1}"
        workbook.add_sheet(name)
        sheet_files.append(f"sheet{len(sheet_files) + 1}.xml")
    if workbook.sheet_count == 0:
        workbook.add_sheet("Sheet1")
    return workbook, sheet_files


def _cell_value(element: ET.Element, shared: list[str]) -> str:
    text = ""
    formula = None
    for child in element.iter():
        name = _local(child.tag)
        if name in ("v", "t"):
            text = child.text or ""
        elif name == "f":
            formula = child.text or ""
    kind = element.get("t", "")
    if formula:
        return "=" + formula
    if kind == "s":
        index = _to_int(text)
        return shared[index] if 0 <= index < len(shared) else text
    if kind == "b":
        return "TRUE" if text == "1" else "FALSE"
    return text


def _parse_sheet(data: bytes, sheet: Sheet, shared: list[str], part: str) -> None:
    root = _parse_xml(data, part)
    for element in root.iter():
        if _local(element.tag) != "c":
            continue
        address = element.get("r", "")
        if not address:
            continue
        try:
            row, col = decode_address(address)
        except ValueError:
            continue
        value = _cell_value(element, shared)
        if value:
            sheet.set_cell(row, col, value)


def read_xlsx(path) -> Workbook:
    """Read an ``.xlsx`` file into a new workbook."""
    path = Path(path)
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise FileFormatError(f"Cannot open: {path}") from exc
    with handle:
        try:
            archive = zipfile.ZipFile(handle)
        except zipfile.BadZipFile as exc:
            raise FileFormatError("Not a valid ZIP/xlsx file") from exc
        with archive:
            shared_data = _entry(archive, "xl/sharedStrings.xml")
            shared = _parse_shared_strings(shared_data) if shared_data else []
            workbook_data = _entry(archive, "xl/workbook.xml")
            if not workbook_data:
                raise FileFormatError("Missing xl/workbook.xml")
            workbook, sheet_files = _parse_workbook(workbook_data)
            for sheet, file_name in zip(workbook.sheets, sheet_files):
                part = "xl/worksheets/" + file_name
                data = _entry(archive, part)
                if data:
                    _parse_sheet(data, sheet, shared, part)
    return workbook


# ---------- writing ----------

def _to_bytes(root: ET.Element) -> bytes:
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def _content_types_xml(workbook: Workbook) -> bytes:
    root = ET.Element("Types", {"xmlns": CONTENT_TYPES_NS})
    ET.SubElement(root, "Default", {
        "Extension": "rels",
        "ContentType": "application/vnd.openxmlformats-package.relationships+xml",
    })
    ET.SubElement(root, "Default", {"Extension": "xml", "ContentType": "application/xml"})
    ET.SubElement(root, "Override", {
        "PartName": "/xl/workbook.xml",
        "ContentType": f"{_CT_PREFIX}.sheet.main+xml",
    })
    for index in range(1, workbook.sheet_count + 1):
        ET.SubElement(root, "Override", {
            "PartName": f"/xl/worksheets/sheet{index}.xml",
            "ContentType": f"{_CT_PREFIX}.worksheet+xml",
        })
    ET.SubElement(root, "Override", {
        "PartName": "/xl/sharedStrings.xml",
        "ContentType": f"{_CT_PREFIX}.sharedStrings+xml",
    })
    ET.SubElement(root, "Override", {
        "PartName": "/xl/styles.xml",
        "ContentType": f"{_CT_PREFIX}.styles+xml",
    })
    return _to_bytes(root)


def _workbook_xml(workbook: Workbook) -> bytes:
    root = ET.Element("workbook", {"xmlns": MAIN_NS, "xmlns:r": REL_NS})
    sheets = ET.SubElement(root, "sheets")
    for index, sheet in enumerate(workbook.sheets, start=1):
        ET.SubElement(sheets, "sheet", {
            "name": sheet.name,
            "sheetId": str(index),
            "r:id": f"rId{index}",
        })
    return _to_bytes(root)


def _sheet_xml(sheet: Sheet, shared: dict[str, int]) -> bytes:
    root = ET.Element("worksheet", {"xmlns": MAIN_NS})
    sheet_data = ET.SubElement(root, "sheetData")
    for row, cells in groupby(sheet.iter_cells(), key=lambda item: item[0]):
        row_element = ET.SubElement(sheet_data, "row", {"r": str(row)})
        for _, col, cell in cells:
            element = ET.SubElement(row_element, "c", {"r": f"{column_letters(col)}{row}"})
            if cell.has_formula:
                ET.SubElement(element, "f").text = cell.raw[1:]
                ET.SubElement(element, "v").text = "" if cell.value is None else str(cell.value)
            elif cell.type is CellType.TEXT:
                index = shared.setdefault(cell.raw, len(shared))
                element.set("t", "s")
                ET.SubElement(element, "v").text = str(index)
            else:
                ET.SubElement(element, "v").text = cell.raw
    return _to_bytes(root)


def _shared_strings_xml(strings: list[str]) -> bytes:
    count = str(len(strings))
    root = ET.Element("sst", {"xmlns": MAIN_NS, "count": count, "uniqueCount": count})
    for text in strings:
        ET.SubElement(ET.SubElement(root, "si"), "t").text = text
    return _to_bytes(root)


def write_xlsx(workbook: Workbook, path) -> None:
    """Write ``workbook`` to ``path`` as an ``.xlsx`` file."""
    path = Path(path)
    try:
        handle = open(path, "wb")
    except OSError as exc:
        raise FileFormatError(f"Cannot create: {path}") from exc
    shared: dict[str, int] = {}
    try:
        with handle, zipfile.ZipFile(handle, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("[Content_Types].xml", _content_types_xml(workbook))
            archive.writestr("_rels/.rels", _RELS_XML)
            archive.writestr("xl/workbook.xml", _workbook_xml(workbook))
            for index, sheet in enumerate(workbook.sheets, start=1):
                archive.writestr(f"xl/worksheets/sheet{index}.xml", _sheet_xml(sheet, shared))
            if shared:
                archive.writestr("xl/sharedStrings.xml", _shared_strings_xml(list(shared)))
            archive.writestr("xl/styles.xml", _STYLES_XML)
    except OSError as exc:
        raise FileFormatError(f"Cannot write: {path}") from exc