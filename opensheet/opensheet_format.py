"""Native ``.opensheet`` workbook format: a zip archive of JSON documents."""

from __future__ import annotations

import json
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .model import Cell, CellFormat, FileFormatError, Sheet, Workbook

FORMAT_VERSION = 1
APPLICATION = "OpenSheet"
APP_VERSION = "1.0.0"

_DEFAULT_FORMAT = CellFormat()


def _sheet_entry(index: int) -> str:
    return f"sheets/{index}.json"


def _serialize_manifest(workbook: Workbook) -> bytes:
    manifest = {
        "version": FORMAT_VERSION,
        "application": APPLICATION,
        "appVersion": APP_VERSION,
        "created": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "sheetCount": workbook.sheet_count,
        "activeSheet": workbook.active_sheet_index,
        "sheetNames": workbook.sheet_names(),
    }
    return json.dumps(manifest, indent=4).encode("utf-8")


def _serialize_cell(row: int, col: int, cell: Cell) -> dict[str, Any]:
    obj: dict[str, Any] = {"r": row, "c": col, "raw": cell.raw}
    if cell.format != _DEFAULT_FORMAT:
        obj["fmt"] = cell_format_to_json(cell.format)
    if cell.comment:
        obj["comment"] = cell.comment
    if cell.hyperlink:
        obj["link"] = cell.hyperlink
    if cell.merged:
        obj["mergeRows"] = cell.merge_rows
        obj["mergeCols"] = cell.merge_cols
    return obj


def _serialize_sheet(sheet: Sheet) -> bytes:
    root = {
        "name": sheet.name,
        "visible": sheet.visible,
        "freezeRow": sheet.freeze_row,
        "freezeCol": sheet.freeze_col,
        "cells": [_serialize_cell(r, c, cell) for r, c, cell in sheet.iter_cells()],
    }
    return json.dumps(root, separators=(",", ":")).encode("utf-8")


def _serialize_styles() -> bytes:
    return json.dumps({"version": 1}, indent=4).encode("utf-8")


def _serialize_named_ranges() -> bytes:
    return json.dumps([]).encode("utf-8")


def _manifest_is_valid(data: bytes) -> bool:
    try:
        manifest = json.loads(data)
    except ValueError:
        return False
    if not isinstance(manifest, dict):
        return False
    version = manifest.get("version", 0)
    return not (isinstance(version, int) and version > FORMAT_VERSION)


def _deserialize_sheet(data: bytes, workbook: Workbook) -> None:
    root = json.loads(data)
    if not isinstance(root, dict):
        raise ValueError("sheet document is not an object")
    sheet = workbook.add_sheet(str(root.get("name", "")))
    sheet.visible = bool(root.get("visible", True))
    sheet.freeze_row = int(root.get("freezeRow", 0))
    sheet.freeze_col = int(root.get("freezeCol", 0))
    for entry in root.get("cells", []):
        row, col = int(entry.get("r", 0)), int(entry.get("c", 0))
        sheet.set_cell(row, col, str(entry.get("raw", "")))
        cell = sheet.cell(row, col)
        if "fmt" in entry:
            cell.format = json_to_cell_format(entry["fmt"])
        if "comment" in entry:
            cell.comment = str(entry["comment"])
        if "link" in entry:
            cell.hyperlink = str(entry["link"])
        if "mergeRows" in entry:
            cell.merged = True
            cell.merge_rows = int(entry.get("mergeRows", 1))
            cell.merge_cols = int(entry.get("mergeCols", 1))


def write_workbook(workbook: Workbook, path) -> None:
    """Write ``workbook`` to ``path`` as an ``.opensheet`` archive."""
    path = Path(path)
    try:
        handle = open(path, "wb")
    except OSError as exc:
        raise FileFormatError(f"Cannot create file: {path}") from exc
    try:
        with handle, zipfile.ZipFile(handle, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("manifest.json", _serialize_manifest(workbook))
            archive.writestr("styles.json", _serialize_styles())
            archive.writestr("namedRanges.json", _serialize_named_ranges())
            for index, sheet in enumerate(workbook.sheets):
                archive.writestr(_sheet_entry(index), _serialize_sheet(sheet))
    except OSError as exc:
        raise FileFormatError(f"Cannot write file: {path}") from exc


def _entry(archive: zipfile.ZipFile, name: str) -> bytes:
    try:
        return archive.read(name)
    except KeyError:
        return b""


def read_workbook(path) -> Workbook:
    """Read an ``.opensheet`` archive into a new workbook."""
    path = Path(path)
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise FileFormatError(f"Cannot open file: {path}") from exc
    with handle:
        try:
            archive = zipfile.ZipFile(handle)
        except zipfile.BadZipFile as exc:
            raise FileFormatError("Not a valid .opensheet file") from exc
        with archive:
            manifest = _entry(archive, "manifest.json")
            if not manifest:
                raise FileFormatError("Missing manifest")
            if not _manifest_is_valid(manifest):
                raise FileFormatError("Bad manifest")
            workbook = Workbook()
            index = 0
            while data := _entry(archive, _sheet_entry(index)):
                try:
                    _deserialize_sheet(data, workbook)
                except (ValueError, TypeError, AttributeError) as exc:
                    raise FileFormatError(f"Failed reading sheet {index}") from exc
                index += 1
    return workbook


def cell_format_to_json(fmt: CellFormat) -> dict[str, Any]:
    """Encode a cell format, leaving out attributes at their defaults."""
    obj: dict[str, Any] = {}
    if fmt.bold:
        obj["bold"] = True
    if fmt.italic:
        obj["italic"] = True
    if fmt.underline:
        obj["underline"] = True
    if fmt.wrap_text:
        obj["wrap"] = True
    if fmt.foreground.lower() != _DEFAULT_FORMAT.foreground:
        obj["fg"] = fmt.foreground.lower()
    if fmt.background is not None:
        obj["bg"] = fmt.background.lower()
    if fmt.number_format and fmt.number_format != "General":
        obj["numFmt"] = fmt.number_format
    obj["align"] = int(fmt.alignment)
    return obj


def json_to_cell_format(obj: dict[str, Any]) -> CellFormat:
    """Decode a cell format written by :func:`cell_format_to_json`."""
    fmt = CellFormat(
        bold=bool(obj.get("bold", False)),
        italic=bool(obj.get("italic", False)),
        underline=bool(obj.get("underline", False)),
        wrap_text=bool(obj.get("wrap", False)),
    )
    if "fg" in obj:
        fmt.foreground = str(obj["fg"])
    if "bg" in obj:
        fmt.background = str(obj["bg"])
    if "numFmt" in obj:
        fmt.number_format = str(obj["numFmt"])
    if "align" in obj:
        fmt.alignment = int(obj["align"])
    return fmt