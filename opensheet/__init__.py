"""Spreadsheet workbooks with CSV, XLSX and .opensheet files, charts and statistics."""

__version__ = "1.0.0"