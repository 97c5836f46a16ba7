# opensheet

A spreadsheet workbook model in Python, with readers and writers for CSV,
XLSX and the native `.opensheet` format, chart rendering to images and PNG
files, and a few extra statistical functions.

Rows and columns are numbered from 1, as in a spreadsheet.

## Modules

### `opensheet.model`

- `Workbook` holds an ordered list of sheets (`sheets`, `sheet_count`,
  `active_sheet_index`, `active_sheet`). `add_sheet(name)` appends a sheet and
  renames it (`"Name (2)"`, ...) if the name is taken. `sheet(key)` looks a
  sheet up by index or by name, ignoring case, and returns `None` if there is
  none. `sheet_names()` lists the names.
- `Sheet` has a `name`, `visible`, `freeze_row` and `freeze_col`.
  `set_cell(row, col, raw)` stores raw text (an empty string removes the
  cell), `cell(row, col)` returns the cell (creating an empty one),
  `has_cell`, `clear_cell`, `iter_cells()` yields `(row, col, cell)` in
  row-major order, and `used_range()` gives `(rows, cols)`; `max_row` and
  `max_col` are its parts.
- `Cell` keeps its `raw` text and works out its `type` (`CellType`: empty,
  number, text, boolean, formula, error) and `value`. `set_raw` replaces the
  text, `set_error` turns the cell into an error (`CellError`), and
  `Cell.error_string` gives codes such as `#DIV/0!` or `#CIRC!`. A cell also
  has `format` (`CellFormat`), `comment`, `hyperlink`, `display_text`,
  `is_empty` and `has_formula`.
- `FileFormatError` is raised by every reader and writer when a file cannot
  be read or written; its message says why.

### `opensheet.csv_io`

`CsvReader(delimiter=",", quote_char='"')` reads a file into a one-sheet
workbook named after the file. With the default comma it picks the delimiter
from the first line (`CsvReader.detect_delimiter`: comma, semicolon, tab or
pipe). `parse` and `parse_line` split text, honouring quotes and doubled
quotes. An empty file raises `FileFormatError("Empty file")`.

`CsvWriter(delimiter=",", quote_char='"').write(workbook, path, sheet_index=0)`
writes one sheet's display text, quoting fields through `escape_field` when
they hold the delimiter, the quote or a line break.

### `opensheet.opensheet_format`

`write_workbook(workbook, path)` saves a zip archive of JSON documents;
`read_workbook(path)` loads it. Sheet names, visibility, frozen panes, raw
cell text, cell formats, comments, hyperlinks and merge spans are kept.
`cell_format_to_json` and `json_to_cell_format` convert a `CellFormat`.

### `opensheet.xlsx`

`write_xlsx(workbook, path)` and `read_xlsx(path)` handle sheet names, text
(through shared strings), numbers, booleans and formulas. Helpers:
`decode_address("B3")` gives `(3, 2)`, `column_letters(27)` gives `"AA"`, and
`excel_serial_to_date(serial)` formats a date serial as `dd/mm/yyyy`.

### `opensheet.file_manager`

`detect_format(path)` returns a `FileFormat` from the extension
(`opensheet`; `xlsx`/`xls`; `csv`/`tsv`/`txt`). `open_workbook(path)` and
`save_workbook(workbook, path)` route to the matching reader or writer.
Delimited text holds only the active sheet; an unknown extension is saved in
the native format with `.opensheet` appended, and `save_workbook` returns the
path it wrote.

### `opensheet.charts`

`ChartConfig` holds a title, a `LegendPos`, flags and a list of
`ChartSeries` (name, colour, x values, y values, labels). `BarChart`,
`LineChart`, `PieChart`, `ScatterChart` and `AreaChart` draw it;
`create_chart(chart_type, config)` picks the class for a `ChartType` and
falls back to bars. Every chart has `to_image(width=800, height=500)`
returning a Pillow image, `export_png(path, width, height)`, `set_config`,
`on_config_changed(callback)`, and `ChartBase.default_color(index)` from an
eight-colour palette.

### `opensheet.stats`

`geomean`, `harmean`, `skew` and `kurt` take a list of values; entries that
are not numbers are skipped, and too few values give `0.0`. `FORMULAS` maps
the names `GEOMEAN`, `HARMEAN`, `SKEW` and `KURT` to them.

### `opensheet.settings` and `opensheet.crash_recovery`

`SettingsManager(path=None)` keeps preferences in a JSON file: `value`,
`set_value` (which calls every callback given to `on_setting_changed`),
`save`, `load`, typed properties such as `theme` and `autosave_interval_sec`,
and `add_recent_file`, keeping the ten most recent.

`CrashRecovery(recovery_dir=None)` keeps a `session.lock` file.
`check_and_restore(confirm=None)` returns the newest `autosave_*.opensheet`
left after an unclean exit (deleting it if `confirm` declines), `mark_clean`
and `mark_dirty` manage the lock, and `recovery_file_path()` names a new
auto-save.

## Example

```python
from opensheet.model import Workbook
from opensheet.file_manager import open_workbook, save_workbook

book = Workbook()
sheet = book.add_sheet("Prices")
sheet.set_cell(1, 1, "Product")
sheet.set_cell(1, 2, "Price")
sheet.set_cell(2, 1, "Widget")
sheet.set_cell(2, 2, "9.99")

save_workbook(book, "prices.opensheet")
save_workbook(book, "prices.csv")

loaded = open_workbook("prices.opensheet")
print(loaded.sheet_names())            # ['Prices']
print(loaded.sheet(0).cell(2, 1).raw)  # Widget
```

```python
from opensheet.stats import geomean, harmean

geomean([1, 2, 4])   # about 2.0
harmean([1, 2, 4])   # 1.714...
```

## What it does not do

- Formulas are stored as text; nothing evaluates them, so a formula cell has
  no computed value.
- There is no window, grid editor or command-line program; the package is a
  library.
- XLSX files keep only cell contents and sheet names, not styles.

## Requirements

Python 3.10 or later. Chart rendering uses Pillow. Tests run with pytest
(`pip install .[test]`).