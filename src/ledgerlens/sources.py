"""Row sources: turn a statement file into raw text rows for the matcher."""
import csv
import io
import re
import zipfile
from datetime import date, datetime
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.styles import is_date_format
from openpyxl.utils.exceptions import InvalidFileException

from ledgerlens.errors import FormatError

SUPPORTED_EXTENSIONS = (".csv", ".xlsx")


def _read_csv(f) -> list[list[str]]:
    # strict mode turns bad quoting into csv.Error instead of guessing
    reader = csv.reader(f, strict=True)
    try:
        return [line for line in reader if line]
    except csv.Error as exc:
        raise FormatError(f"Malformed CSV at line {reader.line_num}: {exc}") from exc


def rows_from_text(text: str) -> list[list[str]]:
    """Read CSV rows from an in-memory string."""
    with io.StringIO(text, newline="") as f:
        return _read_csv(f)


_EXCEL_DATE_TOKEN = re.compile(r"y+|m+|d+")


def _strftime_token(match: re.Match) -> str:
    token = match.group(0)
    if token[0] == "y":
        return "%Y" if len(token) > 2 else "%y"
    if token[0] == "m":
        return {3: "%b", 4: "%B"}.get(len(token), "%m")
    return {3: "%a", 4: "%A"}.get(len(token), "%d")


def excel_date_format(number_format: str | None, default: str = "%Y-%m-%d") -> str:
    """Translate the date part of an Excel number format into a strftime pattern."""
    if not number_format or not is_date_format(number_format):
        return default
    fmt = number_format.split(";")[0].lower()
    # quoted literals, [locale] and [color] tags, escape backslashes
    fmt = re.sub(r'"[^"]*"|\[[^\]]*\]|\\', "", fmt)
    if fmt == "mm-dd-yy":
        # built-in format 14 is shown as the locale's short date
        return "%m/%d/%Y"
    date_part = re.split(r"[\sh]", fmt, maxsplit=1)[0]
    if not _EXCEL_DATE_TOKEN.search(date_part):
        return default
    return _EXCEL_DATE_TOKEN.sub(_strftime_token, date_part)


def _cell_to_text(cell, date_format: str) -> str:
    value = cell.value
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime(excel_date_format(cell.number_format, date_format))
    return str(value)


def read_xlsx_rows(file_path: Path, date_format: str = "%Y-%m-%d") -> list[list[str]]:
    """Read the first sheet of a workbook, rendering every cell as text.

    Date cells are written the way the workbook displays them, falling back to
    ``date_format`` when their number format carries no date pattern.
    """
    try:
        wb = load_workbook(file_path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as exc:
        raise FormatError(f"Not a readable workbook: {file_path.name}") from exc
    try:
        ws = wb.worksheets[0]
        rows = []
        for cells in ws.iter_rows():
            if all(cell.value is None for cell in cells):
                continue
            rows.append([_cell_to_text(cell, date_format) for cell in cells])
    finally:
        wb.close()
    return rows


def read_rows(file_path: Path) -> list[list[str]]:
    """Read a .csv or .xlsx statement into memory as rows of text cells."""
    file_path = Path(file_path)
    suffix = file_path.suffix.lower()
    if suffix == ".csv":
        try:
            with open(file_path, newline="", encoding="utf-8-sig") as f:
                return _read_csv(f)
        except UnicodeDecodeError as exc:
            raise FormatError(f"{file_path.name} is not UTF-8 text") from exc
    if suffix == ".xlsx":
        return read_xlsx_rows(file_path)
    raise ValueError(f"Unsupported file type {suffix!r}; expected one of {', '.join(SUPPORTED_EXTENSIONS)}")
