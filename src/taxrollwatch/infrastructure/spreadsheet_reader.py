"""
Spreadsheet reader for roll exports.

Turns an xlsx or csv export into an ordered list of flat records
(column name -> scalar). Uses the header row to name columns; the
comparison engine never sees the file format.
"""

from __future__ import annotations

import csv
import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Iterable

from openpyxl import load_workbook

from taxrollwatch.domain.errors import SpreadsheetDecodeError
from taxrollwatch.domain.records import ScalarValue

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
CSV_SUFFIXES = {".csv"}


def read_records(
    path: Path | str,
    sheet_name: str | None = None,
) -> list[dict[str, ScalarValue]]:
    """
    Read all data rows of an export.

    Args:
        path: Path to an .xlsx/.xlsm or .csv file
        sheet_name: Worksheet to read (first sheet when None; ignored for csv)

    Returns:
        List of records in file order

    Raises:
        SpreadsheetDecodeError: If the file is missing, unsupported or unreadable
    """
    path = Path(path)
    if not path.exists():
        raise SpreadsheetDecodeError(f"Export file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        records = _read_workbook(path, sheet_name)
    elif suffix in CSV_SUFFIXES:
        records = _read_csv(path)
    else:
        raise SpreadsheetDecodeError(
            f"Unsupported export format '{path.suffix}' (expected .xlsx, .xlsm or .csv)"
        )

    logger.info("Read %d records from %s", len(records), path.name)
    return records


def _read_workbook(path: Path, sheet_name: str | None) -> list[dict[str, ScalarValue]]:
    """Read records from the first (or named) worksheet."""
    try:
        wb = load_workbook(path, read_only=True, data_only=True)
    except Exception as e:
        raise SpreadsheetDecodeError(f"Failed to open workbook {path}: {e}") from e

    try:
        if sheet_name is None:
            ws = wb.worksheets[0]
        elif sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
        else:
            raise SpreadsheetDecodeError(
                f"Sheet '{sheet_name}' not found in {path.name} (have: {', '.join(wb.sheetnames)})"
            )
        rows = ws.iter_rows(values_only=True)
        return rows_to_records(rows, source=f"{path.name}[{ws.title}]")
    finally:
        wb.close()


def _read_csv(path: Path) -> list[dict[str, ScalarValue]]:
    """Read records from a csv export (utf-8, BOM tolerated)."""
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            return rows_to_records(csv.reader(f), source=path.name)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise SpreadsheetDecodeError(f"Failed to read csv {path}: {e}") from e


def rows_to_records(
    rows: Iterable[Iterable[Any]],
    source: str = "",
) -> list[dict[str, ScalarValue]]:
    """
    Convert raw rows (header first) into records.

    Blank headers become "Column N", repeated headers get a " (2)" style
    suffix, fully empty rows are skipped and date/time cells become ISO text.

    Raises:
        SpreadsheetDecodeError: If there is no header row
    """
    iterator = iter(rows)
    try:
        header_row = list(next(iterator))
    except StopIteration:
        raise SpreadsheetDecodeError(f"No header row in {source or 'export'}") from None

    headers = build_headers(header_row)
    if not any(cell not in (None, "") for cell in header_row):
        raise SpreadsheetDecodeError(f"Header row is empty in {source or 'export'}")

    records: list[dict[str, ScalarValue]] = []
    for row in iterator:
        values = [to_scalar(cell) for cell in row]
        if all(v is None or v == "" for v in values):
            continue
        if len(values) > len(headers):
            extra = [f"Column {i + 1}" for i in range(len(headers), len(values))]
            headers.extend(extra)
            logger.debug("%s: row wider than header, added %s", source, extra)
        values.extend([None] * (len(headers) - len(values)))
        records.append(dict(zip(headers, values)))
    return records


def build_headers(header_row: list[Any]) -> list[str]:
    """Trimmed, unique column names in sheet order."""
    headers: list[str] = []
    counts: dict[str, int] = {}
    for idx, cell in enumerate(header_row):
        name = str(cell).strip() if cell is not None else ""
        if not name:
            name = f"Column {idx + 1}"
        counts[name] = counts.get(name, 0) + 1
        if counts[name] > 1:
            name = f"{name} ({counts[name]})"
        headers.append(name)
    return headers


def to_scalar(cell: Any) -> ScalarValue:
    """Coerce a cell value to a record scalar."""
    if cell is None or isinstance(cell, (str, int, float, bool)):
        return cell
    if isinstance(cell, (datetime, date, time)):
        return cell.isoformat()
    return str(cell)
