"""
Comparison report output.

Writes a ComparisonReport as the JSON document downstream dashboards read
and as an Excel workbook for people working the lead list by hand.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from taxrollwatch.domain.report import ComparisonReport

logger = logging.getLogger(__name__)

# Styling constants
HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 50

# JSON list key -> sheet title
LIST_SHEETS = (
    ("statusChanges", "Status Changes"),
    ("newProperties", "New Properties"),
    ("removedProperties", "Removed"),
    ("foreclosedProperties", "Foreclosed"),
)


def write_report_json(report: ComparisonReport, path: Path | str) -> Path:
    """
    Write the report as comparison-report JSON.

    Args:
        report: Report to write
        path: Output file (parent directories are created)

    Returns:
        Path to the written file
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info("Comparison report JSON saved: %s", output_path)
    return output_path


def write_report_workbook(report: ComparisonReport, path: Path | str) -> Path:
    """
    Write the report as an Excel workbook.

    One Summary sheet followed by one sheet per property list. Each list
    sheet starts with the report columns (identifier, statuses) followed by
    every record field seen in that list.

    Args:
        report: Report to write
        path: Output .xlsx file (parent directories are created)

    Returns:
        Path to the written file
    """
    output_path = Path(path)
    logger.info("Generating comparison workbook: %s", output_path)

    data = report.to_dict()
    wb = Workbook()
    if "Sheet" in wb.sheetnames:
        del wb["Sheet"]

    _add_summary_sheet(wb, data)
    for key, title in LIST_SHEETS:
        _add_list_sheet(wb, title, data[key])

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)
    logger.info(
        "Comparison workbook saved: %s (%d status changes)",
        output_path,
        len(data["statusChanges"]),
    )
    return output_path


def _add_summary_sheet(wb: Workbook, data: dict[str, Any]) -> None:
    ws = wb.create_sheet("Summary")
    summary = data["summary"]

    rows: list[tuple[str, Any]] = [
        ("Report Generated", data["uploadDate"]),
        ("Previous Upload", data["previousUploadDate"] or "(none)"),
        ("Current Upload", data["currentUploadDate"] or ""),
        ("Comparisons Performed", summary["comparisonsPerformed"]),
        ("Previous Records", summary["previousRecordCount"]),
        ("Current Records", summary["currentRecordCount"]),
        ("New Status", summary["newStatusCount"]),
        ("New Properties", summary["newCount"]),
        ("Removed", summary["removedCount"]),
        ("Foreclosed", summary["foreclosedCount"]),
        ("Duplicate Identifiers", summary["duplicateIdentifierCount"]),
        ("Empty Identifiers", summary["emptyIdentifierCount"]),
    ]
    for transition, count in sorted(summary["transitionBreakdown"].items()):
        rows.append((f"Transition {transition}", count))

    for row_idx, (label, value) in enumerate(rows, start=1):
        ws.cell(row=row_idx, column=1, value=label).font = Font(bold=True)
        ws.cell(row=row_idx, column=2, value=value)

    ws.column_dimensions["A"].width = 28
    ws.column_dimensions["B"].width = 36


def _add_list_sheet(wb: Workbook, title: str, items: list[dict[str, Any]]) -> None:
    ws = wb.create_sheet(title)
    columns = _collect_columns(items)

    _write_header(ws, columns)

    for row_idx, item in enumerate(items, start=2):
        for col_idx, column in enumerate(columns, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=item.get(column))
            cell.border = THIN_BORDER
            cell.alignment = Alignment(vertical="center")

    _fit_columns(ws, columns, items)


def _collect_columns(items: Iterable[dict[str, Any]]) -> list[str]:
    """Union of keys in first-seen order."""
    columns: dict[str, None] = {}
    for item in items:
        for key in item:
            columns.setdefault(key, None)
    return list(columns) or ["identifier"]


def _write_header(ws: Worksheet, columns: list[str]) -> None:
    for col_idx, name in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=col_idx, value=name)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = THIN_BORDER

    # Freeze top row
    ws.freeze_panes = "A2"


def _fit_columns(ws: Worksheet, columns: list[str], items: list[dict[str, Any]]) -> None:
    for col_idx, column in enumerate(columns, start=1):
        longest = max(
            [len(column)] + [len(str(item.get(column) or "")) for item in items]
        )
        width = min(max(longest + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)
        ws.column_dimensions[get_column_letter(col_idx)].width = width
