"""Excel workbook export module."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo
from openpyxl.worksheet.worksheet import Worksheet

from ..analysis import AuditReport, ReportTable
from ..logs import with_suffix
from .base import OutputModule, register_output

LOGGER = logging.getLogger(__name__)

SITES_LABEL = "AD Sites and subnets"
USERS_LABEL = "AD Users"
PRINTERS_LABEL = "Printers installed"

MAX_COLUMN_WIDTH = 80


def workbook_path(prefix: Path, label: str) -> Path:
    return with_suffix(prefix, f" {label}.xlsx")


def write_if_non_empty(
    table: ReportTable, path: Path, table_name: str, sheet_name: str
) -> Path | None:
    """Write ``table`` as a sheet of ``path``; nothing happens without rows.

    An existing workbook at ``path`` gets an extra sheet (a sheet with the
    same name is replaced), so related tables share one file.
    """

    if not table.rows:
        return None

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        workbook = load_workbook(path)
        if sheet_name in workbook.sheetnames:
            del workbook[sheet_name]
        sheet = workbook.create_sheet(sheet_name)
    else:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = sheet_name

    _append_text(sheet, table.headers)
    for row in table.rows:
        _append_text(sheet, row)

    ref = f"A1:{get_column_letter(len(table.headers))}{len(table.rows) + 1}"
    excel_table = Table(displayName=_table_id(table_name), ref=ref)
    excel_table.tableStyleInfo = TableStyleInfo(
        name="TableStyleMedium2", showRowStripes=True
    )
    sheet.add_table(excel_table)
    sheet.freeze_panes = "A2"
    _autosize(sheet, table)

    workbook.save(path)
    LOGGER.info(
        "Wrote %d row(s) to sheet '%s' of '%s'",
        len(table.rows),
        sheet_name,
        path,
    )
    return path


def _append_text(sheet: Worksheet, values: list[Any]) -> None:
    sheet.append(values)
    # Directory values such as "=Brussels" stay text, never formulas.
    for cell in sheet[sheet.max_row]:
        if isinstance(cell.value, str) and cell.value.startswith("="):
            cell.data_type = "s"


def _table_id(name: str) -> str:
    # Excel table names allow no spaces and must not start with a digit.
    cleaned = "".join(ch if ch.isalnum() else "_" for ch in name)
    return cleaned if cleaned[:1].isalpha() else f"T_{cleaned}"


def _autosize(sheet: Worksheet, table: ReportTable) -> None:
    for idx, header in enumerate(table.headers, start=1):
        width = max(
            [len(str(header))]
            + [len(_display(row[idx - 1])) for row in table.rows]
        )
        sheet.column_dimensions[get_column_letter(idx)].width = min(
            width + 2, MAX_COLUMN_WIDTH
        )


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


@register_output("xlsx")
class XlsxOutput(OutputModule):
    """One workbook per category, produced only when it has rows."""

    def render(self, report: AuditReport) -> None:
        prefix = self.context.prefix
        sheets = [
            (SITES_LABEL, report.sites, "Sites"),
            (SITES_LABEL, report.subnets, "Subnets"),
            (USERS_LABEL, report.user_summary, "Summary"),
            (USERS_LABEL, report.users, "Users"),
            (PRINTERS_LABEL, report.printer_summary, "Summary"),
            (PRINTERS_LABEL, report.printers, "Printers"),
        ]
        for label, table, sheet_name in sheets:
            produced = write_if_non_empty(
                table, workbook_path(prefix, label), table.name, sheet_name
            )
            if produced is not None:
                self.context.add_attachment(produced)
