"""Summary and detail tables for the audit report."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..models import Printer, Site, Subnet, User


@dataclass
class SummaryRow:
    group_key: str
    count: int


@dataclass
class ReportTable:
    name: str
    headers: list[str]
    rows: list[list[Any]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class AuditReport:
    organizational_units: list[str]
    country_codes: list[str]
    sites: ReportTable
    subnets: ReportTable
    user_summary: ReportTable
    users: ReportTable
    printer_summary: ReportTable
    printers: ReportTable


SITE_COLUMNS: list[tuple[str, str]] = [
    ("Name", "name"),
    ("Description", "description"),
    ("Location", "location"),
    ("Subnets", "subnet_count"),
    ("ObjectClass", "object_class"),
    ("DistinguishedName", "distinguished_name"),
    ("Created", "created_at"),
    ("Changed", "changed_at"),
]

SUBNET_COLUMNS: list[tuple[str, str]] = [
    ("Name", "name"),
    ("Site", "site_name"),
    ("Description", "description"),
    ("Location", "location"),
    ("ObjectClass", "object_class"),
    ("DistinguishedName", "distinguished_name"),
    ("Created", "created_at"),
    ("Changed", "changed_at"),
]

USER_COLUMNS: list[tuple[str, str]] = [
    ("Office", "office"),
    ("LogonName", "logon_name"),
    ("DisplayName", "display_name"),
    ("OU", "organizational_unit"),
]

PRINTER_COLUMNS: list[tuple[str, str]] = [
    ("ServerName", "server_name"),
    ("PrinterName", "printer_name"),
    ("Location", "location"),
]


def _key(value: str | None) -> str:
    return value or ""


def summarize(
    anomalies: Iterable[Any], key: Callable[[Any], str | None]
) -> list[SummaryRow]:
    """Count anomalies per group key, ascending by key."""

    counts: Counter[str] = Counter(_key(key(item)) for item in anomalies)
    return [
        SummaryRow(group_key=group, count=counts[group])
        for group in sorted(counts)
    ]


def summary_table(
    name: str, header: str, rows: Sequence[SummaryRow]
) -> ReportTable:
    return ReportTable(
        name=name,
        headers=[header, "Count"],
        rows=[[row.group_key, row.count] for row in rows],
    )


def detail(
    name: str,
    anomalies: Iterable[Any],
    columns: Sequence[tuple[str, str]],
    sort_key: Callable[[Any], Any],
) -> ReportTable:
    """Project each record onto the given (title, attribute) columns."""

    ordered = sorted(anomalies, key=sort_key)
    return ReportTable(
        name=name,
        headers=[title for title, _ in columns],
        rows=[
            [_cell(getattr(item, attr)) for _, attr in columns]
            for item in ordered
        ],
    )


def _cell(value: Any) -> Any:
    # Excel cannot store timezone-aware datetimes.
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


def _by_name(item: Site | Subnet) -> str:
    return item.name


def _user_order(user: User) -> tuple[str, str]:
    return (_key(user.office), user.logon_name)


def _printer_order(printer: Printer) -> tuple[str, str]:
    return (printer.server_name, printer.printer_name)


def build_report(
    sites: Sequence[Site],
    subnets: Sequence[Subnet],
    anomalous_users: Sequence[User],
    anomalous_printers: Sequence[Printer],
    organizational_units: Sequence[str] = (),
    country_codes: Sequence[str] = (),
) -> AuditReport:
    """Assemble every table the output modules render."""

    return AuditReport(
        organizational_units=list(organizational_units),
        country_codes=list(country_codes),
        sites=detail("Sites", sites, SITE_COLUMNS, _by_name),
        subnets=detail("Subnets", subnets, SUBNET_COLUMNS, _by_name),
        user_summary=summary_table(
            "Summary",
            "Office",
            summarize(anomalous_users, lambda user: user.office),
        ),
        users=detail("Users", anomalous_users, USER_COLUMNS, _user_order),
        printer_summary=summary_table(
            "Summary",
            "Location",
            summarize(anomalous_printers, lambda printer: printer.location),
        ),
        printers=detail(
            "Printers", anomalous_printers, PRINTER_COLUMNS, _printer_order
        ),
    )
