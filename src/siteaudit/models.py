"""Typed records for directory and print-server query results."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

SITE_NAME = re.compile(r"CN=(?P<name>[^,]*),CN=")
JSON_DATE = re.compile(r"^/Date\((?P<ms>-?\d+)(?:[+-]\d{4})?\)/$")
# .NET round-trip timestamps carry seven fractional digits.
EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_site_name(distinguished_name: str | None) -> str:
    """Return the site name from a subnet's site reference.

    The site name is the value of the first ``CN=`` component that is
    followed by another ``CN=`` component, e.g.
    ``CN=Leuven,CN=Sites,CN=Configuration,DC=contoso,DC=com`` gives
    ``Leuven``. An empty string is returned when the pattern is absent.
    """

    if not distinguished_name:
        return ""
    match = SITE_NAME.search(distinguished_name)
    if not match:
        return ""
    return match.group("name")


def parent_container(distinguished_name: str | None) -> str:
    """Drop the first RDN of a distinguished name."""

    if not distinguished_name:
        return ""
    # Escaped commas ("\,") belong to the RDN value.
    parts = re.split(r"(?<!\\),", distinguished_name, maxsplit=1)
    return parts[1] if len(parts) == 2 else ""


def parse_timestamp(value: Any) -> datetime | None:
    """Accept ISO-8601 strings, JSON ``/Date(ms)/`` values or datetimes."""

    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    match = JSON_DATE.match(text)
    if match:
        seconds = int(match.group("ms")) / 1000
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    try:
        text = EXCESS_FRACTION.sub(r"\1", text.replace("Z", "+00:00"))
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _text(record: Mapping[str, Any], key: str) -> str | None:
    value = record.get(key)
    if value is None:
        return None
    return str(value)


def _count(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, (list, tuple)):
        return len(value)
    if isinstance(value, int):
        return value
    # A single subnet is serialized as a plain string.
    return 1


@dataclass(frozen=True)
class Site:
    name: str
    description: str | None = None
    location: str | None = None
    subnet_count: int = 0
    object_class: str | None = None
    distinguished_name: str | None = None
    created_at: datetime | None = None
    changed_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Site:
        return cls(
            name=_text(record, "Name") or "",
            description=_text(record, "Description"),
            location=_text(record, "Location"),
            subnet_count=_count(record.get("Subnets")),
            object_class=_text(record, "ObjectClass"),
            distinguished_name=_text(record, "DistinguishedName"),
            created_at=parse_timestamp(record.get("Created")),
            changed_at=parse_timestamp(record.get("Modified")),
        )


@dataclass(frozen=True)
class Subnet:
    name: str
    description: str | None = None
    location: str | None = None
    site_name: str = ""
    object_class: str | None = None
    distinguished_name: str | None = None
    created_at: datetime | None = None
    changed_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Subnet:
        return cls(
            name=_text(record, "Name") or "",
            description=_text(record, "Description"),
            location=_text(record, "Location"),
            site_name=parse_site_name(_text(record, "Site")),
            object_class=_text(record, "ObjectClass"),
            distinguished_name=_text(record, "DistinguishedName"),
            created_at=parse_timestamp(record.get("Created")),
            changed_at=parse_timestamp(record.get("Modified")),
        )


@dataclass(frozen=True)
class User:
    logon_name: str
    display_name: str | None = None
    office: str | None = None
    organizational_unit: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> User:
        return cls(
            logon_name=_text(record, "SamAccountName") or "",
            display_name=_text(record, "DisplayName"),
            office=_text(record, "Office"),
            organizational_unit=parent_container(
                _text(record, "DistinguishedName")
            ),
        )


@dataclass(frozen=True)
class Printer:
    server_name: str
    printer_name: str
    location: str | None = None


@dataclass
class PrintServer:
    server_name: str
    printers: list[Printer] = field(default_factory=list)

    @classmethod
    def from_records(
        cls, server_name: str, records: list[Mapping[str, Any]]
    ) -> PrintServer:
        return cls(
            server_name=server_name,
            printers=[
                Printer(
                    server_name=server_name,
                    printer_name=_text(record, "Name") or "",
                    location=_text(record, "Location"),
                )
                for record in records
            ],
        )
