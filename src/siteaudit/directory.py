"""Directory and print-server queries.

The audit only reads from Active Directory and the print servers. Queries
run through Windows PowerShell (ActiveDirectory and PrintManagement
modules) and are returned as JSON, which is converted to typed records at
this boundary.
"""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from .analysis import LocationFilter
from .models import PrintServer, Site, Subnet, User

LOGGER = logging.getLogger(__name__)

SITE_PROPERTIES = [
    "Description",
    "Location",
    "Subnets",
    "whenCreated",
    "whenChanged",
]
SUBNET_PROPERTIES = [
    "Description",
    "Location",
    "Site",
    "whenCreated",
    "whenChanged",
]
USER_PROPERTIES = ["SamAccountName", "DisplayName", "Office"]


class DirectoryQueryError(RuntimeError):
    """Raised when a directory or print-server query fails."""


class DirectorySource(Protocol):
    def fetch_sites(self, location_filter: LocationFilter) -> list[Site]:
        ...

    def fetch_subnets(self, location_filter: LocationFilter) -> list[Subnet]:
        ...

    def fetch_users(self, ou: str) -> list[User]:
        ...

    def resolve_computer_names(
        self, source: Sequence[str] | Path
    ) -> list[str]:
        ...

    def fetch_installed_printers(
        self, computer_names: Sequence[str]
    ) -> list[PrintServer]:
        ...


def read_computer_names(path: Path) -> list[str]:
    """One computer name per line; blank lines and # comments are skipped."""

    names: list[str] = []
    with Path(path).open("r", encoding="utf-8-sig") as handle:
        for line in handle:
            stripped = line.strip()
            if stripped and not stripped.startswith("#"):
                names.append(stripped)
    return names


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _as_list(data: Any) -> list[dict[str, Any]]:
    # ConvertTo-Json emits a bare object for single results.
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    raise DirectoryQueryError(f"Unexpected query result: {data!r}")


class PowerShellDirectory:
    """Query Active Directory and print servers through PowerShell."""

    def __init__(self, executable: str = "powershell.exe", timeout: int = 180):
        self.executable = executable
        self.timeout = timeout

    def _run_json(self, script: str) -> list[dict[str, Any]]:
        full_script = (
            "$ErrorActionPreference = 'Stop'; "
            f"{script} | ConvertTo-Json -Depth 4 -Compress"
        )
        cmd = [
            self.executable,
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-Command",
            full_script,
        ]
        LOGGER.debug("PS> %s", script)
        try:
            proc = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout
            )
        except subprocess.TimeoutExpired as exc:
            raise DirectoryQueryError(
                f"Query timed out after {self.timeout}s: {script}"
            ) from exc
        except OSError as exc:
            raise DirectoryQueryError(str(exc)) from exc

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            raise DirectoryQueryError(stderr or f"Query failed: {script}")

        raw = (proc.stdout or "").strip()
        if not raw:
            return []
        try:
            return _as_list(json.loads(raw))
        except json.JSONDecodeError as exc:
            raise DirectoryQueryError(
                f"Unparsable query output: {exc}"
            ) from exc

    def fetch_sites(self, location_filter: LocationFilter) -> list[Site]:
        records = self._run_json(
            "Import-Module ActiveDirectory; "
            f'Get-ADReplicationSite -Filter "{location_filter.expression}" '
            f"-Properties {','.join(SITE_PROPERTIES)} | Select-Object "
            "Name,Description,Location,Subnets,ObjectClass,"
            "DistinguishedName,"
            "@{N='Created';E={$_.whenCreated.ToString('o')}},"
            "@{N='Modified';E={$_.whenChanged.ToString('o')}}"
        )
        LOGGER.info("Retrieved %d site(s)", len(records))
        return [Site.from_record(record) for record in records]

    def fetch_subnets(self, location_filter: LocationFilter) -> list[Subnet]:
        records = self._run_json(
            "Import-Module ActiveDirectory; "
            f'Get-ADReplicationSubnet -Filter "{location_filter.expression}" '
            f"-Properties {','.join(SUBNET_PROPERTIES)} | Select-Object "
            "Name,Description,Location,Site,ObjectClass,DistinguishedName,"
            "@{N='Created';E={$_.whenCreated.ToString('o')}},"
            "@{N='Modified';E={$_.whenChanged.ToString('o')}}"
        )
        LOGGER.info("Retrieved %d subnet(s)", len(records))
        return [Subnet.from_record(record) for record in records]

    def fetch_users(self, ou: str) -> list[User]:
        records = self._run_json(
            "Import-Module ActiveDirectory; "
            f"Get-ADUser -SearchBase {_quote(ou)} -Filter * "
            f"-Properties {','.join(USER_PROPERTIES)} | Select-Object "
            "SamAccountName,DisplayName,Office,DistinguishedName"
        )
        LOGGER.info("Retrieved %d user(s) in '%s'", len(records), ou)
        return [User.from_record(record) for record in records]

    def resolve_computer_names(
        self, source: Sequence[str] | Path
    ) -> list[str]:
        if isinstance(source, Path):
            names = read_computer_names(source)
            LOGGER.info(
                "Read %d computer name(s) from '%s'", len(names), source
            )
            return names

        names = []
        for ou in source:
            records = self._run_json(
                "Import-Module ActiveDirectory; "
                f"Get-ADComputer -SearchBase {_quote(ou)} -Filter "
                "'Enabled -eq $true' | Select-Object Name"
            )
            names.extend(str(record.get("Name")) for record in records)
        LOGGER.info("Resolved %d computer name(s) from OU", len(names))
        return names

    def fetch_installed_printers(
        self, computer_names: Sequence[str]
    ) -> list[PrintServer]:
        servers = []
        for name in computer_names:
            records = self._run_json(
                f"Get-Printer -ComputerName {_quote(name)} "
                "| Select-Object Name,Location"
            )
            LOGGER.debug("%s: %d printer(s)", name, len(records))
            servers.append(PrintServer.from_records(name, records))
        return servers
