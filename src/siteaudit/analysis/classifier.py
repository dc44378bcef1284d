"""Subnet location index and orphaned location detection."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TypeVar

from ..models import Printer, PrintServer, Subnet

T = TypeVar("T")


@dataclass(frozen=True)
class SubnetLocationIndex:
    locations: frozenset[str]

    @classmethod
    def from_subnets(
        cls, subnets: Iterable[Subnet], include_empty: bool = False
    ) -> SubnetLocationIndex:
        locations = {
            subnet.location
            for subnet in subnets
            if subnet.location is not None
            and (include_empty or subnet.location != "")
        }
        return cls(locations=frozenset(locations))

    def __contains__(self, location: object) -> bool:
        return location in self.locations

    def __len__(self) -> int:
        return len(self.locations)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.locations))


def classify(
    records: Iterable[T],
    selector: Callable[[T], str | None],
    index: SubnetLocationIndex,
) -> list[T]:
    """Return the records whose selected location is not a subnet location.

    Input order is preserved and the input is never modified.
    """

    return [record for record in records if selector(record) not in index]


def flatten_printers(servers: Sequence[PrintServer]) -> list[Printer]:
    return [printer for server in servers for printer in server.printers]
