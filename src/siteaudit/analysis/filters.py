"""Location prefix filter shared by the site and subnet queries."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class LocationFilter:
    codes: tuple[str, ...]

    @property
    def expression(self) -> str:
        """Directory query predicate, one ``-like`` clause per code."""

        return " -or ".join(
            "Location -like '{}*'".format(code.replace("'", "''"))
            for code in self.codes
        )

    def matches(self, location: str | None) -> bool:
        if location is None:
            return False
        return any(location.startswith(code) for code in self.codes)

    def __str__(self) -> str:
        return self.expression


def build_location_filter(country_codes: Sequence[str]) -> LocationFilter:
    """OR-combine one starts-with test per country code."""

    codes = tuple(country_codes)
    if not codes:
        raise ValueError("At least one country code is required.")
    return LocationFilter(codes=codes)
