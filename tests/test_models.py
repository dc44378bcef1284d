"""Tests for record conversion at the directory boundary."""

from datetime import datetime, timedelta, timezone

import pytest

from siteaudit.models import (
    PrintServer,
    Site,
    Subnet,
    User,
    parent_container,
    parse_site_name,
    parse_timestamp,
)


@pytest.mark.parametrize(
    ("dn", "expected"),
    [
        ("CN=Leuven,CN=Sites,CN=Configuration,DC=contoso,DC=com", "Leuven"),
        ("CN=XXX-My Site-1,CN=Sites,CN=Configuration", "XXX-My Site-1"),
        ("CN=First,CN=Second,CN=Third", "First"),
        ("OU=Sites,CN=Brussels,CN=Sites", "Brussels"),
        ("CN=Leuven", ""),
        ("Leuven,Sites", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_parse_site_name(dn, expected):
    assert parse_site_name(dn) == expected


def test_parent_container():
    dn = "CN=Doe\\, John,OU=Users,DC=contoso,DC=com"
    assert parent_container(dn) == "OU=Users,DC=contoso,DC=com"
    assert parent_container("CN=alone") == ""
    assert parent_container(None) == ""


def test_parse_timestamp_formats():
    assert parse_timestamp("/Date(0)/") == datetime(
        1970, 1, 1, tzinfo=timezone.utc
    )
    assert parse_timestamp("2025-04-01T09:03:11") == datetime(
        2025, 4, 1, 9, 3, 11
    )
    assert parse_timestamp("2025-04-01T09:03:11Z").tzinfo is not None
    assert parse_timestamp("2024-01-02T03:04:05.1234567+01:00") == datetime(
        2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone(timedelta(hours=1))
    )
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None


def test_site_from_record_ignores_unknown_fields():
    site = Site.from_record(
        {
            "Name": "XXX-My Site-1",
            "Location": "XXX-Leuven",
            "Subnets": [
                "CN=10.0.0.0/8,CN=Subnets",
                "CN=10.1.0.0/16,CN=Subnets",
            ],
            "ObjectClass": "site",
            "PropertyNames": ["Name"],
            "Created": "2024-01-02T03:04:05",
        }
    )
    assert site.name == "XXX-My Site-1"
    assert site.location == "XXX-Leuven"
    assert site.subnet_count == 2
    assert site.description is None
    assert site.created_at == datetime(2024, 1, 2, 3, 4, 5)
    assert not hasattr(site, "PropertyNames")


def test_site_single_subnet_is_counted():
    site = Site.from_record({"Name": "S", "Subnets": "CN=10.0.0.0/8"})
    assert site.subnet_count == 1


def test_subnet_from_record_parses_site_name():
    subnet = Subnet.from_record(
        {
            "Name": "10.10.10.00/2",
            "Location": "Leuven",
            "Site": "CN=XXX-My Site-1,CN=Sites,CN=Configuration,DC=c,DC=com",
        }
    )
    assert subnet.site_name == "XXX-My Site-1"
    assert subnet.location == "Leuven"


def test_user_from_record():
    user = User.from_record(
        {
            "SamAccountName": "jdoe",
            "DisplayName": "John Doe",
            "Office": "Brussels",
            "DistinguishedName": "CN=John Doe,OU=Users,DC=contoso,DC=com",
        }
    )
    assert user.logon_name == "jdoe"
    assert user.office == "Brussels"
    assert user.organizational_unit == "OU=Users,DC=contoso,DC=com"


def test_print_server_from_records():
    server = PrintServer.from_records(
        "S1", [{"Name": "PRN-01", "Location": "Brussels", "Shared": True}]
    )
    assert len(server.printers) == 1
    printer = server.printers[0]
    assert printer.server_name == "S1"
    assert printer.printer_name == "PRN-01"
    assert printer.location == "Brussels"
