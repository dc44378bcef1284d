"""Pytest configuration and shared fixtures."""

from datetime import datetime
from pathlib import Path

import pytest

from siteaudit.config import Config
from siteaudit.directory import read_computer_names
from siteaudit.logs import build_log_prefix
from siteaudit.models import PrintServer


class FakeDirectory:
    """In-memory stand-in for the PowerShell directory source."""

    def __init__(self, sites=None, subnets=None, users=None, servers=None):
        self.sites = sites or []
        self.subnets = subnets or []
        self.users = users or []
        self.servers = servers or []
        self.calls = []

    def fetch_sites(self, location_filter):
        self.calls.append(("fetch_sites", location_filter))
        return list(self.sites)

    def fetch_subnets(self, location_filter):
        self.calls.append(("fetch_subnets", location_filter))
        return list(self.subnets)

    def fetch_users(self, ou):
        self.calls.append(("fetch_users", ou))
        return list(self.users)

    def resolve_computer_names(self, source):
        self.calls.append(("resolve_computer_names", source))
        if isinstance(source, Path):
            return read_computer_names(source)
        return [server.server_name for server in self.servers]

    def fetch_installed_printers(self, computer_names):
        self.calls.append(("fetch_installed_printers", list(computer_names)))
        known = {server.server_name: server for server in self.servers}
        return [
            known.get(name, PrintServer(server_name=name))
            for name in computer_names
        ]


class FakeMailer:
    def __init__(self):
        self.sent = []

    def send(self, **kwargs):
        self.sent.append(kwargs)
        save_copy = kwargs.get("save_copy")
        if save_copy is not None:
            save_copy.write_text(kwargs["html_body"], encoding="utf-8")


@pytest.fixture
def audit_config(tmp_path):
    """A valid configuration writing into tmp_path."""
    return Config(
        script_name="Test",
        ou=["OU=Users,DC=contoso,DC=com"],
        country_codes=["XXX"],
        mail_to=["team@contoso.com"],
        script_admin="admin@contoso.com",
        log_folder=tmp_path,
    )


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def prefix(audit_config):
    return build_log_prefix(
        audit_config.log_folder,
        audit_config.script_name,
        datetime(2025, 4, 1, 9, 0, 0),
    )


@pytest.fixture
def sample_config(tmp_path):
    """Create a sample configuration file."""
    config_file = tmp_path / "siteaudit.conf"
    config_file.write_text(
        """[core]
script_name=AD Locations
ou=OU=BEL,DC=contoso,DC=com;OU=NLD,DC=contoso,DC=com
country_codes=BEL,NLD
mail_to=team@contoso.com
script_admin=admin@contoso.com
"""
    )
    return config_file


@pytest.fixture
def directory_cls():
    return FakeDirectory
