"""Tests for run-stamped file names and the event log."""

import logging
from datetime import datetime

import pytest

from siteaudit.logs import build_log_prefix, log_event, with_suffix


def test_log_prefix_carries_script_name(tmp_path):
    prefix = build_log_prefix(tmp_path, "Test", datetime(2025, 4, 1, 9, 0, 0))
    assert prefix.parent == tmp_path / "Test"
    assert prefix.parent.is_dir()
    assert prefix.name == "2025-04-01 090000 (Tuesday) Test"
    assert with_suffix(prefix, " AD Sites and subnets.xlsx").name == (
        "2025-04-01 090000 (Tuesday) Test AD Sites and subnets.xlsx"
    )


def test_log_event_levels(caplog):
    with caplog.at_level(logging.INFO, logger="siteaudit.events"):
        log_event("error", "boom")
        log_event("Information", "Script ended")
    assert [(r.levelname, r.message) for r in caplog.records] == [
        ("ERROR", "boom"),
        ("INFO", "Script ended"),
    ]


def test_log_event_unknown_kind():
    with pytest.raises(ValueError):
        log_event("debug", "nope")
