"""Run-stamped log files and event logging."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

EVENTS = logging.getLogger("siteaudit.events")

EVENT_LEVELS = {
    "information": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def build_log_prefix(
    log_folder: Path, script_name: str, now: datetime | None = None
) -> Path:
    """Return the run's file prefix inside ``<log_folder>/<script_name>``.

    The file stem is ``<YYYY-MM-DD HHMMSS> (<Weekday>) <script_name>``.
    Every run gets its own stamp; workbooks, the mail copy and the log file
    all share it.
    """

    now = now or datetime.now()
    folder = Path(log_folder) / script_name
    folder.mkdir(parents=True, exist_ok=True)
    return folder / f"{now:%Y-%m-%d %H%M%S} ({now:%A}) {script_name}"


def with_suffix(prefix: Path, suffix: str) -> Path:
    """Append text to a prefix path, e.g. ``" AD Users.xlsx"``."""

    return prefix.with_name(prefix.name + suffix)


def setup_logging(log_file: Path, level: int = logging.INFO) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )


def log_event(kind: str, message: str) -> None:
    """Record an entry in the event log (information, warning or error)."""

    try:
        level = EVENT_LEVELS[kind.lower()]
    except KeyError:
        raise ValueError(f"Unknown event kind '{kind}'") from None
    EVENTS.log(level, message)
