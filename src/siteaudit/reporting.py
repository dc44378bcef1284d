"""High-level orchestration for SiteAudit."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .analysis import (
    SubnetLocationIndex,
    build_location_filter,
    build_report,
    classify,
    flatten_printers,
)
from .config import Config, validate_config
from .directory import DirectorySource
from .logs import log_event
from .models import Printer, Site, Subnet, User
from .outputs import OutputContext, get_output_module

LOGGER = logging.getLogger(__name__)

FAILURE_SUBJECT = "FAILURE"


class Stage(str, Enum):
    INIT = "Init"
    FILTERING = "Filtering"
    SITE_FETCH = "SiteFetch"
    SUBNET_FETCH = "SubnetFetch"
    INDEX_BUILD = "IndexBuild"
    USER_CLASSIFY = "UserClassify"
    PRINTER_CLASSIFY = "PrinterClassify"
    REPORTING = "Reporting"
    MAILING = "Mailing"
    DONE = "Done"
    FAILED = "Failed"


@dataclass
class RunResult:
    stage: Stage = Stage.INIT
    sites: list[Site] = field(default_factory=list)
    subnets: list[Subnet] = field(default_factory=list)
    anomalous_users: list[User] = field(default_factory=list)
    anomalous_printers: list[Printer] = field(default_factory=list)
    attachments: list[Path] = field(default_factory=list)
    error: str | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.stage is Stage.DONE else 1


def run_audit(
    config: Config,
    source: DirectorySource,
    mailer,
    prefix: Path,
    stdout=None,
    config_error: Exception | None = None,
) -> RunResult:
    """Run the audit and mail the summary; return the run result.

    Any exception ends the run: the administrator gets a ``FAILURE`` mail
    and the result carries ``Stage.FAILED``.
    A ``config_error`` raised while loading settings fails the run in its
    first stage.
    """

    result = RunResult()
    log_event("information", f"Script '{config.script_name}' started")
    try:
        _run_stages(
            config, source, mailer, prefix, result, stdout, config_error
        )
    except Exception as exc:
        failed_in = result.stage
        result.stage = Stage.FAILED
        result.error = str(exc) or exc.__class__.__name__
        LOGGER.warning("Run failed in stage %s: %s", failed_in.value, exc)
        _send_failure(config, mailer, result.error)
        log_event("error", result.error)
        log_event("information", "Script ended")
        return result

    log_event("information", "Script ended")
    return result


def _run_stages(
    config: Config,
    source: DirectorySource,
    mailer,
    prefix: Path,
    result: RunResult,
    stdout,
    config_error: Exception | None,
) -> None:
    _enter(result, Stage.INIT)
    if config_error is not None:
        raise config_error
    validate_config(config)

    _enter(result, Stage.FILTERING)
    location_filter = build_location_filter(config.country_codes)
    LOGGER.info("Location filter: %s", location_filter.expression)

    _enter(result, Stage.SITE_FETCH)
    result.sites = list(source.fetch_sites(location_filter))

    _enter(result, Stage.SUBNET_FETCH)
    result.subnets = list(source.fetch_subnets(location_filter))

    _enter(result, Stage.INDEX_BUILD)
    index = SubnetLocationIndex.from_subnets(
        result.subnets, include_empty=config.include_empty_location
    )
    LOGGER.info("%d distinct subnet location(s)", len(index))

    _enter(result, Stage.USER_CLASSIFY)
    users: list[User] = []
    for ou in config.ou:
        users.extend(source.fetch_users(ou))
    result.anomalous_users = classify(users, lambda user: user.office, index)
    LOGGER.info(
        "%d of %d user(s) have an office without subnet",
        len(result.anomalous_users),
        len(users),
    )

    _enter(result, Stage.PRINTER_CLASSIFY)
    if config.computers_not_in_ou is not None:
        computers = Path(config.computers_not_in_ou)
        names = source.resolve_computer_names(computers)
    else:
        names = source.resolve_computer_names(config.ou)
    printers = flatten_printers(source.fetch_installed_printers(names))
    result.anomalous_printers = classify(
        printers, lambda printer: printer.location, index
    )
    LOGGER.info(
        "%d of %d printer(s) have a location without subnet",
        len(result.anomalous_printers),
        len(printers),
    )

    report = build_report(
        result.sites,
        result.subnets,
        result.anomalous_users,
        result.anomalous_printers,
        organizational_units=config.ou,
        country_codes=config.country_codes,
    )
    context = OutputContext(
        config=config, prefix=prefix, mailer=mailer, stdout=stdout
    )
    outputs = [name.strip().lower() for name in config.outputs]

    _enter(result, Stage.REPORTING)
    for name in outputs:
        if name and name != "email":
            get_output_module(name)(context).render(report)
    result.attachments = list(context.attachments)

    if "email" in outputs:
        _enter(result, Stage.MAILING)
        get_output_module("email")(context).render(report)

    _enter(result, Stage.DONE)


def _enter(result: RunResult, stage: Stage) -> None:
    LOGGER.debug("Stage %s", stage.value)
    result.stage = stage


def _send_failure(config: Config, mailer, message: str) -> None:
    if mailer is None or not config.script_admin:
        LOGGER.error("No administrator mail configured; failure not mailed")
        return
    try:
        mailer.send(
            to=[config.script_admin],
            subject=FAILURE_SUBJECT,
            html_body=message,
            high_priority=True,
        )
    except Exception:
        LOGGER.exception("Could not send failure mail")
