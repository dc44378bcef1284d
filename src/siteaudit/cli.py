"""Command-line entry point for SiteAudit."""

from __future__ import annotations

import argparse
from collections.abc import Iterable
from pathlib import Path

from . import config
from .directory import PowerShellDirectory
from .emailer import EmailClient
from .logs import build_log_prefix, setup_logging, with_suffix
from .outputs import list_outputs
from .reporting import run_audit


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="siteaudit",
        description=(
            "SiteAudit - Report users and printers whose location matches "
            "no Active Directory subnet."
        ),
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help=(
            "Path to siteaudit.conf "
            "(defaults to /etc/siteaudit/siteaudit.conf)."
        ),
    )
    parser.add_argument("--script-name", help="Name used in file names.")
    parser.add_argument(
        "--ou",
        action="append",
        help="Organizational unit to scan (repeatable).",
    )
    parser.add_argument(
        "--country-code",
        action="append",
        help="Location prefix of sites and subnets (repeatable).",
    )
    parser.add_argument(
        "--mail-to",
        action="append",
        help="Summary mail recipient (repeatable).",
    )
    parser.add_argument(
        "--computers-not-in-ou",
        type=Path,
        help="File with print server names to scan instead of the OUs.",
    )
    parser.add_argument(
        "--log-folder",
        type=Path,
        help=f"Folder for logs and reports (env {config.LOG_FOLDER_ENV}).",
    )
    parser.add_argument(
        "--script-admin",
        help=f"Administrator address (env {config.SCRIPT_ADMIN_ENV}).",
    )
    parser.add_argument(
        "-o",
        "--outputs",
        help=(
            "Comma-separated override for output modules "
            "(e.g., xlsx,cli,email)."
        ),
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse config and show summary without querying anything.",
    )
    parser.add_argument(
        "--list-outputs",
        action="store_true",
        help="List available output modules and exit.",
    )
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.list_outputs:
        print("Available outputs: " + ", ".join(list_outputs()))
        return 0

    # Without a config file every setting comes from the command line.
    config_error = None
    try:
        conf_path = config.discover_config_file(args.config)
    except config.ConfigError as exc:
        if args.config:
            config_error = exc
        conf_path = None

    try:
        loaded = (
            config.parse_config(conf_path) if conf_path else config.Config()
        )
    except config.ConfigError as exc:
        config_error = exc
        loaded = config.Config()

    _apply_overrides(loaded, args)

    if args.dry_run:
        if config_error is not None:
            parser.error(str(config_error))
        print("SiteAudit configuration:")
        print(f"  script_name  : {loaded.script_name}")
        print(f"  ou           : {'; '.join(loaded.ou)}")
        print(f"  country_codes: {', '.join(loaded.country_codes)}")
        print(f"  mail_to      : {', '.join(loaded.mail_to)}")
        print(f"  script_admin : {loaded.script_admin}")
        print(f"  computers    : {loaded.computers_not_in_ou or '-'}")
        print(f"  log_folder   : {loaded.log_folder}")
        print(f"  outputs      : {', '.join(loaded.outputs)}")
        print(
            "  smtp         : "
            f"{loaded.email.smtp_host or 'localhost'}:"
            f"{loaded.email.smtp_port}"
        )
        return 0

    # A missing script name fails the run in validate_config, after logging.
    prefix = build_log_prefix(
        loaded.log_folder, loaded.script_name or parser.prog
    )
    setup_logging(with_suffix(prefix, ".log"))

    source = PowerShellDirectory(
        executable=loaded.powershell, timeout=loaded.query_timeout
    )
    mailer = EmailClient(loaded.email)
    result = run_audit(
        loaded, source, mailer, prefix, config_error=config_error
    )
    return result.exit_code


def _apply_overrides(loaded: config.Config, args: argparse.Namespace) -> None:
    if args.script_name:
        loaded.script_name = args.script_name
    if args.ou:
        loaded.ou = args.ou
    if args.country_code:
        loaded.country_codes = args.country_code
    if args.mail_to:
        loaded.mail_to = args.mail_to
    if args.computers_not_in_ou:
        loaded.computers_not_in_ou = args.computers_not_in_ou
    if args.log_folder:
        loaded.log_folder = args.log_folder
    if args.script_admin:
        loaded.script_admin = args.script_admin
    if args.outputs:
        loaded.outputs = [
            item.strip() for item in args.outputs.split(",") if item.strip()
        ]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
