"""Configuration handling for SiteAudit."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path


class ConfigError(RuntimeError):
    """Raised when the configuration cannot be parsed, found or validated."""


DEFAULT_CONF_PATHS: list[Path] = [
    Path("/etc/siteaudit/siteaudit.conf"),
    Path("/etc/siteaudit.conf"),
    Path.cwd() / "siteaudit.conf",
]

LOG_FOLDER_ENV = "SITEAUDIT_LOG_FOLDER"
SCRIPT_ADMIN_ENV = "SITEAUDIT_SCRIPT_ADMIN"


def _bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _split_lines(raw: str) -> list[str]:
    # Distinguished names contain commas, so OU lists are ';' separated.
    return [item.strip() for item in raw.split(";") if item.strip()]


@dataclass
class EmailSettings:
    smtp_host: str = ""
    smtp_port: int = 25
    smtp_user: str = ""
    smtp_password: str = ""
    use_tls: bool = False
    from_address: str = ""


@dataclass
class Config:
    script_name: str = ""
    ou: list[str] = field(default_factory=list)
    country_codes: list[str] = field(default_factory=list)
    mail_to: list[str] = field(default_factory=list)
    computers_not_in_ou: Path | None = None
    log_folder: Path = field(
        default_factory=lambda: Path(os.getenv(LOG_FOLDER_ENV) or "./logs")
    )
    script_admin: str = field(
        default_factory=lambda: os.getenv(SCRIPT_ADMIN_ENV, "")
    )
    outputs: list[str] = field(default_factory=lambda: ["xlsx", "email"])
    # Whether a subnet with an empty location counts as a known location.
    include_empty_location: bool = False
    powershell: str = "powershell.exe"
    query_timeout: int = 180
    email: EmailSettings = field(default_factory=EmailSettings)


def discover_config_file(explicit_path: Path | None = None) -> Path:
    """Return the first readable configuration file."""

    candidates: Iterable[Path]
    if explicit_path:
        candidates = [explicit_path]
    else:
        env_path = os.getenv("SITEAUDIT_CONFIG")
        candidates = [Path(env_path)] if env_path else DEFAULT_CONF_PATHS

    for candidate in candidates:
        if candidate.is_file():
            return candidate

    raise ConfigError(
        "No configuration file found. Searched: "
        + ", ".join(str(p) for p in candidates)
    )


def parse_config(path: Path | None = None) -> Config:
    """Load configuration from disk."""

    conf_path = discover_config_file(path)
    raw: dict[str, str] = {}

    # Lines before any section are treated as [core] keys; everything else
    # is exposed as "section.key".
    current_section = "core"
    with conf_path.open("r", encoding="utf-8") as handle:
        for lineno, line in enumerate(handle, start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            if stripped.startswith("[") and stripped.endswith("]"):
                current_section = stripped[1:-1].strip().lower() or "core"
                continue

            if "=" not in stripped:
                raise ConfigError(
                    f"Invalid config line {lineno} in {conf_path}: {line!r}"
                )
            key, value = stripped.split("=", 1)
            raw[f"{current_section}.{key.strip().lower()}"] = value.strip()

    config = Config()
    try:
        _load_core_settings(config, raw)
        _load_email_settings(config.email, raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid value in {conf_path}: {exc}") from exc
    return config


def _load_core_settings(config: Config, raw: dict[str, str]) -> None:
    if "core.script_name" in raw:
        config.script_name = raw["core.script_name"]
    if "core.ou" in raw:
        config.ou = _split_lines(raw["core.ou"])
    if "core.country_codes" in raw:
        config.country_codes = _split_csv(raw["core.country_codes"])
    if "core.mail_to" in raw:
        config.mail_to = _split_csv(raw["core.mail_to"])
    if raw.get("core.computers_not_in_ou"):
        config.computers_not_in_ou = Path(raw["core.computers_not_in_ou"])
    if raw.get("core.log_folder"):
        config.log_folder = Path(raw["core.log_folder"])
    if raw.get("core.script_admin"):
        config.script_admin = raw["core.script_admin"]
    if "core.outputs" in raw:
        config.outputs = _split_csv(raw["core.outputs"])
    if "core.include_empty_location" in raw:
        config.include_empty_location = _bool(
            raw["core.include_empty_location"]
        )
    if "core.powershell" in raw:
        config.powershell = raw["core.powershell"]
    if "core.query_timeout" in raw:
        config.query_timeout = int(raw["core.query_timeout"])


def _load_email_settings(email: EmailSettings, raw: dict[str, str]) -> None:
    mapping = {
        "email.smtp_host": ("smtp_host", str),
        "email.smtp_port": ("smtp_port", int),
        "email.smtp_user": ("smtp_user", str),
        "email.smtp_password": ("smtp_password", str),
        "email.use_tls": ("use_tls", _bool),
        "email.from_address": ("from_address", str),
    }

    for key, (attr, caster) in mapping.items():
        if key in raw:
            setattr(email, attr, caster(raw[key]))


def validate_config(config: Config) -> None:
    """Check mandatory parameters and the optional computer list file."""

    missing = [
        name
        for name, value in (
            ("script_name", config.script_name),
            ("ou", config.ou),
            ("country_codes", config.country_codes),
            ("mail_to", config.mail_to),
            ("script_admin", config.script_admin),
        )
        if not value
    ]
    if missing:
        raise ConfigError(
            "Missing mandatory parameter(s): " + ", ".join(missing)
        )

    path = config.computers_not_in_ou
    if path is not None and not Path(path).is_file():
        raise ConfigError(f"File '{path}' not found.")
