"""SMTP helper for SiteAudit report delivery."""

from __future__ import annotations

import logging
import smtplib
from collections.abc import Sequence
from email.message import EmailMessage
from pathlib import Path

from .config import EmailSettings

LOGGER = logging.getLogger(__name__)

XLSX_TYPE = (
    "application",
    "vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)


class EmailDeliveryError(RuntimeError):
    """Raised when sending email fails."""


class EmailClient:
    """Thin SMTP wrapper using :class:`EmailSettings`."""

    def __init__(self, settings: EmailSettings):
        self.settings = settings

    def send(
        self,
        to: Sequence[str],
        subject: str,
        html_body: str,
        bcc: Sequence[str] = (),
        attachments: Sequence[Path] | None = None,
        high_priority: bool = False,
        save_copy: Path | None = None,
    ) -> None:
        if not to and not bcc:
            raise EmailDeliveryError("No recipients given.")

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = (
            self.settings.from_address
            or self.settings.smtp_user
            or "siteaudit@localhost"
        )
        if to:
            message["To"] = ", ".join(to)
        if high_priority:
            message["X-Priority"] = "1"
            message["Importance"] = "High"
        message.set_content("This message requires an HTML capable reader.")
        message.add_alternative(html_body, subtype="html")

        for path in attachments or []:
            maintype, subtype = (
                XLSX_TYPE
                if path.suffix == ".xlsx"
                else ("application", "octet-stream")
            )
            message.add_attachment(
                path.read_bytes(),
                maintype=maintype,
                subtype=subtype,
                filename=path.name,
            )

        if save_copy is not None:
            save_copy.parent.mkdir(parents=True, exist_ok=True)
            save_copy.write_text(html_body, encoding="utf-8")

        # Bcc is passed to the envelope only, never written to the headers.
        recipients = list(dict.fromkeys([*to, *bcc]))
        self._send(message, recipients)
        LOGGER.info("Mail '%s' sent to %s", subject, ", ".join(recipients))

    def _send(self, message: EmailMessage, recipients: list[str]) -> None:
        try:
            with smtplib.SMTP(
                self.settings.smtp_host or "localhost",
                self.settings.smtp_port,
                timeout=30,
            ) as server:
                if self.settings.use_tls:
                    server.starttls()
                if self.settings.smtp_user or self.settings.smtp_password:
                    server.login(
                        self.settings.smtp_user,
                        self.settings.smtp_password,
                    )
                server.send_message(message, to_addrs=recipients)
        except OSError as exc:  # pragma: no cover - network dependent
            raise EmailDeliveryError(str(exc)) from exc
