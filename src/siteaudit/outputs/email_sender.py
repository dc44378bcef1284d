"""Summary email output module."""

from __future__ import annotations

from html import escape

from ..analysis import AuditReport
from ..logs import with_suffix
from .base import OutputModule, register_output

SUBJECT_TEMPLATE = "{users} user(s), {printers} printer(s) without subnet"


def summary_counts(report: AuditReport) -> list[tuple[str, int]]:
    return [
        ("Sites", len(report.sites)),
        ("Subnets", len(report.subnets)),
        ("Users with unknown office", len(report.users)),
        ("Printers with unknown location", len(report.printers)),
    ]


def build_summary_html(report: AuditReport) -> str:
    rows = "".join(
        f"<tr><th>{escape(label)}</th><td>{count}</td></tr>"
        for label, count in summary_counts(report)
    )
    ous = "".join(
        f"<li>{escape(ou)}</li>" for ou in report.organizational_units
    )
    codes = escape(", ".join(report.country_codes))
    return (
        "<html><body>"
        "<p>Active Directory sites, subnets, user offices and printer "
        f"locations for country code(s) <b>{codes}</b>.</p>"
        f"<table>{rows}</table>"
        f"<p>Organizational units:</p><ul>{ous}</ul>"
        "</body></html>"
    )


@register_output("email")
class EmailOutput(OutputModule):
    """Mail the summary and every produced workbook."""

    def render(self, report: AuditReport) -> None:
        config = self.context.config
        mailer = self.context.mailer
        if mailer is None:
            raise RuntimeError("No mail client configured.")

        subject = SUBJECT_TEMPLATE.format(
            users=len(report.users), printers=len(report.printers)
        )
        mailer.send(
            to=config.mail_to,
            bcc=[config.script_admin] if config.script_admin else [],
            subject=subject,
            html_body=build_summary_html(report),
            attachments=list(dict.fromkeys(self.context.attachments)),
            save_copy=with_suffix(self.context.prefix, " - Mail.html"),
        )
