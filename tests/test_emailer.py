"""Tests for the SMTP client."""

import pytest

from siteaudit.config import EmailSettings
from siteaudit.emailer import EmailClient, EmailDeliveryError


@pytest.fixture
def client(monkeypatch):
    sent = []
    client = EmailClient(EmailSettings(from_address="audit@contoso.com"))
    monkeypatch.setattr(
        client, "_send", lambda message, to: sent.append((message, to))
    )
    client.sent = sent
    return client


def test_send_keeps_bcc_out_of_headers(client, tmp_path):
    workbook = tmp_path / "run AD Users.xlsx"
    workbook.write_bytes(b"xlsx")
    copy = tmp_path / "run - Mail.html"

    client.send(
        to=["team@contoso.com"],
        bcc=["admin@contoso.com"],
        subject="Report",
        html_body="<p>hello</p>",
        attachments=[workbook],
        save_copy=copy,
    )

    message, recipients = client.sent[0]
    assert recipients == ["team@contoso.com", "admin@contoso.com"]
    assert message["To"] == "team@contoso.com"
    assert message["Bcc"] is None
    assert message["From"] == "audit@contoso.com"
    assert message["X-Priority"] is None
    names = [part.get_filename() for part in message.iter_attachments()]
    assert names == ["run AD Users.xlsx"]
    assert copy.read_text(encoding="utf-8") == "<p>hello</p>"


def test_send_high_priority(client):
    client.send(
        to=["admin@contoso.com"],
        subject="FAILURE",
        html_body="boom",
        high_priority=True,
    )
    message, _ = client.sent[0]
    assert message["X-Priority"] == "1"
    assert message["Importance"] == "High"


def test_send_without_recipients(client):
    with pytest.raises(EmailDeliveryError):
        client.send(to=[], subject="x", html_body="y")
