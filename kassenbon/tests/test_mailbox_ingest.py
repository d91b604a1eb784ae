"""End-to-end tests for the Maildir ingest workflow."""

from __future__ import annotations

import mailbox
from email.message import EmailMessage
from pathlib import Path

import pytest

from kassenbon.application.receipts.ingest import IngestRequest, run_mailbox_ingest
from kassenbon.runtime.receipt_mailbox import ReceiptMailbox
from kassenbon.runtime.receipt_storage import ReceiptTables

NETTO_SENDER = "noreply@netto-app.de"


def _deliver(maildir_path: Path, html: str, subject: str, sender: str = NETTO_SENDER, day: int = 14) -> str:
    msg = EmailMessage()
    msg["From"] = f"Netto App <{sender}>"
    msg["To"] = "me@example.org"
    msg["Subject"] = subject
    msg["Date"] = f"Fri, {day} Mar 2025 18:05:00 +0100"
    msg["Message-ID"] = "<" + "".join(c if c.isalnum() else "-" for c in subject) + "@netto-app.de>"
    msg.set_content("Ihr Kassenbon")
    msg.add_alternative(html, subtype="html")
    return mailbox.Maildir(maildir_path, create=True).add(msg)


def _request(tmp_path: Path) -> IngestRequest:
    return IngestRequest(
        maildir_path=tmp_path / "mail",
        data_dir=tmp_path / "data",
        config_path=str(tmp_path / "no-config.toml"),
    )


def test_search_unread_returns_only_receipt_senders(tmp_path: Path, netto_email: str) -> None:
    maildir_path = tmp_path / "mail"
    key = _deliver(maildir_path, netto_email, "Dein Kassenbon")
    _deliver(maildir_path, netto_email, "Newsletter", sender="news@example.org")

    receipt_mailbox = ReceiptMailbox(maildir_path, senders=(NETTO_SENDER,))
    messages = receipt_mailbox.search_unread()

    assert [m.key for m in messages] == [key]
    assert messages[0].subject == "Dein Kassenbon"
    assert "<!-- WARENKORB -->" in messages[0].html_body
    assert messages[0].date.day == 14


def test_ingest_stores_receipt_and_marks_read(tmp_path: Path, netto_email: str) -> None:
    key = _deliver(tmp_path / "mail", netto_email, "Dein Kassenbon")

    result = run_mailbox_ingest(_request(tmp_path))

    assert result.processed == 1
    assert result.failed == 0
    assert result.outcomes[0].items_written == 2
    assert ReceiptMailbox(tmp_path / "mail", senders=(NETTO_SENDER,)).is_read(key)

    tables = ReceiptTables(tmp_path / "data")
    stores = tables.list_stores()
    assert len(stores) == 1
    assert stores[0].name == "Netto Marken-Discount"
    assert stores[0].address == "Netto City-Filiale, Hauptstr. 123, 12345 Berlin"
    assert [entry.description for entry in tables.list_price_log()] == ["Milch 3.5%", "Brot"]

    # Nothing left to do on the next run
    assert run_mailbox_ingest(_request(tmp_path)).outcomes == []


def test_ingest_labels_malformed_email_and_continues(tmp_path: Path, netto_email: str) -> None:
    bad_key = _deliver(tmp_path / "mail", "<html>Filiale: kaputt</html>", "Kaputt", day=13)
    good_key = _deliver(tmp_path / "mail", netto_email, "Dein Kassenbon", day=14)

    result = run_mailbox_ingest(_request(tmp_path))

    assert [outcome.status for outcome in result.outcomes] == ["malformed", "stored"]
    assert result.failed == 1
    assert result.processed == 1

    receipt_mailbox = ReceiptMailbox(tmp_path / "mail", senders=(NETTO_SENDER,))
    assert receipt_mailbox.has_error_label(bad_key)
    assert not receipt_mailbox.is_read(bad_key)
    assert receipt_mailbox.is_read(good_key)
    assert receipt_mailbox.search_unread() == []


def test_ingest_leaves_empty_extraction_unread(tmp_path: Path) -> None:
    key = _deliver(tmp_path / "mail", "Filiale:\n<!-- WARENKORB -->\n<!-- SUMME -->", "Leer")

    result = run_mailbox_ingest(_request(tmp_path))

    assert result.skipped == 1
    assert not ReceiptMailbox(tmp_path / "mail", senders=(NETTO_SENDER,)).is_read(key)
    assert ReceiptTables(tmp_path / "data").list_purchases() == []


def test_ingest_reports_duplicate_purchase(tmp_path: Path, netto_email: str) -> None:
    _deliver(tmp_path / "mail", netto_email, "Dein Kassenbon")
    _deliver(tmp_path / "mail", netto_email, "Dein Kassenbon (Kopie)")

    result = run_mailbox_ingest(_request(tmp_path))

    assert sorted(outcome.status for outcome in result.outcomes) == ["duplicate", "stored"]
    assert result.duplicates == 1
    assert len(ReceiptTables(tmp_path / "data").list_price_log()) == 2


def test_ingest_uses_configured_senders_and_store_name(tmp_path: Path, netto_email: str) -> None:
    config = tmp_path / "mail_sources.toml"
    config.write_text('store_name = "Netto Filiale Test"\nsenders = ["kassenbon@example.org"]\n')
    _deliver(tmp_path / "mail", netto_email, "Default sender")
    _deliver(tmp_path / "mail", netto_email, "Custom sender", sender="kassenbon@example.org")

    result = run_mailbox_ingest(
        IngestRequest(maildir_path=tmp_path / "mail", data_dir=tmp_path / "data", config_path=str(config))
    )

    assert [outcome.subject for outcome in result.outcomes] == ["Custom sender"]
    assert ReceiptTables(tmp_path / "data").list_stores()[0].name == "Netto Filiale Test"


def _deliver_raw(maildir_path: Path, raw: bytes) -> str:
    return mailbox.Maildir(maildir_path, create=True).add(raw)


UNKNOWN_CHARSET_EMAIL = (
    b"From: Netto App <noreply@netto-app.de>\r\n"
    b"To: me@example.org\r\n"
    b"Subject: Kaputter Zeichensatz\r\n"
    b"Date: Thu, 13 Mar 2025 18:05:00 +0100\r\n"
    b"Message-ID: <unknown-charset@netto-app.de>\r\n"
    b"MIME-Version: 1.0\r\n"
    b'Content-Type: text/html; charset="x-unknown-charset"\r\n'
    b"Content-Transfer-Encoding: 7bit\r\n"
    b"\r\n"
    b"<html>Filiale:</html>\r\n"
)


def test_search_unread_reports_undecodable_body(tmp_path: Path) -> None:
    key = _deliver_raw(tmp_path / "mail", UNKNOWN_CHARSET_EMAIL)

    messages = ReceiptMailbox(tmp_path / "mail", senders=(NETTO_SENDER,)).search_unread()

    assert [m.key for m in messages] == [key]
    assert messages[0].html_body == ""
    assert "x-unknown-charset" in messages[0].decode_error


def test_ingest_labels_undecodable_email_and_continues(tmp_path: Path, netto_email: str) -> None:
    bad_key = _deliver_raw(tmp_path / "mail", UNKNOWN_CHARSET_EMAIL)
    good_key = _deliver(tmp_path / "mail", netto_email, "Dein Kassenbon", day=14)

    result = run_mailbox_ingest(_request(tmp_path))

    assert [outcome.status for outcome in result.outcomes] == ["error", "stored"]
    assert result.processed == 1
    assert result.failed == 1

    receipt_mailbox = ReceiptMailbox(tmp_path / "mail", senders=(NETTO_SENDER,))
    assert receipt_mailbox.has_error_label(bad_key)
    assert receipt_mailbox.is_read(good_key)
    assert run_mailbox_ingest(_request(tmp_path)).outcomes == []


def test_ingest_labels_message_on_unexpected_error(
    tmp_path: Path, netto_email: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    key = _deliver(tmp_path / "mail", netto_email, "Dein Kassenbon")

    def fail_load(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(ReceiptTables, "load_receipt", fail_load)

    result = run_mailbox_ingest(_request(tmp_path))

    assert [outcome.status for outcome in result.outcomes] == ["error"]
    assert result.outcomes[0].error == "disk full"
    assert result.failed == 1

    receipt_mailbox = ReceiptMailbox(tmp_path / "mail", senders=(NETTO_SENDER,))
    assert receipt_mailbox.has_error_label(key)
    assert not receipt_mailbox.is_read(key)
