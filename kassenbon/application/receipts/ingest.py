"""Mailbox ingest workflow: fetch unread receipts -> parse -> store -> mark read."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from kassenbon.receipt.html_parser import MalformedDocument
from kassenbon.receipt.html_result_parser import extract_receipt_data
from kassenbon.runtime import get_logger, get_paths, load_mail_sources
from kassenbon.runtime.receipt_mailbox import ReceiptMailbox, ReceiptMessage
from kassenbon.runtime.receipt_storage import ReceiptTables

logger = get_logger(__name__)

MessageStatus = Literal["stored", "duplicate", "malformed", "empty", "error"]


@dataclass(frozen=True)
class IngestRequest:
    """Inputs for running the mailbox ingest workflow."""

    maildir_path: Path | None = None
    data_dir: Path | None = None
    config_path: str | None = None


@dataclass(frozen=True)
class MessageOutcome:
    key: str
    subject: str
    status: MessageStatus
    purchase_id: int | None = None
    items_written: int = 0
    error: str | None = None


@dataclass(frozen=True)
class IngestResult:
    """Outcome from the mailbox ingest workflow."""

    outcomes: list[MessageOutcome] = field(default_factory=list)

    def _count(self, *statuses: MessageStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status in statuses)

    @property
    def processed(self) -> int:
        return self._count("stored")

    @property
    def duplicates(self) -> int:
        return self._count("duplicate")

    @property
    def failed(self) -> int:
        return self._count("malformed", "error")

    @property
    def skipped(self) -> int:
        return self._count("empty")


def _process_message(
    message: ReceiptMessage,
    mailbox: ReceiptMailbox,
    tables: ReceiptTables,
    store_name: str,
) -> MessageOutcome:
    logger.info("Processing email: %s from %s", message.subject, message.date.isoformat())

    if message.decode_error:
        logger.error("Skipping %r: %s", message.subject, message.decode_error)
        mailbox.add_error_label(message.key)
        return MessageOutcome(key=message.key, subject=message.subject, status="error", error=message.decode_error)

    try:
        extraction = extract_receipt_data(message.html_body)
    except MalformedDocument as exc:
        logger.warning("Skipping %r: %s", message.subject, exc)
        mailbox.add_error_label(message.key)
        return MessageOutcome(key=message.key, subject=message.subject, status="malformed", error=str(exc))

    if not extraction.line_items and not extraction.store_address:
        # Left unread so it can be looked at after a parser fix
        logger.warning("No receipt data extracted from %r", message.subject)
        return MessageOutcome(key=message.key, subject=message.subject, status="empty")

    result = tables.load_receipt(
        extraction,
        store_name=store_name,
        purchase_date=message.date,
        message_id=message.message_id,
    )
    mailbox.mark_read(message.key)
    logger.info("Successfully processed email %s", message.subject)
    return MessageOutcome(
        key=message.key,
        subject=message.subject,
        status="duplicate" if result.duplicate else "stored",
        purchase_id=result.purchase_id,
        items_written=result.items_written,
    )


def run_mailbox_ingest(request: IngestRequest) -> IngestResult:
    """Process every unread receipt email; one bad email never stops the batch."""
    paths = get_paths()
    sources = load_mail_sources(request.config_path)
    mailbox = ReceiptMailbox(request.maildir_path or paths.maildir, senders=sources.senders)
    tables = ReceiptTables(request.data_dir or paths.data)

    messages = mailbox.search_unread()
    logger.info("Found %d receipt emails to process", len(messages))

    outcomes: list[MessageOutcome] = []
    for message in messages:
        try:
            outcomes.append(_process_message(message, mailbox, tables, sources.store_name))
        except Exception as exc:
            logger.exception("Error processing message %r", message.subject)
            mailbox.add_error_label(message.key)
            outcomes.append(
                MessageOutcome(key=message.key, subject=message.subject, status="error", error=str(exc))
            )

    logger.info("Email processing completed")
    return IngestResult(outcomes=outcomes)
