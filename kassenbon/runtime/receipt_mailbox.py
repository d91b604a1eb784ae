"""Local Maildir access for receipt emails.

Receipt emails are expected to be delivered (e.g. by fetchmail or an IMAP
sync tool) into a Maildir. Read state and the ``processing-error`` label are
kept as standard Maildir flags:

    S (seen)     - receipt processed and stored
    F (flagged)  - processing-error, needs a human look
"""

from __future__ import annotations

import email
import email.policy
import mailbox
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parseaddr, parsedate_to_datetime
from pathlib import Path

from kassenbon.runtime import get_logger

logger = get_logger(__name__)

SEEN_FLAG = "S"
ERROR_FLAG = "F"


@dataclass(frozen=True)
class ReceiptMessage:
    """A receipt email ready for parsing.

    ``decode_error`` is set (and ``html_body`` empty) when the HTML part could
    not be decoded with its declared charset.
    """

    key: str
    subject: str
    sender: str
    date: datetime
    message_id: str
    html_body: str
    decode_error: str | None = None


def _message_date(raw_date: str | None) -> datetime:
    if raw_date:
        try:
            return parsedate_to_datetime(raw_date)
        except (TypeError, ValueError):
            logger.warning("Unparseable Date header: %r", raw_date)
    return datetime.fromtimestamp(0, tz=timezone.utc)


def _html_body(message: email.message.EmailMessage) -> str:
    part = message.get_body(preferencelist=("html",))
    if part is None:
        return ""
    return part.get_content()


class ReceiptMailbox:
    """Receipt emails from configured senders inside a Maildir."""

    def __init__(self, maildir_path: Path, senders: tuple[str, ...]) -> None:
        self.maildir_path = maildir_path
        self.senders = tuple(sender.lower() for sender in senders)
        self._maildir = mailbox.Maildir(maildir_path, factory=None, create=True)

    def _is_receipt(self, msg: mailbox.MaildirMessage) -> bool:
        sender = parseaddr(msg.get("From", ""))[1].lower()
        return sender in self.senders

    def search_unread(self) -> list[ReceiptMessage]:
        """Return unread, unflagged receipt emails, oldest first."""
        results: list[ReceiptMessage] = []
        for key, msg in self._maildir.iteritems():
            flags = msg.get_flags()
            if SEEN_FLAG in flags or ERROR_FLAG in flags:
                continue
            if not self._is_receipt(msg):
                continue

            parsed = email.message_from_bytes(msg.as_bytes(), policy=email.policy.default)
            subject = str(parsed.get("Subject", ""))
            decode_error = None
            try:
                html_body = _html_body(parsed)
            except (LookupError, UnicodeDecodeError) as exc:
                logger.warning("Cannot decode HTML body of %r: %s", subject, exc)
                html_body = ""
                decode_error = f"undecodable HTML body: {exc}"

            results.append(
                ReceiptMessage(
                    key=key,
                    subject=subject,
                    sender=parseaddr(str(parsed.get("From", "")))[1].lower(),
                    date=_message_date(parsed.get("Date")),
                    message_id=str(parsed.get("Message-ID", "")).strip(),
                    html_body=html_body,
                    decode_error=decode_error,
                )
            )

        results.sort(key=lambda m: m.date.timestamp())
        logger.debug("Found %d unread receipt emails in %s", len(results), self.maildir_path)
        return results

    def _add_flag(self, key: str, flag: str) -> None:
        msg = self._maildir[key]
        msg.add_flag(flag)
        msg.set_subdir("cur")
        self._maildir[key] = msg

    def mark_read(self, key: str) -> None:
        self._add_flag(key, SEEN_FLAG)

    def add_error_label(self, key: str) -> None:
        """Label a message as processing-error so it is skipped by later runs."""
        self._add_flag(key, ERROR_FLAG)
        logger.info("Labelled message %s as processing-error", key)

    def is_read(self, key: str) -> bool:
        return SEEN_FLAG in self._maildir[key].get_flags()

    def has_error_label(self, key: str) -> bool:
        return ERROR_FLAG in self._maildir[key].get_flags()
