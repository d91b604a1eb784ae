"""Single receipt file parsing workflow."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from kassenbon.domain.receipt import ReceiptExtraction
from kassenbon.receipt.html_parser import MalformedDocument
from kassenbon.receipt.html_result_parser import extract_receipt_data

ParseStatus = Literal["ok", "file_not_found", "malformed"]


@dataclass(frozen=True)
class ReceiptParseRequest:
    """Inputs for parsing a saved receipt email body."""

    html_path: Path


@dataclass(frozen=True)
class ReceiptParseResult:
    status: ParseStatus
    extraction: ReceiptExtraction | None = None
    error: str | None = None


def run_receipt_parse(request: ReceiptParseRequest) -> ReceiptParseResult:
    """Read an HTML email body from disk and extract receipt data."""
    if not request.html_path.exists():
        return ReceiptParseResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.html_path}",
        )

    email_body = request.html_path.read_text(encoding="utf-8", errors="replace")
    try:
        extraction = extract_receipt_data(email_body)
    except MalformedDocument as exc:
        return ReceiptParseResult(status="malformed", error=str(exc))
    return ReceiptParseResult(status="ok", extraction=extraction)
