"""Receipt workflows."""

from kassenbon.application.receipts.ingest import IngestRequest, IngestResult, run_mailbox_ingest
from kassenbon.application.receipts.listing import run_list_purchases, run_list_stores
from kassenbon.application.receipts.parse import ReceiptParseRequest, run_receipt_parse

__all__ = [
    "IngestRequest",
    "IngestResult",
    "run_mailbox_ingest",
    "ReceiptParseRequest",
    "run_receipt_parse",
    "run_list_stores",
    "run_list_purchases",
]
