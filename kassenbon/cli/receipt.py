"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from kassenbon.runtime import get_logger

logger = get_logger(__name__)


def _optional_path(value: str | None) -> Path | None:
    return Path(value).expanduser() if value else None


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse a saved HTML email body and print the result."""
    from kassenbon.application.receipts.parse import ReceiptParseRequest, run_receipt_parse
    from kassenbon.receipt.formatter import format_extraction
    from kassenbon.receipt.html_result_parser import extraction_to_dict

    result = run_receipt_parse(ReceiptParseRequest(html_path=Path(args.file)))

    if result.status == "file_not_found":
        print(f"Error: {result.error}")
        sys.exit(1)

    if result.status == "malformed":
        logger.error("%s", result.error)
        print(f"Not a Netto receipt email: {result.error}")
        sys.exit(1)

    assert result.extraction is not None
    if args.json:
        print(json.dumps(extraction_to_dict(result.extraction), indent=2, ensure_ascii=False))
    else:
        print(format_extraction(result.extraction))


def cmd_ingest(args: argparse.Namespace) -> None:
    """Store all unread receipt emails and print a summary."""
    from kassenbon.application.receipts.ingest import IngestRequest, run_mailbox_ingest

    result = run_mailbox_ingest(
        IngestRequest(
            maildir_path=_optional_path(args.maildir),
            data_dir=_optional_path(args.data_dir),
            config_path=args.config,
        )
    )

    for outcome in result.outcomes:
        line = f"  [{outcome.status}] {outcome.subject}"
        if outcome.purchase_id is not None:
            line += f" -> purchase {outcome.purchase_id} ({outcome.items_written} items)"
        if outcome.error:
            line += f": {outcome.error}"
        print(line)

    print(
        f"Stored: {result.processed}, duplicates: {result.duplicates}, "
        f"failed: {result.failed}, skipped: {result.skipped}"
    )
    if result.failed:
        sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for parsing posted email bodies."""
    import uvicorn

    from kassenbon.runtime import receipt_server as server

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/parse | /ingest | /health")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)


def cmd_list_stores(args: argparse.Namespace) -> None:
    from kassenbon.application.receipts.listing import run_list_stores

    listing = run_list_stores(_optional_path(args.data_dir))
    if not listing.stores:
        print("No stores recorded.")
        return

    print(f"\nStores ({len(listing.stores)}):")
    for store in listing.stores:
        print(f"  {store.store_id:>4}  {store.name} - {store.address}")


def cmd_list_purchases(args: argparse.Namespace) -> None:
    from kassenbon.application.receipts.listing import run_list_purchases

    listing = run_list_purchases(_optional_path(args.data_dir))
    if not listing.purchases:
        print("No purchases recorded.")
        return

    print(f"\nPurchases ({len(listing.purchases)}):")
    for purchase, item_count in listing.purchases:
        print(
            f"  {purchase.purchase_id:>4}  {purchase.purchase_date.isoformat()}  "
            f"{purchase.total_price:>8.2f} EUR  store {purchase.store_id}  ({item_count} items)"
        )
