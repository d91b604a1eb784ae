"""Parse Netto receipt email bodies into structured receipt data."""

from decimal import Decimal
from typing import Any

from kassenbon.domain.receipt import DEFAULT_MARKERS, LineItem, ReceiptExtraction, SegmentMarkers

from .html_parser import extract_line_items, extract_store_address, segment_by_markers


def extract_receipt_data(email_body: str, markers: SegmentMarkers = DEFAULT_MARKERS) -> ReceiptExtraction:
    """
    Extract the store address and line items from a receipt email body.

    Fields whose pattern never matched are left as None; only a missing
    anchor marker is an error.

    Args:
        email_body: HTML content of the receipt email
        markers: Anchor markers delimiting the address and basket blocks

    Returns:
        ReceiptExtraction with the store address and ordered line items

    Raises:
        MalformedDocument: If an anchor marker is missing from the body.
    """
    segments = segment_by_markers(email_body, markers)
    return ReceiptExtraction(
        store_address=extract_store_address(segments.store_address_raw),
        line_items=extract_line_items(segments.line_items_raw),
    )


def _format_price(price: Decimal | None) -> str | None:
    if price is None:
        return None
    return f"{price:.2f}"


def line_item_to_dict(item: LineItem) -> dict[str, Any]:
    return {
        "description": item.description,
        "totalPrice": _format_price(item.total_price),
        "details": item.details,
    }


def extraction_to_dict(extraction: ReceiptExtraction) -> dict[str, Any]:
    """Serialize an extraction to JSON-friendly data (prices as 2-decimal strings)."""
    return {
        "storeAddress": extraction.store_address,
        "lineItems": [line_item_to_dict(item) for item in extraction.line_items],
        "total": _format_price(extraction.total),
    }
