"""Format extracted receipt data for review on the terminal."""

from kassenbon.domain.receipt import LineItem, ReceiptExtraction


def _format_item_line(index: int, item: LineItem, description_width: int) -> str:
    description = item.description or "(no description)"
    price = f"{item.total_price:.2f}" if item.total_price is not None else "?"
    line = f"  {index:>2}. {description.ljust(description_width)}  {price:>8} EUR"
    if item.details:
        line += f"\n      {item.details}"
    return line


def format_extraction(extraction: ReceiptExtraction, store_name: str | None = None) -> str:
    """
    Format a receipt extraction as a human-readable block.

    Args:
        extraction: The parsed receipt data
        store_name: Optional store name printed above the address

    Returns:
        Multi-line string with address, numbered items and the item total
    """
    lines = ["=" * 60]
    if store_name:
        lines.append(f"Store: {store_name}")
    lines.append(f"Address: {extraction.store_address or 'UNKNOWN'}")
    lines.append(f"Items ({len(extraction.line_items)}):")

    if extraction.line_items:
        description_width = max(len(item.description or "(no description)") for item in extraction.line_items)
        for i, item in enumerate(extraction.line_items, 1):
            lines.append(_format_item_line(i, item, description_width))

    missing_prices = sum(1 for item in extraction.line_items if item.total_price is None)
    lines.append(f"Total: {extraction.total:.2f} EUR")
    if missing_prices:
        lines.append(f"Warning: {missing_prices} item(s) without a parsed price")
    lines.append("=" * 60)
    return "\n".join(lines)
