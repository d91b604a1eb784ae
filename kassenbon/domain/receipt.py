"""Data models for receipt email extraction."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class LineItem:
    """A single line item on a receipt."""

    description: str | None = None
    total_price: Decimal | None = None
    details: str | None = None  # e.g., "2 x 0,99" or "1 Liter"

    @property
    def has_data(self) -> bool:
        return self.description is not None or self.total_price is not None or self.details is not None


@dataclass(frozen=True)
class ReceiptExtraction:
    """Parsed receipt email data."""

    store_address: str | None
    line_items: list[LineItem] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        # Sum of the printed line totals. Items without a parsed price count as zero.
        total = Decimal("0.00")
        for item in self.line_items:
            if item.total_price is not None:
                total += item.total_price
        return total


@dataclass(frozen=True)
class RawSegments:
    """Raw substrings of an email body located between anchor markers."""

    store_address_raw: str
    line_items_raw: str


@dataclass(frozen=True)
class SegmentMarkers:
    """Literal anchors that delimit the address and basket blocks."""

    start: str = "Filiale:"
    middle: str = "<!-- WARENKORB -->"
    end: str = "<!-- SUMME -->"


DEFAULT_MARKERS = SegmentMarkers()
