"""Shared constants and helpers for HTML receipt email parsing."""

import re
from decimal import Decimal

# Structural rows that carry no field data
NOISE_LINES = frozenset({"", "<tr>", "</tr>", "<td>&nbsp;</td>", "<td></td>"})

# Field patterns for the Netto basket table. Matched with search(), not anchored.
DESCRIPTION_PATTERN = re.compile(r'<td style="font-size:.+>(.+?)</td>')
PRICE_PATTERN = re.compile(r'<td style="text-align:right;.+>(\d+,\d\d)&nbsp;</td>')
DETAILS_PATTERN = re.compile(r'<td style="font-size:.+>&nbsp;&nbsp;&nbsp;&nbsp;(.*?)</td>')
# Row divider, e.g. <tr><td colspan="2"><hr /></td></tr>
ROW_DIVIDER_PATTERN = re.compile(r"<hr .*/></td>")


class MalformedDocument(ValueError):
    """Raised when a required anchor marker is missing from an email body."""

    def __init__(self, marker: str) -> None:
        super().__init__(f"Anchor marker not found: {marker!r}")
        self.marker = marker


def filter_item_lines(line_items_raw: str) -> list[str]:
    """Split the basket block into lines and drop structural noise."""
    return [line for line in line_items_raw.split("\n") if line.strip() not in NOISE_LINES]


def parse_price(price_text: str) -> Decimal:
    """Parse a decimal-comma amount like "1,29" into Decimal("1.29")."""
    return Decimal(price_text.strip().replace(",", ".", 1))
