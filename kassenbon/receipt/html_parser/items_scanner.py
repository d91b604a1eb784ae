"""Line-item reconstruction from the filtered basket table lines.

Each item in the basket table is rendered as up to three rows (description,
right-aligned total price, indented details) and items are separated by a row
holding a horizontal rule. The scanner walks the lines with a small state
machine: a divider always starts a fresh item, and each field is only looked
for once the previous one has been found.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum

from kassenbon.domain.receipt import LineItem

from .common import (
    DESCRIPTION_PATTERN,
    DETAILS_PATTERN,
    PRICE_PATTERN,
    ROW_DIVIDER_PATTERN,
    filter_item_lines,
    parse_price,
)


class ScanPhase(Enum):
    AWAIT_DIVIDER = "await_divider"
    SEARCH_DESCRIPTION = "search_description"
    SEARCH_PRICE = "search_price"
    SEARCH_DETAILS = "search_details"


@dataclass(frozen=True)
class ScannerState:
    phase: ScanPhase
    current: LineItem = LineItem()


def initial_state() -> ScannerState:
    # The start of the basket block counts as a divider.
    return ScannerState(phase=ScanPhase.SEARCH_DESCRIPTION)


def step(state: ScannerState, line: str) -> tuple[ScannerState, LineItem | None]:
    """
    Advance the scanner by one filtered line.

    Returns:
        Tuple of (next_state, emitted_item). emitted_item is only set when a
        divider closes an item that has at least one field.
    """
    if ROW_DIVIDER_PATTERN.search(line):
        emitted = state.current if state.current.has_data else None
        return ScannerState(phase=ScanPhase.SEARCH_DESCRIPTION), emitted

    if state.phase is ScanPhase.SEARCH_DESCRIPTION:
        match = DESCRIPTION_PATTERN.search(line)
        if match:
            current = replace(state.current, description=match.group(1).strip())
            return ScannerState(phase=ScanPhase.SEARCH_PRICE, current=current), None

    elif state.phase is ScanPhase.SEARCH_PRICE:
        match = PRICE_PATTERN.search(line)
        if match:
            current = replace(state.current, total_price=parse_price(match.group(1)))
            return ScannerState(phase=ScanPhase.SEARCH_DETAILS, current=current), None

    elif state.phase is ScanPhase.SEARCH_DETAILS:
        match = DETAILS_PATTERN.search(line)
        if match:
            current = replace(state.current, details=match.group(1).strip())
            return ScannerState(phase=ScanPhase.AWAIT_DIVIDER, current=current), None

    # Stray rows are tolerated
    return state, None


def scan_line_items(lines: Iterable[str]) -> list[LineItem]:
    """Run the scanner over filtered lines and collect the items in input order."""
    items: list[LineItem] = []
    state = initial_state()
    for line in lines:
        state, emitted = step(state, line)
        if emitted is not None:
            items.append(emitted)

    # The last item is not followed by a divider
    if state.current.has_data:
        items.append(state.current)
    return items


def extract_line_items(line_items_raw: str) -> list[LineItem]:
    """Extract line items from the raw basket block."""
    return scan_line_items(filter_item_lines(line_items_raw))
