"""Composable HTML receipt email parser components."""

from .address_parser import extract_store_address
from .common import MalformedDocument, filter_item_lines, parse_price
from .items_scanner import (
    ScannerState,
    ScanPhase,
    extract_line_items,
    initial_state,
    scan_line_items,
    step,
)
from .segmenter import segment_by_markers

__all__ = [
    "MalformedDocument",
    "ScanPhase",
    "ScannerState",
    "extract_line_items",
    "extract_store_address",
    "filter_item_lines",
    "initial_state",
    "parse_price",
    "scan_line_items",
    "segment_by_markers",
    "step",
]
