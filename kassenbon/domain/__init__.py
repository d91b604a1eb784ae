"""Core domain models for the kassenbon project.

This module provides the core data models used throughout the project:
- ReceiptExtraction, LineItem: Receipt email extraction models
- RawSegments, SegmentMarkers: Anchor-based segmentation of an email body
- StoreRow, PurchaseRow, PriceLogRow: Tabular storage rows

Usage:
    from kassenbon.domain import ReceiptExtraction, LineItem
"""

from kassenbon.domain.receipt import (
    DEFAULT_MARKERS,
    LineItem,
    RawSegments,
    ReceiptExtraction,
    SegmentMarkers,
)
from kassenbon.domain.tables import PriceLogRow, PurchaseRow, StoreRow

__all__ = [
    "DEFAULT_MARKERS",
    "LineItem",
    "RawSegments",
    "ReceiptExtraction",
    "SegmentMarkers",
    "PriceLogRow",
    "PurchaseRow",
    "StoreRow",
]
