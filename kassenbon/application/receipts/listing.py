"""Table listing workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from kassenbon.domain.tables import PurchaseRow, StoreRow
from kassenbon.runtime.receipt_storage import ReceiptTables


@dataclass(frozen=True)
class StoreListing:
    """Store rows for CLI display."""

    stores: list[StoreRow]


@dataclass(frozen=True)
class PurchaseListing:
    """Purchase rows with their price-log item counts."""

    purchases: list[tuple[PurchaseRow, int]]


def run_list_stores(data_dir: Path | None = None) -> StoreListing:
    return StoreListing(stores=ReceiptTables(data_dir).list_stores())


def run_list_purchases(data_dir: Path | None = None) -> PurchaseListing:
    tables = ReceiptTables(data_dir)
    counts: dict[int, int] = {}
    for entry in tables.list_price_log():
        counts[entry.purchase_id] = counts.get(entry.purchase_id, 0) + 1
    return PurchaseListing(
        purchases=[(purchase, counts.get(purchase.purchase_id, 0)) for purchase in tables.list_purchases()]
    )
