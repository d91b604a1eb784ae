"""Tabular storage of extracted receipts.

Three CSV tables (with a header row each) live in the data directory:

    data/
    ├── stores.csv     - store_id, name, address
    ├── purchases.csv  - purchase_id, message_id, purchase_date, total_price, store_id
    └── price_log.csv  - one row per line item, keyed by purchase_id

Stores are deduplicated by name + address, purchases by store + date + total.
Ids are assigned here as max(existing id) + 1.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from kassenbon.domain.receipt import ReceiptExtraction
from kassenbon.domain.tables import (
    PRICE_LOG_COLUMNS,
    PRICE_LOG_FILE,
    PURCHASE_COLUMNS,
    PURCHASES_FILE,
    STORE_COLUMNS,
    STORES_FILE,
    PriceLogRow,
    PurchaseRow,
    StoreRow,
)
from kassenbon.runtime import get_logger, get_paths

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoadResult:
    """Outcome of loading one receipt into the tables."""

    store_id: int
    purchase_id: int
    items_written: int
    duplicate: bool = False


def _parse_decimal(value: str) -> Decimal | None:
    if not value:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        logger.warning("Ignoring malformed amount in table: %r", value)
        return None


def _format_decimal(value: Decimal | None) -> str:
    return "" if value is None else f"{value:.2f}"


class ReceiptTables:
    """CSV-backed stores / purchases / price-log tables."""

    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir = data_dir if data_dir is not None else get_paths().data
        self.stores_path = self.data_dir / STORES_FILE
        self.purchases_path = self.data_dir / PURCHASES_FILE
        self.price_log_path = self.data_dir / PRICE_LOG_FILE

    # --- low-level table access ---
    def _read_rows(self, path: Path) -> list[dict[str, str]]:
        if not path.exists():
            return []
        with open(path, newline="", encoding="utf-8") as f:
            return list(csv.DictReader(f))

    def _append_rows(self, path: Path, columns: tuple[str, ...], rows: list[dict[str, str]]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        write_header = not path.exists() or path.stat().st_size == 0
        with open(path, "a", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=columns)
            if write_header:
                writer.writeheader()
            writer.writerows(rows)

    @staticmethod
    def _next_id(rows: list[dict[str, str]], column: str) -> int:
        ids = [int(row[column]) for row in rows if row.get(column, "").isdigit()]
        return max(ids, default=0) + 1

    # --- typed reads ---
    def list_stores(self) -> list[StoreRow]:
        return [
            StoreRow(store_id=int(row["store_id"]), name=row["name"], address=row["address"])
            for row in self._read_rows(self.stores_path)
        ]

    def list_purchases(self) -> list[PurchaseRow]:
        purchases: list[PurchaseRow] = []
        for row in self._read_rows(self.purchases_path):
            purchases.append(
                PurchaseRow(
                    purchase_id=int(row["purchase_id"]),
                    message_id=row["message_id"],
                    purchase_date=datetime.fromisoformat(row["purchase_date"]),
                    total_price=_parse_decimal(row["total_price"]) or Decimal("0.00"),
                    store_id=int(row["store_id"]),
                )
            )
        return purchases

    def list_price_log(self, purchase_id: int | None = None) -> list[PriceLogRow]:
        entries: list[PriceLogRow] = []
        for row in self._read_rows(self.price_log_path):
            entry = PriceLogRow(
                description=row["description"] or None,
                details=row["details"] or None,
                total_price=_parse_decimal(row["total_price"]),
                purchase_id=int(row["purchase_id"]),
                quantity=_parse_decimal(row["quantity"]),
                unit=row["unit"] or None,
                unit_price=_parse_decimal(row["unit_price"]),
                currency=row["currency"],
            )
            if purchase_id is None or entry.purchase_id == purchase_id:
                entries.append(entry)
        return entries

    # --- dedup + insert ---
    def find_store_id(self, name: str, address: str) -> int | None:
        for store in self.list_stores():
            if store.name == name and store.address == address:
                return store.store_id
        return None

    def get_store_id(self, name: str, address: str) -> int:
        """Return the id of the store with this name and address, creating it if needed."""
        store_id = self.find_store_id(name, address)
        if store_id is not None:
            logger.debug("Found existing store %s for %r", store_id, address)
            return store_id

        store_id = self._next_id(self._read_rows(self.stores_path), "store_id")
        self._append_rows(
            self.stores_path,
            STORE_COLUMNS,
            [{"store_id": str(store_id), "name": name, "address": address}],
        )
        logger.info("Created store %s: %s, %s", store_id, name, address)
        return store_id

    def find_purchase_id(self, store_id: int, purchase_date: datetime, total_price: Decimal) -> int | None:
        for purchase in self.list_purchases():
            if (
                purchase.store_id == store_id
                and purchase.purchase_date == purchase_date
                and purchase.total_price == total_price
            ):
                return purchase.purchase_id
        return None

    def get_purchase_id(
        self,
        store_id: int,
        purchase_date: datetime,
        total_price: Decimal,
        message_id: str = "",
    ) -> int:
        """Return the id of the matching purchase, creating it if needed."""
        purchase_id = self.find_purchase_id(store_id, purchase_date, total_price)
        if purchase_id is not None:
            return purchase_id

        purchase_id = self._next_id(self._read_rows(self.purchases_path), "purchase_id")
        self._append_rows(
            self.purchases_path,
            PURCHASE_COLUMNS,
            [
                {
                    "purchase_id": str(purchase_id),
                    "message_id": message_id,
                    "purchase_date": purchase_date.isoformat(),
                    "total_price": _format_decimal(total_price),
                    "store_id": str(store_id),
                }
            ],
        )
        logger.info("Created purchase %s for store %s on %s", purchase_id, store_id, purchase_date.isoformat())
        return purchase_id

    def append_line_items(self, purchase_id: int, extraction: ReceiptExtraction) -> int:
        """Append one price-log row per line item. Returns the number of rows written."""
        rows = [
            PriceLogRow(
                description=item.description,
                details=item.details,
                total_price=item.total_price,
                purchase_id=purchase_id,
            )
            for item in extraction.line_items
        ]
        self._append_rows(
            self.price_log_path,
            PRICE_LOG_COLUMNS,
            [
                {
                    "description": row.description or "",
                    "details": row.details or "",
                    "quantity": _format_decimal(row.quantity),
                    "unit": row.unit or "",
                    "unit_price": _format_decimal(row.unit_price),
                    "currency": row.currency,
                    "total_price": _format_decimal(row.total_price),
                    "purchase_id": str(row.purchase_id),
                }
                for row in rows
            ],
        )
        logger.info("Loaded %d items for purchase %s", len(rows), purchase_id)
        return len(rows)

    def load_receipt(
        self,
        extraction: ReceiptExtraction,
        store_name: str,
        purchase_date: datetime,
        message_id: str = "",
    ) -> LoadResult:
        """
        Load one extracted receipt: store -> purchase -> price log.

        A purchase that already exists is reported as a duplicate and its
        line items are not written a second time.
        """
        store_id = self.get_store_id(store_name, extraction.store_address or "")
        total = extraction.total

        existing_id = self.find_purchase_id(store_id, purchase_date, total)
        if existing_id is not None:
            logger.info("Purchase %s already recorded, skipping line items", existing_id)
            return LoadResult(store_id=store_id, purchase_id=existing_id, items_written=0, duplicate=True)

        purchase_id = self.get_purchase_id(store_id, purchase_date, total, message_id=message_id)
        items_written = self.append_line_items(purchase_id, extraction)
        return LoadResult(store_id=store_id, purchase_id=purchase_id, items_written=items_written)
