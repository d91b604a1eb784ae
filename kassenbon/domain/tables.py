"""Row models for the stores / purchases / price-log tables."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

STORE_COLUMNS = ("store_id", "name", "address")
PURCHASE_COLUMNS = ("purchase_id", "message_id", "purchase_date", "total_price", "store_id")
PRICE_LOG_COLUMNS = (
    "description",
    "details",
    "quantity",
    "unit",
    "unit_price",
    "currency",
    "total_price",
    "purchase_id",
)

DEFAULT_CURRENCY = "EUR"

STORES_FILE = "stores.csv"
PURCHASES_FILE = "purchases.csv"
PRICE_LOG_FILE = "price_log.csv"


@dataclass(frozen=True)
class StoreRow:
    store_id: int
    name: str
    address: str


@dataclass(frozen=True)
class PurchaseRow:
    purchase_id: int
    message_id: str
    purchase_date: datetime
    total_price: Decimal
    store_id: int


@dataclass(frozen=True)
class PriceLogRow:
    """One price observation; quantity/unit/unit price are not present in the emails."""

    description: str | None
    details: str | None
    total_price: Decimal | None
    purchase_id: int
    quantity: Decimal | None = None
    unit: str | None = None
    unit_price: Decimal | None = None
    currency: str = DEFAULT_CURRENCY
