"""Runtime loader for receipt mail sources (senders and store name)."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from kassenbon.runtime.paths import get_paths

DEFAULT_SENDERS = (
    "nicht.antworten@reply.netto-online.de",
    "noreply@netto-app.de",
)
DEFAULT_STORE_NAME = "Netto Marken-Discount"


@dataclass(frozen=True)
class MailSources:
    """Which emails are receipts, and which store they belong to."""

    senders: tuple[str, ...] = DEFAULT_SENDERS
    store_name: str = DEFAULT_STORE_NAME


@lru_cache(maxsize=4)
def load_mail_sources(config_path: str | None = None) -> MailSources:
    """
    Load receipt mail sources from mail_sources.toml.

    Expected layout:

        store_name = "Netto Marken-Discount"
        senders = ["noreply@netto-app.de"]

    Args:
        config_path: Optional TOML path override. If None, uses default project path.

    Returns:
        MailSources from the file, or the built-in defaults if the file is missing.
    """
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    path = Path(config_path) if config_path is not None else get_paths().mail_sources
    if not path.exists():
        return MailSources()

    with open(path, "rb") as f:
        config = tomllib.load(f)

    senders = tuple(sender.strip().lower() for sender in config.get("senders", []) if sender.strip())
    return MailSources(
        senders=senders or DEFAULT_SENDERS,
        store_name=config.get("store_name", DEFAULT_STORE_NAME),
    )
