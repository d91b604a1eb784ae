"""Shared pytest fixtures for kassenbon tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from kassenbon.runtime import reset_paths

ItemSpec = tuple[str | None, str | None, str | None]

DIVIDER_ROW = '            <tr><td colspan="2"><hr /></td></tr>'


def _item_rows(description: str | None, price: str | None, details: str | None) -> list[str]:
    rows: list[str] = []
    if description is not None:
        rows += ["            <tr>", f'              <td style="font-size:12px;">{description}</td>', "            </tr>"]
    if price is not None:
        rows += ["            <tr>", f'              <td style="text-align:right;">{price}&nbsp;</td>', "            </tr>"]
    if details is not None:
        rows += [
            "            <tr>",
            f'              <td style="font-size:10px;">&nbsp;&nbsp;&nbsp;&nbsp;{details}</td>',
            "            </tr>",
        ]
    return rows


def build_basket(items: Sequence[ItemSpec]) -> str:
    """Render basket table rows with a divider between consecutive items."""
    rows = ["          <table>"]
    for i, (description, price, details) in enumerate(items):
        if i > 0:
            rows.append(DIVIDER_ROW)
        rows += _item_rows(description, price, details)
    rows.append("          </table>")
    return "\n".join(rows)


def build_email(
    items: Sequence[ItemSpec],
    store_name: str = "Netto City-Filiale",
    street: str = "Hauptstr. 123, 12345 Berlin",
) -> str:
    """Render a Netto-style receipt email body."""
    return "\n".join(
        [
            "<html>",
            "  <body>",
            "    Filiale:",
            f"    <br>{store_name}",
            f"    <br>{street}",
            "    <!-- WARENKORB -->",
            build_basket(items),
            "    <!-- SUMME -->",
            "    <table>",
            "      <tr>",
            "        <td>Gesamtbetrag:</td>",
            "        <td>3,78&nbsp;€</td>",
            "      </tr>",
            "    </table>",
            "    <!-- ZAHLUNGEN -->",
            "  </body>",
            "</html>",
        ]
    )


@pytest.fixture
def basket_builder() -> Callable[[Sequence[ItemSpec]], str]:
    return build_basket


@pytest.fixture
def email_builder() -> Callable[..., str]:
    return build_email


@pytest.fixture
def netto_email() -> str:
    """Two-item receipt: Milch 3.5% and Brot."""
    return build_email(
        [
            ("Milch 3.5%", "1,29", "1 Liter"),
            ("Brot", "2,49", "500g"),
        ]
    )


@pytest.fixture
def kassenbon_home(tmp_path, monkeypatch):
    """Point project paths at a temporary root."""
    monkeypatch.setenv("KASSENBON_HOME", str(tmp_path))
    reset_paths()
    yield tmp_path
    reset_paths()
