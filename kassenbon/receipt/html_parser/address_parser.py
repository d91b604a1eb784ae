"""Store address extraction from the raw address block."""


def extract_store_address(store_address_raw: str) -> str:
    """
    Build a display address from the raw block following "Filiale:".

    The first line is the remainder of the marker line and is always dropped.
    The next two lines (store name, street + city) are cleaned of ``<br>`` tags
    and joined with ", ". Returns "" when the block has no such lines.
    """
    address_lines = store_address_raw.split("\n")[1:3]
    return ", ".join(line.replace("<br>", "").strip() for line in address_lines)
