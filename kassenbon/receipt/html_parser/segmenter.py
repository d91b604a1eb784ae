"""Split a receipt email body into address and basket blocks."""

from kassenbon.domain.receipt import DEFAULT_MARKERS, RawSegments, SegmentMarkers

from .common import MalformedDocument


def segment_by_markers(email_body: str, markers: SegmentMarkers = DEFAULT_MARKERS) -> RawSegments:
    """
    Cut the store-and-purchase span out of an email body and split it in two.

    The span starts after the first ``markers.start`` and ends at the first
    ``markers.end`` after it. It is split at the first ``markers.middle``:
    the address block comes before it, the basket block after.

    Raises:
        MalformedDocument: If any of the three markers is missing.
    """
    _, found, remainder = email_body.partition(markers.start)
    if not found:
        raise MalformedDocument(markers.start)

    span, found, _ = remainder.partition(markers.end)
    if not found:
        raise MalformedDocument(markers.end)

    store_address_raw, found, line_items_raw = span.partition(markers.middle)
    if not found:
        raise MalformedDocument(markers.middle)

    return RawSegments(store_address_raw=store_address_raw, line_items_raw=line_items_raw)
