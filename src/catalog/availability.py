"""Availability filter and title search over product records.

Users only see products that are in stock and not soft-deleted; admins see
everything. Search is a case-insensitive substring match on the title and is
always applied after visibility, so it can never bring back a hidden record.
"""

from typing import Iterable, List, Optional

from src.models.product import Lifecycle, Product, Viewer


def is_available(product: Product) -> bool:
    """Return True if the product can be shown to a standard user."""
    # Missing stock counts as out of stock
    stock = product.stock_quantity
    return stock is not None and stock > 0 and product.lifecycle is Lifecycle.ACTIVE


def visible_to(records: Iterable[Product], viewer: Viewer) -> List[Product]:
    """Return the records the viewer is allowed to see, in input order.

    Args:
        records: Product records in display order.
        viewer: Role the listing is evaluated for.

    Returns:
        All records for admins, only available records for users.
    """
    if viewer is Viewer.ADMIN:
        return list(records)
    return [product for product in records if is_available(product)]


def search(records: Iterable[Product], query: Optional[str]) -> List[Product]:
    """Return records whose title contains the query, ignoring case.

    An empty or whitespace-only query returns the records unchanged. Input
    order is preserved.
    """
    if query is None or not query.strip():
        return list(records)

    needle = query.casefold()
    return [product for product in records if needle in product.title.casefold()]


def filter_products(
    records: Iterable[Product],
    viewer: Viewer,
    query: Optional[str] = "",
) -> List[Product]:
    """Apply visibility for the viewer, then title search."""
    return search(visible_to(records, viewer), query)
