"""Lifecycle transitions for product records.

Each function returns a new Product and leaves its argument untouched.
"""

from dataclasses import fields, replace

from src.models.product import Lifecycle, Product

_PROTECTED_FIELDS = frozenset({"id", "lifecycle"})
_PRODUCT_FIELDS = frozenset(f.name for f in fields(Product))


class LifecycleTransitionError(Exception):
    """Raised when a product cannot move to the requested lifecycle state."""

    def __init__(self, product_id: str, current: Lifecycle, target: Lifecycle):
        self.product_id = product_id
        self.current = current
        self.target = target
        super().__init__(
            f"Product {product_id} is already {current.value}; cannot move to {target.value}"
        )


def apply_changes(product: Product, changes: dict) -> Product:
    """Return a copy of the product with the given fields replaced.

    Raises:
        ValueError: If a change targets an unknown field, the id or the lifecycle.
    """
    unknown = set(changes) - _PRODUCT_FIELDS
    if unknown:
        raise ValueError(f"Unknown product fields: {', '.join(sorted(unknown))}")

    protected = set(changes) & _PROTECTED_FIELDS
    if protected:
        raise ValueError(f"Fields cannot be changed directly: {', '.join(sorted(protected))}")

    if not changes:
        return product
    return replace(product, **changes)


def soft_delete(product: Product) -> Product:
    """Move an active product to the deleted state."""
    if product.lifecycle is not Lifecycle.ACTIVE:
        raise LifecycleTransitionError(product.id, product.lifecycle, Lifecycle.DELETED)
    return replace(product, lifecycle=Lifecycle.DELETED)


def restore(product: Product) -> Product:
    """Move a soft-deleted product back to the active state."""
    if product.lifecycle is not Lifecycle.DELETED:
        raise LifecycleTransitionError(product.id, product.lifecycle, Lifecycle.ACTIVE)
    return replace(product, lifecycle=Lifecycle.ACTIVE)
