"""Catalog rules: availability filtering, title search and lifecycle transitions."""

from src.catalog.availability import filter_products, is_available, search, visible_to
from src.catalog.lifecycle import (
    LifecycleTransitionError,
    apply_changes,
    restore,
    soft_delete,
)

__all__ = [
    "LifecycleTransitionError",
    "apply_changes",
    "filter_products",
    "is_available",
    "restore",
    "search",
    "soft_delete",
    "visible_to",
]
