"""Data models module."""

from src.models.product import Lifecycle, Product, Viewer
from src.models.product_schema import ProductCreate, ProductResponse, ProductUpdate

__all__ = [
    "Lifecycle",
    "Product",
    "ProductCreate",
    "ProductResponse",
    "ProductUpdate",
    "Viewer",
]
