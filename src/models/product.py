"""Product data model and viewer roles."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Lifecycle(str, Enum):
    """Lifecycle state of a catalog record.

    Soft-deleted records stay in storage and can be restored.
    """

    ACTIVE = "active"
    DELETED = "deleted"


class Viewer(str, Enum):
    """Role under which the catalog is listed."""

    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Product:
    """Product data model representing a catalog record."""

    id: str
    title: str
    price: float
    stock_quantity: Optional[int]
    category: str
    brand: str
    description: str = ""
    discount_percentage: float = 0.0
    thumbnail: str = ""
    images: List[str] = field(default_factory=list)
    lifecycle: Lifecycle = Lifecycle.ACTIVE

    @property
    def is_deleted(self) -> bool:
        return self.lifecycle is Lifecycle.DELETED
