"""Request and response schemas for the product API.

Field rules:
- title: non-empty, at most 100 characters
- price: greater than 0
- stockQuantity: integer >= 0
- category / brand: required identifiers
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.models.product import Lifecycle, Product

TITLE_MAX_LENGTH = 100


class _CamelModel(BaseModel):
    """Base schema accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductCreate(_CamelModel):
    """Payload for creating a product."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    price: float = Field(..., gt=0)
    stock_quantity: int = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    brand: str = Field(..., min_length=1)
    description: str = ""
    discount_percentage: float = Field(default=0.0, ge=0, le=100)
    thumbnail: str = ""
    images: List[str] = Field(default_factory=list)

    @field_validator("title", "category", "brand")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ProductUpdate(_CamelModel):
    """Partial update payload. Only fields present in the request are applied."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    price: Optional[float] = Field(default=None, gt=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1)
    brand: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    thumbnail: Optional[str] = None
    images: Optional[List[str]] = None

    @field_validator("title", "category", "brand")
    @classmethod
    def _not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "ProductUpdate":
        null_fields = sorted(
            name for name in self.model_fields_set if getattr(self, name) is None
        )
        if null_fields:
            raise ValueError(f"fields cannot be null: {', '.join(null_fields)}")
        return self

    def changes(self) -> dict:
        """Fields explicitly set in the request, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class ProductResponse(_CamelModel):
    """Product as serialized in HTTP responses."""

    id: str
    title: str
    description: str
    price: float
    discount_percentage: float
    stock_quantity: Optional[int]
    category: str
    brand: str
    thumbnail: str
    images: List[str]
    is_deleted: bool
    status: Lifecycle

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            title=product.title,
            description=product.description,
            price=product.price,
            discount_percentage=product.discount_percentage,
            stock_quantity=product.stock_quantity,
            category=product.category,
            brand=product.brand,
            thumbnail=product.thumbnail,
            images=list(product.images),
            is_deleted=product.is_deleted,
            status=product.lifecycle,
        )
