"""HTTP controller for catalog products."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Request, status

from src.models import ProductCreate, ProductResponse, ProductUpdate, Viewer
from src.models.product_schema import TITLE_MAX_LENGTH
from src.services import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def get_product_service(request: Request) -> ProductService:
    """Resolve the ProductService attached to the application."""
    return request.app.state.product_service


class AdminRequiredError(Exception):
    """Raised when a non-admin viewer attempts to change the catalog."""

    def __init__(self):
        super().__init__("Admin access required to change products")


def _viewer(user: bool) -> Viewer:
    return Viewer.USER if user else Viewer.ADMIN


def require_admin(user: bool = Query(default=False)) -> None:
    """Reject mutating requests made as a standard user."""
    if _viewer(user) is not Viewer.ADMIN:
        raise AdminRequiredError()


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Create a new product."""
    return ProductResponse.from_product(service.create_product(payload))


@router.get("", response_model=List[ProductResponse])
def list_products(
    search: str = Query(default="", max_length=TITLE_MAX_LENGTH),
    user: bool = Query(default=False),
    service: ProductService = Depends(get_product_service),
) -> List[ProductResponse]:
    """
    List products.

    Admins (default) see every product, including soft-deleted and out of
    stock ones. With ``user=true`` only available products are returned.
    ``search`` narrows the result to titles containing the text, ignoring case.
    """
    products = service.list_products(viewer=_viewer(user), query=search)
    return [ProductResponse.from_product(p) for p in products]


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    user: bool = Query(default=False),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Get a single product."""
    return ProductResponse.from_product(service.get_product(product_id, viewer=_viewer(user)))


@router.patch(
    "/undelete/{product_id}",
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
def undelete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Restore a soft-deleted product."""
    return ProductResponse.from_product(service.restore_product(product_id))


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Partially update a product."""
    return ProductResponse.from_product(service.update_product(product_id, payload))


@router.delete(
    "/{product_id}",
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Soft delete a product. The record can be restored via undelete."""
    return ProductResponse.from_product(service.delete_product(product_id))
