"""API controllers."""

from src.api.controller.product_controller import AdminRequiredError
from src.api.controller.product_controller import router as product_router

__all__ = ["AdminRequiredError", "product_router"]
