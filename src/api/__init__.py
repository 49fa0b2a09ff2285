"""FastAPI application setup."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.controller import AdminRequiredError, product_router
from src.catalog import LifecycleTransitionError
from src.config import AppConfig, get_config
from src.services import ProductNotFoundError, ProductService

logger = logging.getLogger(__name__)


def _format_validation_errors(exc: RequestValidationError) -> list:
    errors = []
    for error in exc.errors():
        # Drop the "body"/"query" prefix from the location
        location = [str(part) for part in error.get("loc", ())[1:]]
        errors.append({"field": ".".join(location), "message": error.get("msg", "")})
    return errors


def _register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to HTTP responses."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _format_validation_errors(exc)
        logger.warning(f"Validation failed for {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Validation failed", "errors": errors},
        )

    @app.exception_handler(ProductNotFoundError)
    async def not_found_handler(request: Request, exc: ProductNotFoundError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": str(exc)})

    @app.exception_handler(AdminRequiredError)
    async def admin_required_handler(request: Request, exc: AdminRequiredError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"message": str(exc)})

    @app.exception_handler(LifecycleTransitionError)
    async def lifecycle_error_handler(request: Request, exc: LifecycleTransitionError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"message": str(exc)})


def create_app(
    config: Optional[AppConfig] = None,
    product_service: Optional[ProductService] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Application configuration. Loaded from config.yaml if omitted.
        product_service: Catalog service. Built from the database config if omitted.
    """
    config = config or get_config()
    logging.basicConfig(level=config.logging.level)

    owns_service = product_service is None
    service = product_service or ProductService(config.database.path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Injected services are closed by whoever created them
        if owns_service:
            service.close()
            logger.info("Product service closed")

    app = FastAPI(
        title=config.api.title,
        description="Product catalog with availability filtering and title search",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.product_service = service

    _register_exception_handlers(app)
    app.include_router(product_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    logger.info(f"Catalog API created with database {config.database.path}")
    return app
