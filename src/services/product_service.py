"""Product catalog service backed by SQLite.

Handles:
- Creating and updating product records
- Soft deletion and restore (undelete)
- Listing products for a viewer, with optional title search
"""

import json
import logging
import threading
import uuid
from typing import List, Optional

from ..catalog import apply_changes, filter_products, restore, soft_delete, visible_to
from ..clients import SqliteClient
from ..models import Lifecycle, Product, ProductCreate, ProductUpdate, Viewer

logger = logging.getLogger(__name__)

# SQL statements
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS products (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    price REAL NOT NULL,
    discount_percentage REAL NOT NULL,
    stock_quantity INTEGER NOT NULL,
    category TEXT NOT NULL,
    brand TEXT NOT NULL,
    thumbnail TEXT NOT NULL,
    images TEXT NOT NULL,
    lifecycle TEXT NOT NULL
)
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_products_lifecycle ON products(lifecycle)
"""

SELECT_COLUMNS = """id, title, description, price, discount_percentage, stock_quantity,
                    category, brand, thumbnail, images, lifecycle"""


class ProductNotFoundError(Exception):
    """Raised when a product does not exist or is hidden from the viewer."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


def _row_to_product(row: tuple) -> Product:
    return Product(
        id=row[0],
        title=row[1],
        description=row[2],
        price=row[3],
        discount_percentage=row[4],
        stock_quantity=row[5],
        category=row[6],
        brand=row[7],
        thumbnail=row[8],
        images=json.loads(row[9]),
        lifecycle=Lifecycle(row[10]),
    )


class ProductService:
    """Service for managing catalog products."""

    def __init__(self, db_path: str = "products.db"):
        """Initialize the product service.

        Args:
            db_path: Path to the SQLite database file.
        """
        self._sqlite_client = SqliteClient(db_path)
        # Guards load + transition + save sequences
        self._write_lock = threading.Lock()
        self._ensure_table_exists()

    def _ensure_table_exists(self) -> None:
        """Create the products table if it doesn't exist."""
        self._sqlite_client.execute_query(CREATE_TABLE_SQL)
        self._sqlite_client.execute_query(CREATE_INDEX_SQL)
        logger.debug("Products table initialized")

    def _load(self, product_id: str) -> Product:
        result = self._sqlite_client.execute_query(
            f"SELECT {SELECT_COLUMNS} FROM products WHERE id = ?",
            (product_id,),
        )
        if not result:
            raise ProductNotFoundError(product_id)
        return _row_to_product(result[0])

    def _save(self, product: Product) -> None:
        self._sqlite_client.execute_query(
            """UPDATE products
               SET title = ?, description = ?, price = ?, discount_percentage = ?,
                   stock_quantity = ?, category = ?, brand = ?, thumbnail = ?,
                   images = ?, lifecycle = ?
               WHERE id = ?""",
            (
                product.title,
                product.description,
                product.price,
                product.discount_percentage,
                product.stock_quantity,
                product.category,
                product.brand,
                product.thumbnail,
                json.dumps(product.images),
                product.lifecycle.value,
                product.id,
            ),
        )

    def create_product(self, data: ProductCreate) -> Product:
        """Store a new active product.

        Args:
            data: Validated product payload.

        Returns:
            The stored Product with its assigned id.
        """
        product = Product(id=uuid.uuid4().hex, lifecycle=Lifecycle.ACTIVE, **data.model_dump())

        self._sqlite_client.execute_query(
            f"INSERT INTO products ({SELECT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                product.id,
                product.title,
                product.description,
                product.price,
                product.discount_percentage,
                product.stock_quantity,
                product.category,
                product.brand,
                product.thumbnail,
                json.dumps(product.images),
                product.lifecycle.value,
            ),
        )

        logger.info(f"Created product {product.id}: {product.title!r}")
        return product

    def get_product(self, product_id: str, viewer: Viewer = Viewer.ADMIN) -> Product:
        """Get a product by id, as seen by the viewer.

        Raises:
            ProductNotFoundError: If the product does not exist or the viewer
                is not allowed to see it.
        """
        product = self._load(product_id)
        if not visible_to([product], viewer):
            raise ProductNotFoundError(product_id)
        return product

    def update_product(self, product_id: str, changes: ProductUpdate) -> Product:
        """Apply a partial update to a product.

        Args:
            product_id: Id of the product to update.
            changes: Validated partial payload; unset fields are left as is.

        Returns:
            The updated Product.
        """
        with self._write_lock:
            updated = apply_changes(self._load(product_id), changes.changes())
            self._save(updated)

        logger.info(f"Updated product {product_id}: {sorted(changes.changes())}")
        return updated

    def delete_product(self, product_id: str) -> Product:
        """Soft delete a product. The record stays in storage."""
        with self._write_lock:
            deleted = soft_delete(self._load(product_id))
            self._save(deleted)

        logger.info(f"Soft deleted product {product_id}")
        return deleted

    def restore_product(self, product_id: str) -> Product:
        """Restore a soft-deleted product."""
        with self._write_lock:
            restored = restore(self._load(product_id))
            self._save(restored)

        logger.info(f"Restored product {product_id}")
        return restored

    def list_products(
        self,
        viewer: Viewer = Viewer.ADMIN,
        query: Optional[str] = "",
    ) -> List[Product]:
        """List products visible to the viewer, optionally filtered by title.

        Args:
            viewer: Role the listing is evaluated for.
            query: Case-insensitive title substring; empty returns everything visible.

        Returns:
            Products in insertion order.
        """
        rows = self._sqlite_client.execute_query(
            f"SELECT {SELECT_COLUMNS} FROM products ORDER BY rowid"
        )
        products = filter_products([_row_to_product(row) for row in rows], viewer, query)

        logger.debug(
            f"Listed {len(products)} of {len(rows)} products for {viewer.value} (query={query!r})"
        )
        return products

    def close(self) -> None:
        """Close the database connection."""
        self._sqlite_client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        self.close()
        return False
