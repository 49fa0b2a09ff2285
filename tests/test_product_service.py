"""Tests for the SQLite-backed product service.

These tests verify:
- Product creation and retrieval
- Partial updates
- Soft delete and restore
- Listing with viewer visibility and title search
"""

import os
import tempfile
import threading
import time

import pytest

from src.catalog import LifecycleTransitionError
from src.models import Lifecycle, ProductCreate, ProductUpdate, Viewer
from src.services import ProductNotFoundError, ProductService


def make_payload(title="Test Product", stock=10, price=100.0) -> ProductCreate:
    """Build a valid create payload."""
    return ProductCreate(
        title=title,
        description="Test Description",
        price=price,
        stock_quantity=stock,
        category="test-category",
        brand="test-brand",
        thumbnail="test.jpg",
        images=["test1.jpg", "test2.jpg"],
    )


class TestProductService:
    """Test ProductService functionality."""

    @pytest.fixture
    def temp_db_path(self):
        """Create a temporary database file for testing."""
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        yield path
        # Cleanup
        if os.path.exists(path):
            os.remove(path)

    @pytest.fixture
    def service(self, temp_db_path):
        """Create a ProductService with temporary database."""
        service = ProductService(temp_db_path)
        yield service
        service.close()

    def test_create_product(self, service):
        """Test that creating a product assigns an id and the active state."""
        product = service.create_product(make_payload("iPhone 15 Pro", stock=50, price=1200.0))

        assert product.id
        assert product.title == "iPhone 15 Pro"
        assert product.price == 1200.0
        assert product.stock_quantity == 50
        assert product.lifecycle is Lifecycle.ACTIVE
        assert product.images == ["test1.jpg", "test2.jpg"]

        print(f"Created product: {product.id}")

    def test_create_assigns_unique_ids(self, service):
        """Test that each product gets its own id."""
        first = service.create_product(make_payload())
        second = service.create_product(make_payload())

        assert first.id != second.id

    def test_get_product_round_trips_all_fields(self, service):
        """Test that a stored product is read back unchanged."""
        created = service.create_product(make_payload("iPad Air"))

        assert service.get_product(created.id) == created

    def test_get_product_not_found(self, service):
        """Test retrieving a product that doesn't exist."""
        with pytest.raises(ProductNotFoundError) as exc_info:
            service.get_product("507f1f77bcf86cd799439999")

        assert exc_info.value.product_id == "507f1f77bcf86cd799439999"

    def test_get_hidden_product_as_user(self, service):
        """Test that users cannot fetch out of stock products by id."""
        product = service.create_product(make_payload(stock=0))

        assert service.get_product(product.id, viewer=Viewer.ADMIN).id == product.id
        with pytest.raises(ProductNotFoundError):
            service.get_product(product.id, viewer=Viewer.USER)

    def test_update_product(self, service):
        """Test a partial update keeps untouched fields."""
        product = service.create_product(make_payload("iPhone 15 Pro", price=1200.0))

        updated = service.update_product(
            product.id,
            ProductUpdate(title="iPhone 14 Pro Max", price=1400.0),
        )

        assert updated.title == "iPhone 14 Pro Max"
        assert updated.price == 1400.0
        assert updated.stock_quantity == product.stock_quantity
        assert service.get_product(product.id) == updated

    def test_update_boundaries(self, service):
        """Test minimum price and zero stock updates."""
        product = service.create_product(make_payload())

        updated = service.update_product(product.id, ProductUpdate(price=0.01, stock_quantity=0))

        assert updated.price == 0.01
        assert updated.stock_quantity == 0

    def test_update_not_found(self, service):
        """Test updating a product that doesn't exist."""
        with pytest.raises(ProductNotFoundError):
            service.update_product("undefined", ProductUpdate(title="x"))

    def test_delete_product_is_soft(self, service):
        """Test that deletion keeps the record with the deleted state."""
        product = service.create_product(make_payload())

        deleted = service.delete_product(product.id)

        assert deleted.id == product.id
        assert deleted.is_deleted is True
        assert service.get_product(product.id).lifecycle is Lifecycle.DELETED

        print(f"Soft deleted product: {deleted.id}")

    def test_delete_twice_conflicts(self, service):
        """Test that deleting a deleted product is rejected."""
        product = service.create_product(make_payload())
        service.delete_product(product.id)

        with pytest.raises(LifecycleTransitionError):
            service.delete_product(product.id)

    def test_delete_not_found(self, service):
        """Test deleting a product that doesn't exist."""
        with pytest.raises(ProductNotFoundError):
            service.delete_product("507f1f77bcf86cd799439999")

    def test_restore_product(self, service):
        """Test that a deleted product can be restored."""
        product = service.create_product(make_payload())
        service.delete_product(product.id)

        restored = service.restore_product(product.id)

        assert restored.lifecycle is Lifecycle.ACTIVE
        assert service.get_product(product.id, viewer=Viewer.USER).id == product.id

    def test_restore_active_product_conflicts(self, service):
        """Test that restoring an active product is rejected."""
        product = service.create_product(make_payload())

        with pytest.raises(LifecycleTransitionError):
            service.restore_product(product.id)

    def test_list_products_empty(self, service):
        """Test that an empty catalog lists as an empty list."""
        assert service.list_products() == []
        assert service.list_products(viewer=Viewer.USER) == []

    def test_list_products_by_viewer(self, service):
        """Test admin and user listings over a mixed catalog."""
        available = service.create_product(make_payload("iPhone 15 Pro", stock=10))
        out_of_stock = service.create_product(make_payload("Samsung Galaxy", stock=0))
        deleted = service.create_product(make_payload("Old Phone", stock=5))
        service.delete_product(deleted.id)

        admin_ids = [p.id for p in service.list_products(viewer=Viewer.ADMIN)]
        user_ids = [p.id for p in service.list_products(viewer=Viewer.USER)]

        assert admin_ids == [available.id, out_of_stock.id, deleted.id]
        assert user_ids == [available.id]

        print(f"Admin sees {len(admin_ids)} products, user sees {len(user_ids)}")

    def test_list_products_with_search(self, service):
        """Test that search runs over the viewer's visible products only."""
        service.create_product(make_payload("iPhone 15 Pro", stock=10))
        service.create_product(make_payload("Samsung Galaxy", stock=3))
        hidden = service.create_product(make_payload("Old Phone", stock=5))
        service.delete_product(hidden.id)

        user_results = service.list_products(viewer=Viewer.USER, query="PHONE")
        admin_results = service.list_products(viewer=Viewer.ADMIN, query="phone")

        assert [p.title for p in user_results] == ["iPhone 15 Pro"]
        assert [p.title for p in admin_results] == ["iPhone 15 Pro", "Old Phone"]

    def test_list_keeps_insertion_order_after_updates(self, service):
        """Test that updating a product does not move it in the listing."""
        first = service.create_product(make_payload("First"))
        service.create_product(make_payload("Second"))
        service.update_product(first.id, ProductUpdate(title="First (edited)"))

        titles = [p.title for p in service.list_products()]

        assert titles == ["First (edited)", "Second"]

    def test_data_persists_across_instances(self, temp_db_path):
        """Test that products survive reopening the database."""
        with ProductService(temp_db_path) as service:
            created = service.create_product(make_payload("Persistent"))

        with ProductService(temp_db_path) as service:
            assert service.get_product(created.id).title == "Persistent"


class TestConcurrentWrites:
    """Test that read-modify-write operations are atomic across threads."""

    @pytest.fixture
    def slow_service(self, tmp_path, monkeypatch):
        """ProductService whose reads pause, widening any race window."""
        service = ProductService(str(tmp_path / "products.db"))
        original_load = service._load

        def slow_load(product_id):
            product = original_load(product_id)
            time.sleep(0.2)
            return product

        monkeypatch.setattr(service, "_load", slow_load)
        yield service
        service.close()

    @staticmethod
    def _run_in_threads(*targets):
        threads = [threading.Thread(target=target) for target in targets]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    def test_concurrent_deletes_allow_only_one(self, slow_service):
        """Test that only one of two simultaneous deletes succeeds."""
        product = slow_service.create_product(make_payload())
        results = []

        def delete():
            try:
                slow_service.delete_product(product.id)
                results.append("deleted")
            except LifecycleTransitionError:
                results.append("conflict")

        self._run_in_threads(delete, delete)

        assert sorted(results) == ["conflict", "deleted"]
        print(f"Concurrent delete results: {results}")

    def test_concurrent_updates_keep_both_changes(self, slow_service):
        """Test that simultaneous partial updates do not overwrite each other."""
        product = slow_service.create_product(make_payload("Old title", price=100.0))

        self._run_in_threads(
            lambda: slow_service.update_product(product.id, ProductUpdate(title="New title")),
            lambda: slow_service.update_product(product.id, ProductUpdate(price=99.0)),
        )

        final = slow_service.get_product(product.id)
        assert final.title == "New title"
        assert final.price == 99.0
