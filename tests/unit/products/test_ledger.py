"""Unit tests for InventoryLedger."""

from __future__ import annotations

from unittest.mock import ANY, MagicMock, patch
from uuid import uuid4

import pytest
from django.db.models import QuerySet

from modules.products.exceptions import (
    InsufficientStock,
    InvalidStockQuantity,
    ProductNotFound,
)
from modules.products.ledger import InventoryLedger
from modules.products.models import Product
from modules.products.repositories import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def ledger():
    return InventoryLedger(ProductDjangoRepository())


class TestReserve:
    def test_decrements_and_returns_new_quantity(self, ledger, product):
        assert ledger.reserve(product.id, 3) == 2
        product.refresh_from_db()
        assert product.stock_quantity == 2

    def test_exact_stock_can_be_reserved(self, ledger, product):
        assert ledger.reserve(product.id, 5) == 0

    def test_insufficient_stock_leaves_quantity_untouched(self, ledger, product):
        with pytest.raises(InsufficientStock) as exc_info:
            ledger.reserve(product.id, 6)

        assert exc_info.value.requested == 6
        assert exc_info.value.available == 5
        product.refresh_from_db()
        assert product.stock_quantity == 5

    def test_unknown_product(self, ledger):
        with pytest.raises(ProductNotFound):
            ledger.reserve(uuid4(), 1)

    def test_inactive_product_can_still_be_reserved(self, ledger, product):
        Product.objects.filter(id=product.id).update(is_active=False)
        assert ledger.reserve(product.id, 1) == 4

    @pytest.mark.parametrize("quantity", [0, -2, True, 1.5])
    def test_quantity_must_be_positive_integer(self, ledger, product, quantity):
        with pytest.raises(InvalidStockQuantity):
            ledger.reserve(product.id, quantity)


class TestRelease:
    def test_increments_and_returns_new_quantity(self, ledger, product):
        assert ledger.release(product.id, 4) == 9
        product.refresh_from_db()
        assert product.stock_quantity == 9

    def test_unknown_product(self, ledger):
        with pytest.raises(ProductNotFound):
            ledger.release(uuid4(), 1)

    def test_quantity_must_be_positive(self, ledger, product):
        with pytest.raises(InvalidStockQuantity):
            ledger.release(product.id, 0)


class TestLocking:
    """The check-and-decrement must run against a row-locked read."""

    def test_reserve_uses_locked_read(self):
        repo = MagicMock()
        repo.get_for_update.return_value = MagicMock(
            id=uuid4(), stock_quantity=5, has_sufficient_stock=lambda q: q <= 5
        )
        product_id = uuid4()

        InventoryLedger(repo).reserve(product_id, 2)

        repo.get_for_update.assert_called_once_with(product_id)
        repo.get_by_id.assert_not_called()
        repo.update_stock.assert_called_once()

    def test_release_uses_locked_read(self):
        repo = MagicMock()
        repo.get_for_update.return_value = MagicMock(id=uuid4(), stock_quantity=0)
        product_id = uuid4()

        assert InventoryLedger(repo).release(product_id, 2) == 2

        repo.get_for_update.assert_called_once_with(product_id)
        repo.get_by_id.assert_not_called()

    def test_repository_locks_with_select_for_update(self, product):
        real = QuerySet.select_for_update
        with patch.object(
            QuerySet, "select_for_update", autospec=True, side_effect=real
        ) as locking:
            locked = ProductDjangoRepository().get_for_update(product.id)

        assert locked == product
        locking.assert_called_once_with(ANY, of=("self",))
        assert locking.call_args.args[0].model is Product
