"""Reservation and release roll back when a later step fails."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from django.db import DatabaseError

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import ConcurrentOrderUpdate, OrderProcessingError
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository

pytestmark = pytest.mark.integration


def test_failed_order_insert_rolls_back_reservation(place_order, product):
    with patch.object(
        OrderDjangoRepository, "create", side_effect=DatabaseError("insert failed")
    ):
        with pytest.raises(OrderProcessingError) as exc_info:
            place_order(quantity=3)

    assert isinstance(exc_info.value.__cause__, DatabaseError)
    product.refresh_from_db()
    assert product.stock_quantity == 5
    assert not Order.objects.exists()


def test_failed_outbox_write_rolls_back_everything(place_order, product):
    with patch.object(
        OrderDjangoRepository, "store_events", side_effect=DatabaseError("outbox down")
    ):
        with pytest.raises(OrderProcessingError):
            place_order(quantity=2)

    product.refresh_from_db()
    assert product.stock_quantity == 5
    assert not Order.objects.exists()
    assert not OutboxEvent.objects.exists()


def test_lost_version_race_rolls_back_release(place_order, order_service, product):
    order = place_order(quantity=3)
    # Another writer bumps the version between our read and our update.
    real_get = OrderDjangoRepository.get_by_id

    def stale_read(self, id):
        stale = real_get(self, id)
        Order.objects.filter(id=stale.id).update(version=stale.version + 1)
        return stale

    with patch.object(OrderDjangoRepository, "get_by_id", stale_read):
        with pytest.raises(ConcurrentOrderUpdate):
            order_service.update_order_status(order.id, OrderStatus.CANCELLED)

    product.refresh_from_db()
    assert product.stock_quantity == 2
    stored = Order.objects.get(id=order.id)
    assert stored.status == OrderStatus.PENDING


def test_unexpected_error_is_wrapped_and_rolled_back(place_order, product):
    with patch.object(
        OrderDjangoRepository, "add_history", side_effect=RuntimeError("boom")
    ):
        with pytest.raises(OrderProcessingError) as exc_info:
            place_order(quantity=3)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    product.refresh_from_db()
    assert product.stock_quantity == 5
    assert not Order.objects.exists()
