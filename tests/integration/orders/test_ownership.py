"""Integration tests for owner actions (cancel / receive own order)."""

from __future__ import annotations

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.exceptions import InvalidStatusTransition, NotOrderOwner
from modules.orders.models import Order

pytestmark = pytest.mark.integration


@pytest.fixture()
def order(place_order):
    return place_order(quantity=2)


def test_owner_cancels_pending_order(order_service, order, staff_user, product):
    view = order_service.cancel_own_order(staff_user, order.id)

    assert view.status == OrderStatus.CANCELLED
    product.refresh_from_db()
    assert product.stock_quantity == 5


def test_other_user_cannot_cancel(order_service, order, other_user, product):
    with pytest.raises(NotOrderOwner):
        order_service.cancel_own_order(other_user, order.id)

    assert Order.objects.get(id=order.id).status == OrderStatus.PENDING
    product.refresh_from_db()
    assert product.stock_quantity == 3


def test_admin_is_not_owner_either(order_service, order, admin_user_account):
    with pytest.raises(NotOrderOwner):
        order_service.cancel_own_order(admin_user_account, order.id)


def test_owner_receives_shipped_order(order_service, order, staff_user):
    order_service.update_order_status(order.id, OrderStatus.APPROVED)
    order_service.update_order_status(order.id, OrderStatus.SHIPPED)

    view = order_service.receive_own_order(staff_user, order.id)

    assert view.status == OrderStatus.DELIVERED


def test_owner_cannot_receive_unshipped_order(order_service, order, staff_user):
    with pytest.raises(InvalidStatusTransition):
        order_service.receive_own_order(staff_user, order.id)


def test_shipped_order_cannot_be_cancelled(order_service, order, staff_user, product):
    order_service.update_order_status(order.id, OrderStatus.APPROVED)
    order_service.update_order_status(order.id, OrderStatus.SHIPPED)

    with pytest.raises(InvalidStatusTransition):
        order_service.cancel_own_order(staff_user, order.id)

    product.refresh_from_db()
    assert product.stock_quantity == 3


def test_other_user_cannot_read_order(order_service, order, other_user, admin_user_account):
    with pytest.raises(NotOrderOwner):
        order_service.get_order(order.id, actor=other_user)

    assert order_service.get_order(order.id, actor=admin_user_account).id == order.id
    assert order_service.get_order(order.id).id == order.id
