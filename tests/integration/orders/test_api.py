"""HTTP tests for the order endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


@pytest.fixture()
def order(place_order):
    return place_order(quantity=2)


def _detail(order_id, suffix=""):
    return f"{URL}{order_id}/{suffix}"


class TestPlaceOrderEndpoint:
    def test_created(self, staff_client, branch, product):
        response = staff_client.post(
            URL,
            {"branch_id": str(branch.id), "product_id": str(product.id), "quantity": 2},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["quantity"] == 2
        assert data["version"] == 1
        assert data["branch"]["code"] == "CTR"
        assert data["product"]["stock_quantity"] == 3
        assert data["product"]["category_name"] == "Coffee"
        assert set(data) >= {"id", "product_id", "branch_id", "user_id", "created_at", "updated_at"}

    def test_insufficient_stock_is_conflict(self, staff_client, branch, product):
        response = staff_client.post(
            URL,
            {"branch_id": str(branch.id), "product_id": str(product.id), "quantity": 6},
            format="json",
        )

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "insufficient_stock"

    def test_unknown_product_is_not_found(self, staff_client, branch):
        response = staff_client.post(
            URL,
            {"branch_id": str(branch.id), "product_id": str(uuid4()), "quantity": 1},
            format="json",
        )
        assert response.status_code == 404

    def test_invalid_quantity_is_bad_request(self, staff_client, branch, product):
        response = staff_client.post(
            URL,
            {"branch_id": str(branch.id), "product_id": str(product.id), "quantity": 0},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "quantity"

    def test_anonymous_is_unauthorized(self, api_client, branch, product):
        response = api_client.post(
            URL,
            {"branch_id": str(branch.id), "product_id": str(product.id), "quantity": 1},
            format="json",
        )
        assert response.status_code == 401


class TestListEndpoints:
    def test_admin_lists_all_with_filters(self, admin_api_client, order, staff_user):
        response = admin_api_client.get(
            URL, {"status": "PENDING", "user": staff_user.pk, "size": 5}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_items"] == 1
        assert data["page_size"] == 5
        assert data["content"][0]["id"] == str(order.id)

    def test_non_admin_cannot_list_all(self, staff_client):
        assert staff_client.get(URL).status_code == 403

    def test_unknown_sort_field_is_bad_request(self, admin_api_client):
        response = admin_api_client.get(URL, {"sort_by": "password"})
        assert response.status_code == 400

    def test_mine(self, staff_client, other_client, order):
        mine = staff_client.get(f"{URL}mine/").json()
        theirs = other_client.get(f"{URL}mine/").json()

        assert [o["id"] for o in mine["content"]] == [str(order.id)]
        assert theirs["content"] == []
        assert theirs["total_items"] == 0


class TestRetrieveEndpoint:
    def test_owner_and_admin_can_read(self, staff_client, admin_api_client, order):
        assert staff_client.get(_detail(order.id)).status_code == 200
        assert admin_api_client.get(_detail(order.id)).status_code == 200

    def test_other_user_is_forbidden(self, other_client, order):
        response = other_client.get(_detail(order.id))
        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "not_order_owner"

    def test_unknown_order(self, staff_client):
        assert staff_client.get(_detail(uuid4())).status_code == 404


class TestStatusEndpoint:
    def test_admin_approves(self, admin_api_client, order):
        response = admin_api_client.patch(
            _detail(order.id, "status/"), {"status": "approved"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"
        assert response.json()["version"] == 2

    def test_put_is_accepted(self, admin_api_client, order, product):
        response = admin_api_client.put(
            _detail(order.id, "status/"), {"status": "REJECTED"}, format="json"
        )

        assert response.status_code == 200
        product.refresh_from_db()
        assert product.stock_quantity == 5

    def test_illegal_transition_is_bad_request(self, admin_api_client, order):
        response = admin_api_client.patch(
            _detail(order.id, "status/"), {"status": "DELIVERED"}, format="json"
        )

        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["code"] == "invalid_status_transition"
        assert "APPROVED" in error["detail"]

    def test_staff_cannot_update_status(self, staff_client, order):
        response = staff_client.patch(
            _detail(order.id, "status/"), {"status": "APPROVED"}, format="json"
        )
        assert response.status_code == 403


class TestOwnerEndpoints:
    def test_cancel(self, staff_client, order, product):
        response = staff_client.post(_detail(order.id, "cancel/"))

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        product.refresh_from_db()
        assert product.stock_quantity == 5

    def test_cancel_foreign_order_is_forbidden(self, other_client, order):
        assert other_client.post(_detail(order.id, "cancel/")).status_code == 403

    def test_receive(self, staff_client, order, order_service):
        order_service.update_order_status(order.id, OrderStatus.APPROVED)
        order_service.update_order_status(order.id, OrderStatus.SHIPPED)

        response = staff_client.post(_detail(order.id, "receive/"))

        assert response.status_code == 200
        assert response.json()["status"] == "DELIVERED"


class TestDeleteEndpoint:
    def test_admin_deletes(self, admin_api_client, order):
        response = admin_api_client.delete(_detail(order.id))
        assert response.status_code == 204
        assert not Order.objects.filter(id=order.id).exists()

    def test_staff_cannot_delete(self, staff_client, order):
        assert staff_client.delete(_detail(order.id)).status_code == 403
        assert Order.objects.filter(id=order.id).exists()
