"""Integration tests for standardized error responses."""

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def _assert_standard_shape(data):
    assert "type" in data
    assert isinstance(data["errors"], list)
    assert data["errors"]
    assert {"code", "detail", "attr"} <= set(data["errors"][0])


class TestStandardizedErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get(f"{URL}mine/")
        assert response.status_code == 401
        _assert_standard_shape(response.json())

    def test_validation_error_has_standard_format(self, staff_client):
        response = staff_client.post(URL, data="{", content_type="application/json")
        assert response.status_code == 400
        _assert_standard_shape(response.json())

    def test_domain_error_has_standard_format(self, staff_client, place_order):
        order = place_order()
        staff_client.post(f"{URL}{order.id}/cancel/")

        response = staff_client.post(f"{URL}{order.id}/receive/")

        assert response.status_code == 400
        data = response.json()
        _assert_standard_shape(data)
        assert data["type"] == "validation_error"
        assert data["errors"][0]["code"] == "invalid_status_transition"
        assert "terminal" in data["errors"][0]["detail"]

    def test_conflict_has_standard_format(self, staff_client, branch, product):
        response = staff_client.post(
            URL,
            {"branch_id": str(branch.id), "product_id": str(product.id), "quantity": 99},
            format="json",
        )
        assert response.status_code == 409
        _assert_standard_shape(response.json())
        assert response.json()["type"] == "client_error"

    def test_deactivated_user_is_not_found(self, staff_client, staff_user):
        staff_user.is_active = False
        staff_user.save(update_fields=["is_active"])

        response = staff_client.get(f"{URL}mine/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "user_not_found"
