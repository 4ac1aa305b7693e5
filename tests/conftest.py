import pytest
from rest_framework.test import APIClient

from modules.accounts.models import Role, User
from modules.branches.models import Branch
from modules.orders.views import build_order_service
from modules.products.models import Category, Product


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def branch():
    return Branch.objects.create(code="ctr", name="Central Kitchen", address="1 Market St")


@pytest.fixture()
def other_branch():
    return Branch.objects.create(code="nth", name="North Cafe", address="48 Harbour Rd")


@pytest.fixture()
def category():
    return Category.objects.create(name="Coffee")


@pytest.fixture()
def product(category):
    return Product.objects.create(name="Espresso Beans 1kg", stock_quantity=5, category=category)


@pytest.fixture()
def other_product(category):
    return Product.objects.create(name="Decaf Beans 1kg", stock_quantity=50, category=category)


@pytest.fixture()
def staff_user(branch):
    return User.objects.create_user("staff", password="Staff@123", role=Role.STAFF, branch=branch)


@pytest.fixture()
def other_user(other_branch):
    return User.objects.create_user(
        "manager", password="Manager@123", role=Role.MANAGER, branch=other_branch
    )


@pytest.fixture()
def admin_user_account():
    return User.objects.create_user("boss", password="Admin@123", role=Role.ADMIN)


@pytest.fixture()
def order_service():
    return build_order_service()


@pytest.fixture()
def place_order(order_service, staff_user, branch, product):
    """Factory placing an order; defaults to staff_user buying ``product``."""

    def _place(quantity=1, actor=None, product_id=None, branch_id=None):
        return order_service.place_order(
            actor or staff_user,
            branch_id or branch.id,
            product_id or product.id,
            quantity,
        )

    return _place


@pytest.fixture()
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture()
def other_client(other_user):
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


@pytest.fixture()
def admin_api_client(admin_user_account):
    client = APIClient()
    client.force_authenticate(user=admin_user_account)
    return client
