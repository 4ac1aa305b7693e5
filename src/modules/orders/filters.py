import django_filters

from modules.orders.constants import OrderStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(field_name="status", choices=OrderStatus.choices)
    user = django_filters.NumberFilter(field_name="user_id")
    branch = django_filters.UUIDFilter(field_name="branch_id")
    product = django_filters.UUIDFilter(field_name="product_id")

    class Meta:
        model = Order
        fields = ["status", "user", "branch", "product"]
