"""Order DRF serializers for API input.

The serializers validate request payloads and query strings at the
Interface layer.  Responses are rendered from the service's Pydantic
output DTOs, so there are no output serializers here.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from modules.orders.constants import SORT_DIRECTIONS, SORTABLE_FIELDS, OrderStatus


class PlaceOrderSerializer(serializers.Serializer):
    branch_id = serializers.UUIDField()
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class UpdateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, default="", allow_blank=True)

    def to_internal_value(self, data):
        if isinstance(data.get("status"), str):
            data = {**data, "status": data["status"].upper()}
        return super().to_internal_value(data)


class OrderPageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, default=0, min_value=0)
    size = serializers.IntegerField(required=False)
    sort_by = serializers.ChoiceField(
        choices=SORTABLE_FIELDS, required=False, default="created_at"
    )
    direction = serializers.ChoiceField(
        choices=SORT_DIRECTIONS, required=False, default="desc"
    )

    def validate_size(self, value: int) -> int:
        return max(1, min(value, settings.ORDERS_MAX_PAGE_SIZE))


class OrderListQuerySerializer(OrderPageQuerySerializer):
    """Query string of the admin listing."""

    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    user = serializers.IntegerField(required=False, min_value=1)
    branch = serializers.UUIDField(required=False)
    product = serializers.UUIDField(required=False)


class MyOrdersQuerySerializer(OrderPageQuerySerializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
