"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ViewSet.  Domain
exceptions are not caught here: they propagate to
``DomainExceptionHandler``, which renders them as standardized error
responses.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import ViewSet

from modules.accounts.identity import DjangoIdentityResolver
from modules.accounts.permissions import IsAdminRole
from modules.branches.repositories import BranchDjangoRepository
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.serializers import (
    MyOrdersQuerySerializer,
    OrderListQuerySerializer,
    PlaceOrderSerializer,
    UpdateStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.ledger import InventoryLedger
from modules.products.repositories import ProductDjangoRepository

ADMIN_ACTIONS = {"list", "update_status", "destroy"}


def build_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        branch_repository=BranchDjangoRepository(),
        ledger=InventoryLedger(ProductDjangoRepository()),
        identity_resolver=DjangoIdentityResolver(),
    )


class OrderViewSet(ViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_permissions(self):
        if self.action in ADMIN_ACTIONS:
            return [IsAdminRole()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttling scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_placement"
        elif self.action in {"list", "mine", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.place_order(actor=request.user, **serializer.validated_data)
        return Response(order.model_dump(mode="json"), status=status.HTTP_201_CREATED)

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/ (admin)"""
        serializer = OrderListQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        params = dict(serializer.validated_data)
        filters = {
            "status": params.pop("status", None),
            "user_id": params.pop("user", None),
            "branch_id": params.pop("branch", None),
            "product_id": params.pop("product", None),
        }
        page = self._service.list_orders(filters, **params)
        return Response(page.model_dump(mode="json"))

    @action(detail=False, methods=["get"])
    def mine(self, request: Request) -> Response:
        """GET /api/v1/orders/mine/"""
        serializer = MyOrdersQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        page = self._service.list_my_orders(request.user, **serializer.validated_data)
        return Response(page.model_dump(mode="json"))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk, actor=request.user)
        return Response(order.model_dump(mode="json"))

    @action(detail=True, methods=["put", "patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT|PATCH /api/v1/orders/{pk}/status/ (admin)"""
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.update_order_status(
            pk,
            serializer.validated_data["status"],
            actor=request.user,
            notes=serializer.validated_data["notes"],
        )
        return Response(order.model_dump(mode="json"))

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/ (owner)"""
        order = self._service.cancel_own_order(request.user, pk)
        return Response(order.model_dump(mode="json"))

    @action(detail=True, methods=["post"])
    def receive(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/receive/ (owner)"""
        order = self._service.receive_own_order(request.user, pk)
        return Response(order.model_dump(mode="json"))

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/ (admin hard delete)"""
        self._service.delete_order(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
