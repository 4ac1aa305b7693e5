"""Unit tests for the shared exception taxonomy and its HTTP translation."""

from __future__ import annotations

import pytest
from django.db import DatabaseError, OperationalError
from rest_framework import exceptions

from modules.accounts.exceptions import UnauthenticatedUser
from modules.core.exception_handler import (
    Conflict,
    DomainExceptionHandler,
    ProcessingFailed,
    _code,
)
from modules.core.exceptions import ProcessingFailure, storage_guard
from modules.orders.exceptions import (
    ConcurrentOrderUpdate,
    InvalidOrderRequest,
    InvalidStatusTransition,
    NotOrderOwner,
    OrderNotFound,
    OrderProcessingError,
)
from modules.products.exceptions import InsufficientStock

pytestmark = pytest.mark.unit


class TestStorageGuard:
    def test_wraps_database_errors(self):
        @storage_guard(OrderProcessingError, "test.failed")
        def explode():
            raise OperationalError("connection lost")

        with pytest.raises(OrderProcessingError, match="explode failed") as exc_info:
            explode()
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert isinstance(exc_info.value, ProcessingFailure)

    def test_domain_errors_pass_through(self):
        @storage_guard(OrderProcessingError, "test.failed")
        def refuse():
            raise OrderNotFound("gone")

        with pytest.raises(OrderNotFound):
            refuse()

    def test_wraps_unexpected_errors(self):
        @storage_guard(OrderProcessingError, "test.failed")
        def crash():
            raise TypeError("bad collaborator")

        with pytest.raises(OrderProcessingError, match="crash failed") as exc_info:
            crash()
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_already_wrapped_failures_are_not_rewrapped(self):
        original = OrderProcessingError("inner")

        @storage_guard(OrderProcessingError, "test.failed")
        def nested():
            raise original

        with pytest.raises(OrderProcessingError) as exc_info:
            nested()
        assert exc_info.value is original

    def test_return_value_preserved(self):
        @storage_guard(OrderProcessingError, "test.failed")
        def ok(value):
            return value * 2

        assert ok(21) == 42

    def test_subclasses_of_database_error_are_caught(self):
        assert issubclass(OperationalError, DatabaseError)


class TestDomainExceptionHandler:
    @pytest.mark.parametrize(
        ("exc", "expected", "status_code"),
        [
            (InvalidOrderRequest("bad"), exceptions.ValidationError, 400),
            (InvalidStatusTransition("PENDING", "SHIPPED", ["APPROVED"]), exceptions.ValidationError, 400),
            (UnauthenticatedUser("who?"), exceptions.NotAuthenticated, 401),
            (NotOrderOwner("not yours"), exceptions.PermissionDenied, 403),
            (OrderNotFound("gone"), exceptions.NotFound, 404),
            (InsufficientStock("p", 3, 1), Conflict, 409),
            (ConcurrentOrderUpdate("raced"), Conflict, 409),
            (OrderProcessingError("db"), ProcessingFailed, 500),
        ],
    )
    def test_categories_map_to_http(self, exc, expected, status_code):
        handler = DomainExceptionHandler(exc, {})
        converted = handler.convert_known_exceptions(exc)
        assert isinstance(converted, expected)
        assert converted.status_code == status_code

    def test_processing_failure_hides_internal_message(self):
        exc = OrderProcessingError("place_order failed due to a storage error.")
        converted = DomainExceptionHandler(exc, {}).convert_known_exceptions(exc)
        assert "storage" not in str(converted.detail)

    def test_code_is_snake_case_class_name(self):
        assert _code(InsufficientStock("p", 1, 0)) == "insufficient_stock"
        assert _code(NotOrderOwner()) == "not_order_owner"
