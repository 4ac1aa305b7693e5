"""Translate domain exceptions into DRF exceptions.

Plugged into ``drf-standardized-errors`` so every error response shares the
``{"type": ..., "errors": [{"code", "detail", "attr"}]}`` shape.
"""

from __future__ import annotations

import structlog
from drf_standardized_errors.handler import ExceptionHandler
from rest_framework import exceptions, status

from modules.core.exceptions import (
    AccessDenied,
    AuthenticationRequired,
    BusinessRuleViolation,
    ConcurrencyConflict,
    InvalidRequest,
    NotFound,
    ProcessingFailure,
)

logger = structlog.get_logger(__name__)


class Conflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state of the resource."
    default_code = "conflict"


class ProcessingFailed(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "The request could not be processed."
    default_code = "processing_failed"


class DomainExceptionHandler(ExceptionHandler):
    def convert_known_exceptions(self, exc: Exception) -> Exception:
        if isinstance(exc, InvalidRequest):
            return exceptions.ValidationError(str(exc), code=_code(exc))
        if isinstance(exc, NotFound):
            return exceptions.NotFound(str(exc), code=_code(exc))
        if isinstance(exc, AuthenticationRequired):
            return exceptions.NotAuthenticated(str(exc), code=_code(exc))
        if isinstance(exc, AccessDenied):
            return exceptions.PermissionDenied(str(exc), code=_code(exc))
        if isinstance(exc, (BusinessRuleViolation, ConcurrencyConflict)):
            return Conflict(str(exc), code=_code(exc))
        if isinstance(exc, ProcessingFailure):
            logger.error("api.processing_failed", error=str(exc))
            return ProcessingFailed()
        return super().convert_known_exceptions(exc)


def _code(exc: Exception) -> str:
    """``InsufficientStock`` -> ``insufficient_stock``."""
    name = type(exc).__name__
    return "".join(
        f"_{char.lower()}" if char.isupper() and idx else char.lower()
        for idx, char in enumerate(name)
    )
