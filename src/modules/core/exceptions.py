"""Shared exception taxonomy.

``DomainError`` subclasses describe business-rule outcomes and are passed
through to callers unchanged.  Each module derives its own exceptions from
one of the categories below; the API layer maps categories, never concrete
module exceptions, to HTTP responses.

``ProcessingFailure`` is the generic error a service raises when anything
other than a business rule fails underneath it (storage errors included);
the original exception is kept as ``__cause__`` for diagnostics.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Type, TypeVar

import structlog
from django.db import DatabaseError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class DomainError(Exception):
    """Base class for business-rule violations."""


class InvalidRequest(DomainError):
    """Malformed or missing input. Always a caller bug, never retried."""


class NotFound(DomainError):
    """A referenced entity does not exist."""


class AuthenticationRequired(DomainError):
    """No acting user could be resolved for the operation."""


class AccessDenied(DomainError):
    """The acting user is not allowed to act on the entity."""


class BusinessRuleViolation(DomainError):
    """The request is well-formed but cannot be honoured right now."""


class ConcurrencyConflict(DomainError):
    """Another transaction modified the entity first. Safe to retry."""


class ProcessingFailure(Exception):
    """An unexpected failure prevented the operation from completing."""


def storage_guard(failure_cls: Type[ProcessingFailure], event: str) -> Callable[[F], F]:
    """Wrap unexpected errors raised by the decorated call into ``failure_cls``.

    Must sit *outside* ``transaction.atomic`` so failures raised while
    committing are translated too.  Domain errors are never touched.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except (DomainError, ProcessingFailure):
                raise
            except DatabaseError as exc:
                logger.exception(event, operation=func.__qualname__, error=str(exc))
                raise failure_cls(
                    f"{func.__name__} failed due to a storage error."
                ) from exc
            except Exception as exc:
                logger.exception(
                    event,
                    operation=func.__qualname__,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                raise failure_cls(f"{func.__name__} failed unexpectedly.") from exc

        return wrapper  # type: ignore[return-value]

    return decorator
