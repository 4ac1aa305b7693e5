"""Identity resolution.

Core operations receive the caller's principal as an explicit argument
and resolve it once per operation; nothing reads an ambient
"current user".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import structlog

from modules.accounts.exceptions import UnauthenticatedUser, UserNotFound
from modules.accounts.models import User

logger = structlog.get_logger(__name__)


class IIdentityResolver(ABC):
    @abstractmethod
    def resolve(self, principal: Any) -> User:
        """Return the ``User`` behind *principal*.

        Raises:
            UnauthenticatedUser: *principal* is missing or anonymous.
            UserNotFound: *principal* has no backing active user.
        """


class DjangoIdentityResolver(IIdentityResolver):
    """Resolves Django auth principals (``request.user``) to fresh rows."""

    def resolve(self, principal: Any) -> User:
        if principal is None or not getattr(principal, "is_authenticated", False):
            raise UnauthenticatedUser("User not authenticated.")

        user_id = getattr(principal, "pk", None)
        user = (
            User.objects.select_related("branch")
            .filter(pk=user_id, is_active=True)
            .first()
            if user_id is not None
            else None
        )
        if user is None:
            logger.warning("identity.user_not_found", principal=str(principal))
            raise UserNotFound(f"User {user_id} not found.")
        return user
