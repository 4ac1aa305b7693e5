"""Branch domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class BranchNotFound(NotFound):
    """The branch referenced by the request does not exist."""
