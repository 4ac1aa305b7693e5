"""Branch model.

Branches are referenced by users and orders.  The order core only reads
them; branch management lives outside this service.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Branch(BaseModel):
    """A physical store/cafe location. ``code`` is stored upper-case."""

    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=255)
    address = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "branches"
        ordering = ["code"]

    def save(self, *args, **kwargs) -> None:
        if self.code:
            self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"
