"""Offset pagination with zero-based page numbers.

Mirrors the paged payload exposed by the listing endpoints:
``content``, ``current_page``, ``total_items``, ``total_pages``,
``page_size``, ``has_next`` and ``has_previous``.  Counting and slicing are
delegated to Django's ``Paginator``, which numbers pages from 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, List, TypeVar

from django.core.paginator import EmptyPage, Paginator
from django.db import models

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int


@dataclass(frozen=True)
class Page(Generic[T]):
    content: List[T]
    page: int
    size: int
    total_items: int
    total_pages: int
    has_next: bool
    has_previous: bool


def paginate(queryset: "models.QuerySet[Any]", request: PageRequest) -> Page[Any]:
    """Fetch page *request.page* of *queryset*. Pages past the end come back empty."""
    paginator = Paginator(queryset, request.size, allow_empty_first_page=False)
    try:
        current = paginator.page(request.page + 1)
    except EmptyPage:
        return Page(
            content=[],
            page=request.page,
            size=request.size,
            total_items=paginator.count,
            total_pages=paginator.num_pages,
            has_next=False,
            has_previous=paginator.num_pages > 0,
        )
    return Page(
        content=list(current.object_list),
        page=request.page,
        size=request.size,
        total_items=paginator.count,
        total_pages=paginator.num_pages,
        has_next=current.has_next(),
        has_previous=current.has_previous(),
    )
