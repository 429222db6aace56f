"""
Paginate stage: slice one page out of an ordered record sequence.
"""

from __future__ import annotations

import math
from typing import Any, Sequence, Tuple

from pydantic import BaseModel

from schooney.errors import InvalidPageError
from schooney.query.criteria import PageSpec


class Page(BaseModel):
    """
    One page of records plus the numbers needed for "Showing X-Y of Z".

    `start_index` and `end_index` are one-based and inclusive for display;
    both are 0 when the page is empty.
    """

    items: Tuple[Any, ...]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    start_index: int
    end_index: int

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def is_empty(self) -> bool:
        return not self.items

    def describe(self) -> str:
        return f"Showing {self.start_index}-{self.end_index} of {self.total_items}"


def total_pages(total_items: int, page_size: int) -> int:
    """ceil(total / size), never below one page so an empty set still renders."""
    if page_size <= 0:
        raise InvalidPageError(f"page_size must be > 0, got {page_size}")
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: int, pages: int) -> int:
    """Bring a page number back into [1, pages]."""
    return min(max(page, 1), max(pages, 1))


def paginate(records: Sequence[Any], spec: PageSpec) -> Page:
    """
    Slice `[(page-1)*size, page*size)` clipped to the sequence bounds.

    A page past the end yields an empty slice; the caller clamps the page
    when the underlying set shrinks.

    Raises
    ------
    InvalidPageError
        If `spec.page` < 1 or `spec.page_size` <= 0.
    """
    if spec.page < 1:
        raise InvalidPageError(f"page must be >= 1, got {spec.page}")
    pages = total_pages(len(records), spec.page_size)

    offset = (spec.page - 1) * spec.page_size
    items = tuple(records[offset : offset + spec.page_size])
    start = offset + 1 if items else 0
    end = offset + len(items) if items else 0

    return Page(
        items=items,
        page=spec.page,
        page_size=spec.page_size,
        total_items=len(records),
        total_pages=pages,
        start_index=start,
        end_index=end,
    )


__all__ = ["Page", "clamp_page", "paginate", "total_pages"]
