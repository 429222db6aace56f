"""
Query inputs: filter criteria, sort spec and page spec.

These are plain values; the view session keeps the current ones and
replaces them on every user action.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

ALL = "all"

SortDirection = Literal["asc", "desc"]


class FilterCriteria(BaseModel):
    """
    Current filter selections for a view.

    `choices` maps a filter key declared by the view (e.g. "invoice_status",
    "grade") to the selected value; a missing key or the "all" sentinel means
    no constraint.
    """

    search: str = ""
    choices: Dict[str, str] = Field(default_factory=dict)
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    model_config = {"frozen": True}

    @property
    def search_term(self) -> str:
        return self.search.strip()

    def choice(self, key: str) -> str:
        return self.choices.get(key, ALL)

    def active_choices(self) -> Dict[str, str]:
        return {key: value for key, value in self.choices.items() if value != ALL}

    def with_choice(self, key: str, value: str) -> "FilterCriteria":
        return self.model_copy(update={"choices": {**self.choices, key: value}})

    @property
    def is_default(self) -> bool:
        return (
            not self.search_term
            and not self.active_choices()
            and self.date_from is None
            and self.date_to is None
        )


class SortSpec(BaseModel):
    """Sort field (None keeps natural order) and direction."""

    field: Optional[str] = None
    direction: SortDirection = "asc"

    model_config = {"frozen": True}

    def toggled(self, field: str) -> "SortSpec":
        """Same field flips direction; a new field starts ascending."""
        if self.field == field:
            return SortSpec(field=field, direction="desc" if self.direction == "asc" else "asc")
        return SortSpec(field=field, direction="asc")


class PageSpec(BaseModel):
    """One-based page number and page size."""

    page: int = 1
    page_size: int = 10

    model_config = {"frozen": True}

    def resized(self, page_size: int) -> "PageSpec":
        """Changing the page size returns to the first page."""
        return PageSpec(page=1, page_size=page_size)

    def at(self, page: int) -> "PageSpec":
        return PageSpec(page=page, page_size=self.page_size)


__all__ = ["ALL", "FilterCriteria", "SortSpec", "PageSpec", "SortDirection"]
