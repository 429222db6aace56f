"""
Record query engine: view registry plus the filter -> sort -> paginate
pipeline and export of the filtered set.

Usage (example from CLI):
    from schooney.engine import RecordQueryEngine, get_view

    engine = RecordQueryEngine(get_view("payments"))
    result = engine.run(records, FilterCriteria(search="ST000005"))
    print(result.page.describe())

Every stage is a pure function of its inputs; the engine only wires them
together and logs what happened.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from schooney.errors import UnknownViewError
from schooney.query.criteria import FilterCriteria, PageSpec, SortSpec
from schooney.query.export import ExportDocument, build_export
from schooney.query.filtering import filter_records
from schooney.query.pagination import Page, paginate
from schooney.query.sorting import sort_records
from schooney.utils.logging import get_logger
from schooney.views.abstract import RecordView
from schooney.views.activity import ActivityLogView
from schooney.views.payments import PaymentHistoryView
from schooney.views.receipts import ReceiptsView
from schooney.views.transactions import TransactionsView
from schooney.views.users import UsersView

log = get_logger(__name__)


def _view_factories() -> Dict[str, Callable[[], RecordView]]:
    """Registry of available views."""
    return {
        "payments": lambda: PaymentHistoryView(),
        "receipts": lambda: ReceiptsView(),
        "transactions": lambda: TransactionsView(),
        "activity": lambda: ActivityLogView(),
        "users": lambda: UsersView(),
    }


def available_views() -> List[str]:
    """List registered view names."""
    return sorted(_view_factories().keys())


def get_view(name: str) -> RecordView:
    factories = _view_factories()
    if name not in factories:
        raise UnknownViewError(f"Unknown view '{name}'. Available: {', '.join(sorted(factories))}")
    return factories[name]()


class QueryResult(BaseModel):
    """Outcome of one pipeline run."""

    total_items: int
    filtered: Tuple[Any, ...]
    ordered: Tuple[Any, ...]
    page: Page

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def was_filtered(self) -> bool:
        return len(self.filtered) != self.total_items


class RecordQueryEngine:
    """
    Runs the query stages for one view.

    Parameters
    ----------
    view : RecordView
        View that parameterizes every stage.
    """

    def __init__(self, view: RecordView) -> None:
        self.view = view

    def filter(self, records: Sequence[Any], criteria: FilterCriteria) -> Tuple[Any, ...]:
        filtered = filter_records(records, self.view, criteria)
        log.debug(
            "Filter applied",
            extra={"view": self.view.name, "input": len(records), "matched": len(filtered)},
        )
        return filtered

    def sort(self, records: Sequence[Any], spec: SortSpec) -> Tuple[Any, ...]:
        return sort_records(records, spec, self.view.sort_fields, self.view.name)

    def paginate(self, records: Sequence[Any], spec: PageSpec) -> Page:
        return paginate(records, spec)

    def run(
        self,
        records: Sequence[Any],
        criteria: Optional[FilterCriteria] = None,
        sort: Optional[SortSpec] = None,
        page: Optional[PageSpec] = None,
    ) -> QueryResult:
        """
        Filter, sort and paginate `records`.

        Parameters
        ----------
        records : Sequence
            Full record set in natural order.
        criteria : FilterCriteria | None
            Defaults to no constraint (baseline only).
        sort : SortSpec | None
            Defaults to natural order.
        page : PageSpec | None
            Defaults to page 1 at the view's default page size.

        Returns
        -------
        QueryResult
            Filtered and ordered snapshots plus the requested page.
        """
        criteria = criteria or FilterCriteria()
        sort = sort or SortSpec()
        page = page or PageSpec(page_size=self.view.default_page_size)

        filtered = self.filter(records, criteria)
        ordered = self.sort(filtered, sort)
        result = QueryResult(
            total_items=len(records),
            filtered=filtered,
            ordered=ordered,
            page=self.paginate(ordered, page),
        )
        log.info(
            "Query executed",
            extra={
                "view": self.view.name,
                "matched": len(filtered),
                "sort_field": sort.field,
                "sort_direction": sort.direction,
                "page": page.page,
                "page_size": page.page_size,
            },
        )
        return result

    def export(
        self,
        records: Sequence[Any],
        criteria: FilterCriteria,
        exported_at: datetime,
        school_name: str,
    ) -> ExportDocument:
        """Export `records` (the full filtered set, not one page)."""
        document = build_export(self.view, records, criteria, exported_at, school_name)
        log.info(
            "Export produced",
            extra={
                "view": self.view.name,
                "export_file": document.filename,
                "records": document.record_count,
            },
        )
        return document


__all__ = [
    "QueryResult",
    "RecordQueryEngine",
    "available_views",
    "get_view",
]
