"""
Interactive state of one record view.

A `ViewSession` owns the current criteria, sort, page and selection for a
view over a record collection, and applies the screen policies on top of
the pure query stages:

- applying or clearing filters recomputes from the full record set and
  returns to page 1
- the selection never holds a record the filters hide
- the current page is clamped whenever the filtered set shrinks
- every action either changes what is shown or produces a notification
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Tuple

from schooney.domain.collection import RecordCollection
from schooney.engine import RecordQueryEngine
from schooney.errors import (
    InvalidPageError,
    RecordCollectionError,
    SendValidationError,
    UnknownFieldError,
)
from schooney.mailing.bulk_send import BulkSendResult, SingleSendResult, send_bulk, send_single
from schooney.mailing.mailer import Mailer
from schooney.mailing.quota import SendQuota
from schooney.notify import Notifier
from schooney.query.criteria import FilterCriteria, PageSpec, SortSpec
from schooney.query.export import ExportDocument
from schooney.query.pagination import Page, clamp_page, total_pages
from schooney.query.selection import (
    EMPTY,
    PageSelectionState,
    Selection,
    page_selection_state,
    prune_selection,
    toggle,
    toggle_page,
)
from schooney.sinks import DownloadSink
from schooney.utils.logging import get_logger
from schooney.views.abstract import RecordView

log = get_logger(__name__)

QuotaListener = Callable[[SendQuota], None]


class ViewSession:
    """
    Parameters
    ----------
    view : RecordView
        View parameterizing the query stages.
    collection : RecordCollection
        Owning record collection; sends write updated records back into it.
    notifier : Notifier
        Receives user feedback.
    mailer : Mailer | None
        Delivery collaborator; required only for sending.
    quota : SendQuota | None
        Current daily quota; required only for sending.
    school_name : str
        Prefix of export titles.
    clock : callable
        Returns the current time; injected for reproducible tests.
    on_quota_change : callable, optional
        Called with the new quota after every send (persistence hook).
    """

    def __init__(
        self,
        view: RecordView,
        collection: RecordCollection,
        notifier: Notifier,
        mailer: Optional[Mailer] = None,
        quota: Optional[SendQuota] = None,
        school_name: str = "SISB Schooney",
        clock: Callable[[], datetime] = datetime.now,
        on_quota_change: Optional[QuotaListener] = None,
        page_size: Optional[int] = None,
    ) -> None:
        self.view = view
        self.collection = collection
        self.notifier = notifier
        self.mailer = mailer
        self.quota = quota
        self.school_name = school_name
        self.clock = clock
        self.on_quota_change = on_quota_change
        self.engine = RecordQueryEngine(view)

        self.criteria = FilterCriteria()
        self.sort = SortSpec()
        self.page_spec = PageSpec(page_size=page_size or view.default_page_size)
        self.selection: Selection = EMPTY
        self._filtered: Tuple[Any, ...] = ()
        self._ordered: Tuple[Any, ...] = ()
        self._recompute()

    # --- derived state --------------------------------------------------

    @property
    def filtered(self) -> Tuple[Any, ...]:
        """Filtered records in natural order."""
        return self._filtered

    @property
    def ordered(self) -> Tuple[Any, ...]:
        return self._ordered

    @property
    def total_records(self) -> int:
        return len(self.collection)

    def current_page(self) -> Page:
        return self.engine.paginate(self._ordered, self.page_spec)

    def page_selection(self) -> PageSelectionState:
        return page_selection_state(self.selection, self.current_page().items)

    def _recompute(self) -> None:
        self._filtered = self.engine.filter(self.collection.records(), self.criteria)
        self._reorder()
        pruned = prune_selection(self.selection, self._filtered)
        if pruned != self.selection:
            log.debug(
                "Selection pruned",
                extra={"view": self.view.name, "dropped": len(self.selection) - len(pruned)},
            )
        self.selection = pruned

    def _reorder(self) -> None:
        self._ordered = self.engine.sort(self._filtered, self.sort)
        pages = total_pages(len(self._ordered), self.page_spec.page_size)
        self.page_spec = self.page_spec.at(clamp_page(self.page_spec.page, pages))

    # --- filters ----------------------------------------------------------

    def apply_filters(self, criteria: FilterCriteria) -> Page:
        """Replace the criteria, recompute from the full set and go to page 1."""
        previous = self.criteria
        self.criteria = criteria
        try:
            self._recompute()
        except UnknownFieldError:
            self.criteria = previous
            raise
        self.page_spec = self.page_spec.at(1)
        self.notifier.notify(
            "info",
            f"Showing {len(self._filtered)} of {self.total_records} {self.view.noun}.",
        )
        log.info(
            "Filters applied",
            extra={
                "view": self.view.name,
                "choices": criteria.active_choices(),
                "matched": len(self._filtered),
            },
        )
        return self.current_page()

    def clear_filters(self) -> Page:
        return self.apply_filters(FilterCriteria())

    # --- sorting and paging ---------------------------------------------

    def toggle_sort(self, field: str) -> Page:
        """Same field flips direction; a new field starts ascending."""
        if field not in self.view.sort_fields:
            raise UnknownFieldError(self.view.name, field, list(self.view.sort_fields))
        self.sort = self.sort.toggled(field)
        self._reorder()
        log.info(
            "Sort changed",
            extra={"view": self.view.name, "sort_field": field, "sort_direction": self.sort.direction},
        )
        return self.current_page()

    def set_page(self, page: int) -> Page:
        pages = total_pages(len(self._ordered), self.page_spec.page_size)
        self.page_spec = self.page_spec.at(clamp_page(page, pages))
        return self.current_page()

    def set_page_size(self, page_size: int) -> Page:
        if page_size <= 0:
            raise InvalidPageError(f"page_size must be > 0, got {page_size}")
        self.page_spec = self.page_spec.resized(page_size)
        return self.current_page()

    # --- selection --------------------------------------------------------

    def select(self, record_ids: Iterable[str]) -> Selection:
        """Select visible records; ids hidden by the filters are ignored."""
        visible = {record.id for record in self._filtered}
        wanted = set(record_ids)
        ignored = wanted - visible
        if ignored:
            self.notifier.notify(
                "info", f"{len(ignored)} selected {self.view.noun} are hidden by the current filters."
            )
        self.selection = self.selection | frozenset(wanted & visible)
        return self.selection

    def toggle_select(self, record_id: str) -> Selection:
        if record_id not in {record.id for record in self._filtered}:
            self.notifier.notify("error", f"Record {record_id} is not in the current view.")
            return self.selection
        self.selection = toggle(self.selection, record_id)
        return self.selection

    def toggle_current_page(self) -> Selection:
        self.selection = toggle_page(self.selection, self.current_page().items)
        return self.selection

    def clear_selection(self) -> Selection:
        self.selection = EMPTY
        return self.selection

    # --- sending ----------------------------------------------------------

    def _require_mailing(self) -> Tuple[Mailer, SendQuota]:
        if self.mailer is None or self.quota is None:
            raise RuntimeError("ViewSession was created without a mailer and quota")
        return self.mailer, self.quota

    def _store_quota(self, quota: SendQuota) -> None:
        self.quota = quota
        if self.on_quota_change is not None:
            self.on_quota_change(quota)

    def send_selected(self, record_ids: Optional[Iterable[str]] = None) -> BulkSendResult:
        """
        Send reminders for the visible selected records.

        `record_ids`, when given, replaces the selection for this send. Ids
        hidden by the filters are passed through so a request made up only
        of hidden records is reported as not available.

        Raises
        ------
        SendValidationError
            If any selected record is not eligible; nothing is sent.
        """
        mailer, quota = self._require_mailing()
        selection = self.selection if record_ids is None else frozenset(record_ids)
        now = self.clock()
        try:
            result = send_bulk(
                self.view,
                self._filtered,
                selection,
                quota,
                today=now.date(),
                now=now,
                mailer=mailer,
            )
        except SendValidationError as exc:
            self.notifier.notify("error", exc.reason)
            raise
        self.collection.replace_many(result.updated_records)
        self.selection = prune_selection(result.selection, self._filtered)
        self._store_quota(result.quota)
        if result.updated_records:
            self._recompute()
        self.notifier.notify("error" if result.is_error else "success", result.message)
        return result

    def send_one(self, record_id: str) -> SingleSendResult:
        mailer, quota = self._require_mailing()
        record = self.collection.get(record_id)
        if record is None:
            raise RecordCollectionError(f"Unknown record id '{record_id}'")
        now = self.clock()
        try:
            result = send_single(self.view, record, quota, today=now.date(), now=now, mailer=mailer)
        except SendValidationError as exc:
            self.notifier.notify("error", exc.reason)
            raise
        self._store_quota(result.quota)
        if result.sent:
            self.collection.replace(result.record)
            self.selection = self.selection - {record_id}
            self._recompute()
        self.notifier.notify("success" if result.sent else "error", result.message)
        return result

    def download_document(self, record_id: str) -> bool:
        """Gate a single document download (PDF rendering happens elsewhere)."""
        record = self.collection.get(record_id)
        if record is None:
            raise RecordCollectionError(f"Unknown record id '{record_id}'")
        reason = self.view.download_eligibility(record)
        if reason:
            self.notifier.notify("error", reason)
            return False
        self.notifier.notify("success", f"Downloading {self.view.describe_record(record)}")
        return True

    # --- export -----------------------------------------------------------

    def export(self, sink: DownloadSink) -> ExportDocument:
        """Export the whole filtered set (not just the current page)."""
        document = self.engine.export(self._filtered, self.criteria, self.clock(), self.school_name)
        location = sink.download(document.filename, document.mime_type, document.content)
        self.notifier.notify(
            "success",
            f"Successfully exported {document.record_count} {self.view.noun} (file: {location})",
        )
        return document


__all__ = ["ViewSession"]
