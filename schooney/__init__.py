"""
Schooney - record query console for a school tuition back office.

This package implements the record views of the back office (payment
history, receipts, payment transactions, the activity log and the user
directory) as a small query engine:

- Filtering by text search, dropdown choices and date range
- Kind-aware single-field sorting (numbers, instants, text, school grades)
- Pagination with "showing X-Y of Z" bookkeeping
- CSV export with a metadata header
- Rate-limited bulk reminder e-mail under a daily quota

Every query stage is a pure function; `ViewSession` layers the screen
policies (page resets, selection pruning, notifications) on top.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from schooney.config import Settings, get_settings
from schooney.engine import QueryResult, RecordQueryEngine, available_views, get_view
from schooney.mailing import BulkSendResult, BulkSendState, SendQuota, maybe_reset, send_bulk
from schooney.query import FilterCriteria, Page, PageSpec, SortSpec
from schooney.session import ViewSession
from schooney.utils.logging import configure_logging, get_logger
from schooney.views.abstract import AbstractRecordView, RecordView

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Engine
    "QueryResult",
    "RecordQueryEngine",
    "available_views",
    "get_view",
    "FilterCriteria",
    "Page",
    "PageSpec",
    "SortSpec",
    # Views
    "RecordView",
    "AbstractRecordView",
    "ViewSession",
    # Mailing
    "BulkSendResult",
    "BulkSendState",
    "SendQuota",
    "maybe_reset",
    "send_bulk",
    # Logging
    "configure_logging",
    "get_logger",
]
