"""
Query stages for the record views: filter -> sort -> paginate, plus CSV
export of the filtered set and selection-set helpers.
"""

from schooney.query.criteria import ALL, FilterCriteria, PageSpec, SortSpec
from schooney.query.export import ExportDocument, build_export, escape_csv_value
from schooney.query.filtering import filter_records
from schooney.query.pagination import Page, clamp_page, paginate
from schooney.query.selection import prune_selection
from schooney.query.sorting import sort_records

__all__ = [
    "ALL",
    "FilterCriteria",
    "PageSpec",
    "SortSpec",
    "ExportDocument",
    "build_export",
    "escape_csv_value",
    "filter_records",
    "Page",
    "clamp_page",
    "paginate",
    "prune_selection",
    "sort_records",
]
