"""
Export stage: serialize a record subset (normally the whole filtered set,
independent of pagination) into a CSV document with a metadata header.

Layout of the generated text:

    <metadata lines, one escaped single-column row each>
    <blank separator line>
    <header row>
    <one data row per record>

Numbers are written as plain decimals and dates as `yyyy-MM-dd` /
`yyyy-MM-dd HH:mm:ss` so the file stays machine-readable regardless of
locale. Building the text is pure; handing it to a download sink is the
caller's job (see `schooney.sinks`).
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, List, Sequence

from pydantic import BaseModel

from schooney.query.criteria import ALL, FilterCriteria
from schooney.utils.formatting import (
    escape_csv_value,
    format_amount,
    format_date,
    format_datetime,
    slugify,
)
from schooney.views.abstract import RecordView

CSV_MIME_TYPE = "text/csv;charset=utf-8"


class ExportDocument(BaseModel):
    """Generated CSV ready for a download sink."""

    filename: str
    mime_type: str = CSV_MIME_TYPE
    content: str
    record_count: int

    model_config = {"frozen": True}


def csv_row(values: Iterable[Any]) -> str:
    return ",".join(escape_csv_value(value) for value in values)


def filter_summary(view: RecordView, criteria: FilterCriteria) -> List[str]:
    """One human-readable line per criterion, falling back to the "all" label."""
    lines: List[str] = []
    for key, choice in view.filters.items():
        selected = criteria.choice(key)
        shown = choice.all_label if selected == ALL else choice.display(selected)
        lines.append(f"- {choice.label}: {shown}")
    start = format_date(criteria.date_from) or "No start date"
    end = format_date(criteria.date_to) or "No end date"
    lines.append(f"- {view.date_label}: {start} to {end}")
    lines.append(f"- Search Term: {criteria.search_term or 'No search applied'}")
    return lines


def metadata_lines(
    view: RecordView,
    records: Sequence[Any],
    criteria: FilterCriteria,
    exported_at: datetime,
    school_name: str,
) -> List[str]:
    lines = [
        f"{school_name} {view.title} Export",
        f"Export Date: {format_datetime(exported_at)}",
        *view.report_lines(),
        f"Total Records: {len(records)}",
    ]
    aggregate = view.aggregate(records)
    if aggregate:
        lines.append(aggregate)
    lines.extend(["", "Applied Filters:", *filter_summary(view, criteria), ""])
    lines.append(f"--- {view.title} Data ---")
    return lines


def build_csv(
    view: RecordView,
    records: Sequence[Any],
    criteria: FilterCriteria,
    exported_at: datetime,
    school_name: str = "SISB Schooney",
) -> str:
    """Render the full CSV text for `records`."""
    columns = view.columns()
    metadata = metadata_lines(view, records, criteria, exported_at, school_name)
    rows = [escape_csv_value(line) for line in metadata]
    rows.append("")
    rows.append(csv_row(column.header for column in columns))
    rows.extend(csv_row(column.render(record) for column in columns) for record in records)
    return "\n".join(rows)


def export_filename(view: RecordView, criteria: FilterCriteria, exported_on: date) -> str:
    """
    `<slug>[-<context>]-<filter fragments>-<yyyy-MM-dd>.csv`; a filter at
    "all" contributes its `filename_all` fragment.
    """
    parts = [view.filename_slug]
    context = view.filename_context()
    if context:
        parts.append(slugify(context))
    for key in view.filename_filters:
        selected = criteria.choice(key)
        parts.append(view.filters[key].filename_all if selected == ALL else slugify(selected))
    parts.append(format_date(exported_on))
    return "-".join(parts) + ".csv"


def build_export(
    view: RecordView,
    records: Sequence[Any],
    criteria: FilterCriteria,
    exported_at: datetime,
    school_name: str = "SISB Schooney",
) -> ExportDocument:
    """
    Produce the CSV document and its filename for a record subset.

    Parameters
    ----------
    view : RecordView
        View supplying columns, labels and the filename scheme.
    records : Sequence
        Records to export, usually the full filtered set.
    criteria : FilterCriteria
        Criteria that produced `records`; summarized in the metadata.
    exported_at : datetime
        Export timestamp (injected so the output is reproducible).
    school_name : str
        Prefix of the document title.
    """
    return ExportDocument(
        filename=export_filename(view, criteria, exported_at.date()),
        content=build_csv(view, records, criteria, exported_at, school_name),
        record_count=len(records),
    )


__all__ = [
    "CSV_MIME_TYPE",
    "ExportDocument",
    "build_csv",
    "build_export",
    "csv_row",
    "escape_csv_value",
    "export_filename",
    "filter_summary",
    "format_amount",
    "format_date",
    "format_datetime",
    "metadata_lines",
    "slugify",
]
