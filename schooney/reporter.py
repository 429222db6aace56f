from __future__ import annotations

from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from schooney.mailing.quota import SendQuota
from schooney.query.pagination import Page
from schooney.views.abstract import RecordView

# Columns shown in the console; the CSV export carries the full column set.
_MAX_COLUMNS = 7


def page_caption(page: Page, noun: str, total_records: int) -> str:
    """'Showing 1-10 of 42 payment records (filtered from 125 total)'."""
    caption = f"{page.describe()} {noun}"
    if page.total_items != total_records:
        caption += f" (filtered from {total_records} total)"
    return caption


def build_page_table(
    view: RecordView,
    page: Page,
    total_records: int,
    aggregate: Optional[str] = None,
    selected: Sequence[str] = (),
) -> Table:
    """
    Render one result page as a rich table.

    The first columns of the view's export layout are shown, prefixed with a
    selection marker and the record id.
    """
    caption = page_caption(page, view.noun, total_records)
    caption += f" | page {page.page}/{page.total_pages}"
    if aggregate:
        caption += f"\n{aggregate}"

    table = Table(title=view.title, box=box.ROUNDED, caption=caption)
    table.add_column("", no_wrap=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    columns = view.columns()[:_MAX_COLUMNS]
    for column in columns:
        justify = "right" if "Amount" in column.header else "left"
        table.add_column(column.header, justify=justify)

    for record in page.items:
        marker = "[green]x[/green]" if record.id in selected else ""
        table.add_row(marker, record.id, *(str(column.render(record) or "") for column in columns))
    return table


def print_page(
    view: RecordView,
    page: Page,
    total_records: int,
    aggregate: Optional[str] = None,
    selected: Sequence[str] = (),
    console: Optional[Console] = None,
) -> None:
    console = console or Console()
    if page.is_empty:
        console.print(f"[yellow]No {view.noun} match the current filters.[/yellow]")
        console.print(page_caption(page, view.noun, total_records))
        return
    console.print(build_page_table(view, page, total_records, aggregate, selected))


def print_views(views: List[RecordView], console: Optional[Console] = None) -> None:
    console = console or Console()
    table = Table(title="Record Views", box=box.ROUNDED)
    table.add_column("View", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Filters")
    table.add_column("Sort Fields")
    table.add_column("Page Size", justify="right", style="magenta")
    table.add_column("E-mail", justify="center")
    for view in views:
        table.add_row(
            view.name,
            view.title,
            ", ".join(view.filters),
            ", ".join(view.sort_fields),
            str(view.default_page_size),
            "yes" if view.supports_email else "-",
        )
    console.print(table)


def print_quota(quota: SendQuota, console: Optional[Console] = None) -> None:
    console = console or Console()
    style = "red" if quota.is_exhausted else ("yellow" if quota.usage_percent >= 80 else "green")
    console.print(
        f"Emails sent today: [{style}]{quota.count}/{quota.limit_per_day}[/{style}] "
        f"({quota.usage_percent:.1f}%), remaining {quota.remaining}"
    )


__all__ = ["build_page_table", "page_caption", "print_page", "print_quota", "print_views"]
