from __future__ import annotations

import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
from rich.console import Console

from schooney.config import Settings, get_settings
from schooney.domain.collection import RecordCollection
from schooney.engine import available_views, get_view
from schooney.errors import NotAuthenticatedError, SchooneyError, SendValidationError
from schooney.mailing.mailer import SimulatedMailer
from schooney.mock_data import dump_records, generate_records, load_records
from schooney.notify import ConsoleNotifier
from schooney.query.criteria import FilterCriteria
from schooney.reminders import default_reminders, render_preview
from schooney.reporter import print_page, print_quota, print_views
from schooney.session import ViewSession
from schooney.sinks import FileDownloadSink
from schooney.storage import (
    StateStore,
    StoredAuthProvider,
    load_quota,
    load_terms,
    save_quota,
)
from schooney.utils.formatting import format_date
from schooney.utils.logging import configure_logging
from schooney.views.abstract import RecordView

app = typer.Typer(help="Schooney tuition back-office record console.")

DATE_FORMATS = ["%Y-%m-%d"]


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)


def _fail(exc: Exception) -> typer.Exit:
    Console(stderr=True).print(f"[bold red]Error:[/bold red] {exc}")
    return typer.Exit(code=1)


def _parse_filters(values: Optional[List[str]]) -> Dict[str, str]:
    choices: Dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip() or not value.strip():
            raise typer.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--filter")
        choices[key.strip()] = value.strip()
    return choices


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def _load_collection(
    view: RecordView, settings: Settings, data: Optional[Path], now: datetime
) -> RecordCollection:
    if data is not None:
        records = load_records(view.record_type, data)
    else:
        records = generate_records(view.name, settings.mock_seed, now)
    return RecordCollection(records)


def _open_session(
    view_name: str,
    data: Optional[Path],
    search: str,
    filters: Optional[List[str]],
    date_from: Optional[datetime],
    date_to: Optional[datetime],
    with_mailing: bool = False,
) -> Tuple[ViewSession, Settings]:
    settings = get_settings()
    now = datetime.now()
    view = get_view(view_name)
    store = StateStore(settings.state_file)
    mailing: Dict[str, Any] = {}
    if with_mailing:
        mailing = {
            "mailer": SimulatedMailer(),
            "quota": load_quota(store, now.date(), settings.daily_email_limit),
            "on_quota_change": lambda quota: save_quota(store, quota),
        }
    session = ViewSession(
        view,
        _load_collection(view, settings, data, now),
        notifier=ConsoleNotifier(),
        school_name=settings.school_name,
        **mailing,
    )
    criteria = FilterCriteria(
        search=search,
        choices=_parse_filters(filters),
        date_from=_as_date(date_from),
        date_to=_as_date(date_to),
    )
    if not criteria.is_default or criteria.choices:
        session.apply_filters(criteria)
    return session, settings


@app.command()
def info() -> None:
    """
    Show effective configuration values and today's e-mail quota.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} | school={settings.school_name} | "
        f"email_limit={settings.daily_email_limit} seed={settings.mock_seed} | "
        f"state={settings.state_file} exports={settings.export_dir}"
    )
    store = StateStore(settings.state_file)
    auth = StoredAuthProvider(store)
    typer.echo(f"authenticated={'yes' if auth.is_authenticated() else 'no'}")
    print_quota(load_quota(store, date.today(), settings.daily_email_limit), Console())


@app.command()
def views() -> None:
    """
    List the available record views.
    """
    print_views([get_view(name) for name in available_views()], Console())


@app.command()
def query(
    view: str = typer.Argument(..., help="View name (see `schooney views`)."),
    search: str = typer.Option("", "--search", "-q", help="Case-insensitive text search."),
    filters: Optional[List[str]] = typer.Option(
        None, "--filter", "-f", help="Dropdown filter as KEY=VALUE (repeatable)."
    ),
    date_from: Optional[datetime] = typer.Option(None, "--from", formats=DATE_FORMATS),
    date_to: Optional[datetime] = typer.Option(None, "--to", formats=DATE_FORMATS),
    sort: Optional[str] = typer.Option(None, "--sort", "-s", help="Field to sort by."),
    desc: bool = typer.Option(False, "--desc", help="Sort descending."),
    page: int = typer.Option(1, "--page", "-p", min=1),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1),
    data: Optional[Path] = typer.Option(
        None,
        "--data",
        exists=True,
        dir_okay=False,
        help="JSON records file (default: sample data).",
    ),
) -> None:
    """
    Filter, sort and page through a record view.
    """
    try:
        session, _ = _open_session(view, data, search, filters, date_from, date_to)
        if sort:
            session.toggle_sort(sort)
            if desc:
                session.toggle_sort(sort)
        if page_size:
            session.set_page_size(page_size)
        current = session.set_page(page)
    except SchooneyError as exc:
        raise _fail(exc) from exc

    print_page(
        session.view,
        current,
        session.total_records,
        aggregate=session.view.aggregate(session.filtered),
        console=Console(),
    )


@app.command()
def export(
    view: str = typer.Argument(..., help="View name (see `schooney views`)."),
    search: str = typer.Option("", "--search", "-q"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f"),
    date_from: Optional[datetime] = typer.Option(None, "--from", formats=DATE_FORMATS),
    date_to: Optional[datetime] = typer.Option(None, "--to", formats=DATE_FORMATS),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Target directory (default: EXPORT_DIR)."
    ),
    data: Optional[Path] = typer.Option(None, "--data", exists=True, dir_okay=False),
) -> None:
    """
    Export the whole filtered set of a view to CSV.
    """
    try:
        session, settings = _open_session(view, data, search, filters, date_from, date_to)
        session.export(FileDownloadSink(output_dir or settings.export_dir))
    except SchooneyError as exc:
        raise _fail(exc) from exc


@app.command("send-reminders")
def send_reminders(
    view: str = typer.Argument("payments", help="View whose records are e-mailed."),
    select: List[str] = typer.Option(..., "--select", help="Record id to send (repeatable)."),
    search: str = typer.Option("", "--search", "-q"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f"),
    date_from: Optional[datetime] = typer.Option(None, "--from", formats=DATE_FORMATS),
    date_to: Optional[datetime] = typer.Option(None, "--to", formats=DATE_FORMATS),
    data: Optional[Path] = typer.Option(
        None,
        "--data",
        exists=True,
        dir_okay=False,
        help="JSON records file; updated records are written back.",
    ),
) -> None:
    """
    Send reminder e-mails for selected records under the daily quota.
    """
    settings = get_settings()
    try:
        if not StoredAuthProvider(StateStore(settings.state_file)).is_authenticated():
            raise NotAuthenticatedError("Please log in first (`schooney login`).")
        session, _ = _open_session(
            view, data, search, filters, date_from, date_to, with_mailing=True
        )
        result = session.send_selected(select)
    except SendValidationError as exc:
        # already reported through the session notifier
        raise typer.Exit(code=1) from exc
    except SchooneyError as exc:
        raise _fail(exc) from exc

    if data is not None and result.updated_records:
        dump_records(list(session.collection.records()), data)
    if session.quota is not None:
        print_quota(session.quota, Console())
    if result.is_error:
        raise typer.Exit(code=2)


@app.command()
def login() -> None:
    """
    Start an authenticated session (credential checks are out of scope).
    """
    StoredAuthProvider(StateStore(get_settings().state_file)).login()
    typer.echo("Logged in.")


@app.command()
def logout() -> None:
    """
    End the authenticated session.
    """
    StoredAuthProvider(StateStore(get_settings().state_file)).logout()
    typer.echo("Logged out.")


@app.command()
def terms() -> None:
    """
    Show the tuition term settings.
    """
    for term in load_terms(StateStore(get_settings().state_file)):
        typer.echo(
            f"{term.name}: billing from {format_date(term.billing_start_date) or '-'}, "
            f"{format_date(term.start_date) or '-'} to {format_date(term.end_date) or '-'}"
        )


@app.command()
def reminders() -> None:
    """
    Preview the reminder templates with sample values.
    """
    console = Console()
    for reminder in default_reminders(date.today()):
        state = "enabled" if reminder.enabled else "disabled"
        console.print(f"[bold]{reminder.name}[/bold] ({reminder.method}, {state})")
        console.print(f"  Subject: {reminder.subject}")
        console.print(f"  {render_preview(reminder.message, reminder)}", markup=False)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
