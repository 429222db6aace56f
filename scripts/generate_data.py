"""
Sample data generation script for the Schooney record console.

Writes the deterministic sample records of one view (or all views) to JSON
files that `schooney query --data ...` and the other commands can load.
"""

from __future__ import annotations

import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import typer

from schooney.engine import available_views
from schooney.mock_data import dump_records, generate_records

app = typer.Typer(help="Generate deterministic sample records as JSON.")


def _write_view(view_name: str, output_dir: Path, seed: int, now: datetime) -> Path:
    records = generate_records(view_name, seed, now)
    path = output_dir / f"{view_name}.json"
    dump_records(records, path)
    return path


def _generate_all(
    view_names: List[str], output_dir: Path, seed: int, now: datetime
) -> Dict[str, Path]:
    return {name: _write_view(name, output_dir, seed, now) for name in view_names}


@app.command()
def main(
    view: str = typer.Option(
        "all",
        "--view",
        "-v",
        help="View to generate (payments, receipts, transactions, activity, users, all).",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output_dir: Path = typer.Option(
        Path("data"),
        "--output-dir",
        "-o",
        help="Directory receiving one <view>.json file per view.",
    ),
    now: Optional[datetime] = typer.Option(
        None,
        "--now",
        formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"],
        help="Reference time for generated dates (default: current time).",
    ),
) -> None:
    """
    Generate sample records and write them as JSON.
    """
    start = time.perf_counter()
    names = available_views() if view == "all" else [view]
    written = _generate_all(names, output_dir, seed, now or datetime.now())
    duration = time.perf_counter() - start
    for name, path in written.items():
        typer.echo(f"{name} -> {path}")
    typer.echo(f"Generated {len(written)} file(s) in {duration:.2f}s (seed={seed}).")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
