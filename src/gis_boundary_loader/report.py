"""Read-only verification listings rendered with Rich."""

from __future__ import annotations

from typing import List

from rich.console import Console
from rich.table import Table

from .models import IngestSummary, StateOverviewRow
from .persistence import BoundaryStore


def country_table(names: List[str]) -> Table:
    table = Table(title="Countries")
    table.add_column("country_count", justify="right")
    table.add_column("countries")
    table.add_row(str(len(names)), ", ".join(names))
    return table


def state_table(rows: List[StateOverviewRow]) -> Table:
    table = Table(title="States per country")
    table.add_column("country")
    table.add_column("state_count", justify="right")
    table.add_column("states")
    for row in rows:
        table.add_row(row.country, str(row.state_count), ", ".join(row.states))
    return table


def summary_table(summary: IngestSummary) -> Table:
    table = Table(title=f"{summary.entity_kind.value} load")
    for column in ("attempted", "inserted", "skipped_duplicate", "failed"):
        table.add_column(column, justify="right")
    table.add_row(
        str(summary.attempted),
        str(summary.inserted),
        str(summary.skipped_duplicate),
        str(summary.failed),
    )
    return table


def print_report(store: BoundaryStore, console: Console) -> None:
    console.print(country_table(store.country_names()))
    console.print(state_table(store.state_overview()))
