from __future__ import annotations

from rich.console import Console

from conftest import collection, feature
from gis_boundary_loader.__main__ import build_parser
from gis_boundary_loader.ingest import ingest_features
from gis_boundary_loader.models import EntityKind
from gis_boundary_loader.report import print_report, summary_table
from gis_boundary_loader.samples import (seed_sample_countries,
                                         seed_sample_states)


def _render(renderable=None, store=None) -> str:
    console = Console(record=True, width=400)
    if store is not None:
        print_report(store, console)
    else:
        console.print(renderable)
    return console.export_text()


def test_report_lists_countries_and_states(store):
    seed_sample_countries(store)
    seed_sample_states(store)

    text = _render(store=store)

    assert "Australia, Brazil, Canada" in text
    assert "California, Florida, Georgia" in text
    rows = {r.country: r.state_count for r in store.state_overview()}
    assert rows["United States of America"] == 10
    assert rows["France"] == 0


def test_summary_table_shows_all_counts(store):
    text = collection(feature({"NAME": "A"}), feature({"NAME": "B"}, {"type": "Point", "coordinates": [0, 0]}))
    summary = ingest_features(store, text, EntityKind.COUNTRY)

    rendered = _render(summary_table(summary))

    assert "attempted" in rendered
    assert "skipped_duplicate" in rendered
    assert summary.attempted == 2 and summary.failed == 1


def test_cli_parser():
    parser = build_parser()

    args = parser.parse_args(["states", "ne_10m_admin_1_states_provinces.geojson"])
    assert args.command == "states"
    assert args.entity_kind is EntityKind.STATE

    assert parser.parse_args(["init-schema", "--force"]).force is True
    assert parser.parse_args(["report"]).command == "report"
