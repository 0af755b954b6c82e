from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .config import Settings
from .db_connector import DatabaseSession
from .documents import GeoJSONDocumentError
from .ingest import ingest_features
from .logging_utils import setup_logging
from .models import EntityKind
from .persistence import PostgisStore
from .report import print_report, summary_table
from .samples import seed_sample_countries, seed_sample_states

console = Console()
LOGGER = logging.getLogger("gis_boundary_loader.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gis-boundary-loader",
        description="Load Natural Earth country and state boundaries into PostGIS.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-schema", help="create the gis schema and tables")
    init.add_argument("--force", action="store_true", help="re-run DDL even if tables exist")

    for name, kind in (("countries", EntityKind.COUNTRY), ("states", EntityKind.STATE)):
        load = sub.add_parser(name, help=f"load {kind.value} features from a GeoJSON file")
        load.add_argument("path", help="GeoJSON FeatureCollection file, or '-' for stdin")
        load.set_defaults(entity_kind=kind)

    sub.add_parser("seed", help="insert sample countries and US states into empty tables")
    sub.add_parser("report", help="list loaded countries and states per country")
    return parser


def read_geojson(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def run(args: argparse.Namespace, settings: Settings) -> int:
    session = DatabaseSession(settings.database)
    if args.command == "init-schema":
        session.ensure_schema(force=args.force)
        return 0

    geojson_text = None
    if args.command in ("countries", "states"):
        geojson_text = read_geojson(args.path)

    with session as engine:
        store = PostgisStore(engine)
        if geojson_text is not None:
            summary = ingest_features(
                store,
                geojson_text,
                args.entity_kind,
                progress_every=settings.progress_every,
            )
            console.print(summary_table(summary))
        elif args.command == "seed":
            countries = seed_sample_countries(store)
            states = seed_sample_states(store)
            console.print(f"Seeded {countries} countries and {states} states")
        elif args.command == "report":
            print_report(store, console)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env()
    except Exception as exc:  # pragma: no cover - guard for CLI usage
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)

    setup_logging(settings.log_level)

    try:
        sys.exit(run(args, settings))
    except (GeoJSONDocumentError, UnicodeDecodeError, OSError) as exc:
        LOGGER.error("Cannot load input: %s", exc)
        print(f"Input error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as exc:  # pragma: no cover - guard for CLI usage
        LOGGER.exception("Load failed")
        print(f"Load failed: {exc}", file=sys.stderr)
        sys.exit(3)


if __name__ == "__main__":
    main()
