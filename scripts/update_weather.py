"""Admin CLI for loading launch-site forecasts into the document store.

Usage examples:
    python scripts/update_weather.py update
    python scripts/update_weather.py update --provider windy --site "Mission Peak=37.5126,-121.8805"
    python scripts/update_weather.py stats --json
    python scripts/update_weather.py reset --yes
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from app.api.dependencies import build_embedder
from app.config import settings
from app.db import SessionLocal, init_db
from app.ingestors import OpenMeteoIngestor, WindyIngestor
from app.services.vector_store import WeatherDocumentStore
from app.services.weather_updater import DEFAULT_LAUNCH_SITES, LaunchSite, WeatherUpdater


def _get_session():
    init_db()
    return SessionLocal()


def parse_site(raw: str) -> LaunchSite:
    """Parse ``NAME=LAT,LON`` into a launch site."""

    try:
        name, coords = raw.split("=", maxsplit=1)
        lat, lon = (float(part) for part in coords.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid site {raw!r}; expected NAME=LAT,LON"
        ) from exc
    return LaunchSite(name.strip(), lat, lon)


def _ensure_api_key() -> None:
    if not settings.openai_api_key:
        sys.stderr.write("OPENAI_API_KEY must be configured to embed forecasts.\n")
        raise SystemExit(1)


def _build_provider(name: str):
    if name == "windy":
        if not settings.windy_api_key:
            sys.stderr.write("WINDY_API_KEY must be configured for the windy provider.\n")
            raise SystemExit(1)
        return WindyIngestor()
    return OpenMeteoIngestor()


def cmd_update(args) -> None:
    _ensure_api_key()
    session = _get_session()
    try:
        store = WeatherDocumentStore(session)
        if args.reset:
            removed = store.reset()
            print(f"Removed {removed} existing documents.")

        updater = WeatherUpdater(
            provider=_build_provider(args.provider),
            embedder=build_embedder(settings),
            store=store,
            timezone_name=settings.reference_timezone,
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
        )
        sites = args.site or list(DEFAULT_LAUNCH_SITES)
        try:
            results = asyncio.run(updater.update(sites))
        except RuntimeError as exc:
            sys.stderr.write(f"Failed to update weather data: {exc}\n")
            raise SystemExit(1) from exc

        output = [
            {
                "location": result.site.name,
                "hours": result.hours,
                "chunks": len(result.document_ids),
            }
            for result in results
        ]
        if args.json:
            print(json.dumps(output, indent=2))
        else:
            for item in output:
                print(
                    f"{item['location']}: {item['hours']} hours in {item['chunks']} chunks"
                )
            print("Weather data update completed for all locations.")
    finally:
        session.close()


def cmd_stats(args) -> None:
    session = _get_session()
    try:
        store = WeatherDocumentStore(session)
        output = {"documents": store.count(), "dimension": store.embedding_dimension()}
        if args.json:
            print(json.dumps(output, indent=2))
        else:
            print(f"documents: {output['documents']}")
            print(f"dimension: {output['dimension'] or 'n/a'}")
    finally:
        session.close()


def cmd_reset(args) -> None:
    session = _get_session()
    try:
        if not args.yes:
            confirmation = input("Delete every stored forecast document? [y/N]: ").strip().lower()
            if confirmation not in {"y", "yes"}:
                print("Cancelled.")
                return
        removed = WeatherDocumentStore(session).reset()
        print(f"Removed {removed} documents.")
    finally:
        session.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage ThermalAI forecast documents")
    sub = parser.add_subparsers(dest="command", required=True)

    update_cmd = sub.add_parser("update", help="Fetch and store launch-site forecasts")
    update_cmd.add_argument(
        "--provider",
        choices=["open-meteo", "windy"],
        default="open-meteo",
        help="Forecast provider",
    )
    update_cmd.add_argument(
        "--site",
        action="append",
        type=parse_site,
        help="Launch site as NAME=LAT,LON; repeatable, defaults to the Bay Area sites",
    )
    update_cmd.add_argument("--reset", action="store_true", help="Drop stored documents first")
    update_cmd.add_argument("--json", action="store_true", help="Return JSON output")
    update_cmd.set_defaults(func=cmd_update)

    stats_cmd = sub.add_parser("stats", help="Show document store statistics")
    stats_cmd.add_argument("--json", action="store_true", help="Return JSON output")
    stats_cmd.set_defaults(func=cmd_stats)

    reset_cmd = sub.add_parser("reset", help="Delete every stored document")
    reset_cmd.add_argument("--yes", action="store_true", help="Confirm without prompt")
    reset_cmd.set_defaults(func=cmd_reset)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
