"""Command line entry point for the feed poller."""

import argparse
import asyncio
import json
import sys
from typing import Any

from gbg_feeds.adapters.config import AppConfig
from gbg_feeds.adapters.http import AiohttpTransport
from gbg_feeds.domain.errors import NotModified
from gbg_feeds.main import build_clients, create_session, run


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


async def fetch_departures(config: AppConfig, stop_id: str, time_span_minutes: int) -> dict[str, Any]:
    """Fetch one normalized departure board."""
    async with create_session(config) as session:
        clients = build_clients(config, AiohttpTransport(session))
        result = await clients.vasttrafik.get_departures(stop_id, time_span_minutes=time_span_minutes)
        return result.to_record()


async def fetch_menu(
    config: AppConfig, school_id: str, week: int | None, year: int | None
) -> dict[str, Any]:
    """Fetch one normalized week menu, ignoring the watermark."""
    async with create_session(config) as session:
        clients = build_clients(config, AiohttpTransport(session))
        result = await clients.schoolmeal.get_menu(school_id, force=True, week=week, year=year)
        return result.to_record()


async def fetch_cameras(config: AppConfig) -> list[dict[str, Any]]:
    """Fetch the traffic camera catalog."""
    async with create_session(config) as session:
        clients = build_clients(config, AiohttpTransport(session))
        cameras = await clients.gbgcamera.get_cameras()
        return [camera.to_record() for camera in cameras]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Göteborg feed poller",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Poll all sources and publish to the configured store
  gbg-feeds run

  # Show the departure board of Chalmers
  gbg-feeds departures 9022014001960001

  # Show this week's menu
  gbg-feeds menu it-gymnasiet-goteborg

  # List traffic cameras
  gbg-feeds cameras
        """,
    )
    parser.add_argument("--config", help="Path to TOML configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("run", help="Poll all sources on their schedules (default)")

    departures_parser = subparsers.add_parser("departures", help="Print the departure board of a stop")
    departures_parser.add_argument("stop_id", help="Stop id (e.g., 9022014001960001)")
    departures_parser.add_argument(
        "--time-span", type=int, default=60, help="Minutes of departures to fetch (default: 60)"
    )

    menu_parser = subparsers.add_parser("menu", help="Print the menu of a school")
    menu_parser.add_argument("school", help="School id (e.g., it-gymnasiet-goteborg)")
    menu_parser.add_argument("--week", type=int, help="ISO week (default: current week)")
    menu_parser.add_argument("--year", type=int, help="ISO year (default: current year)")

    subparsers.add_parser("cameras", help="Print the traffic camera catalog")

    return parser


async def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    config = AppConfig(config_file=args.config) if args.config else AppConfig()
    try:
        config.load_file()
    except (FileNotFoundError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    command = args.command or "run"
    try:
        if command == "run":
            await run(config)
        elif command == "departures":
            _print_json(await fetch_departures(config, args.stop_id, args.time_span))
        elif command == "menu":
            _print_json(await fetch_menu(config, args.school, args.week, args.year))
        elif command == "cameras":
            _print_json(await fetch_cameras(config))
    except NotModified:
        print("Menu has not changed.", file=sys.stderr)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    cli_main()
