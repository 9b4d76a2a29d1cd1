"""pzcache CLI entry points.

This module exposes sync and cache read commands.
It maps argparse commands onto SDK calls and prints JSON results.
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, replace
from pathlib import Path
import sys
from typing import Any, Sequence

from cli.decode_command import add_decode_command, run_decode_command
from cli.output import print_json
from core.config import load_config
from core.errors import PzCacheError
from store.cache_sdk import PzCacheClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="pzcache",
        description="Decode Project Zomboid save databases into a queryable cache",
    )
    parser.add_argument("--settings", help="Optional YAML settings file")
    parser.add_argument("--cache-root", help="Override PZCACHE_ROOT for this command")
    parser.add_argument("--vehicles-db", help="Override the source vehicles database path")
    parser.add_argument("--players-db", help="Override the source players database path")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("sync", help="Snapshot the save databases and rebuild the cache")
    subparsers.add_parser("vehicles", help="List cached vehicles")
    vehicle_parser = subparsers.add_parser("vehicle", help="Show one cached vehicle")
    vehicle_parser.add_argument("id", type=int, help="Vehicle id")
    subparsers.add_parser("players", help="List cached players")
    player_parser = subparsers.add_parser("player", help="Show one cached player")
    player_parser.add_argument("id", type=int, help="Player id")
    subparsers.add_parser("clear", help="Delete all cached rows")
    add_decode_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the pzcache CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args)
        return _dispatch(client, args)
    except PzCacheError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


def _dispatch(client: PzCacheClient, args: argparse.Namespace) -> int:
    if args.command == "sync":
        return _run_sync_command(client)
    if args.command == "vehicles":
        print_json([asdict(summary) for summary in client.list_vehicles()])
        return 0
    if args.command == "vehicle":
        return _print_detail(client.get_vehicle(args.id), "Vehicle", args.id)
    if args.command == "players":
        print_json([asdict(summary) for summary in client.list_players()])
        return 0
    if args.command == "player":
        return _print_detail(client.get_player(args.id), "Player", args.id)
    if args.command == "clear":
        client.clear_cache()
        print_json({"cleared": True})
        return 0
    if args.command == "decode":
        return run_decode_command(client, args)
    print(f"error: unsupported command: {args.command}", file=sys.stderr)
    return 2


def _build_client(args: argparse.Namespace) -> PzCacheClient:
    """Build SDK client with settings and command-line overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured SDK client.
    """
    config = load_config(args.settings)
    if args.cache_root:
        config = config.with_cache_root(args.cache_root)
    if args.vehicles_db:
        config = replace(config, vehicles_db_path=Path(args.vehicles_db).expanduser().resolve())
    if args.players_db:
        config = replace(config, players_db_path=Path(args.players_db).expanduser().resolve())
    return PzCacheClient(config)


def _run_sync_command(client: PzCacheClient) -> int:
    """Handle sync command.

    Args:
        client: SDK client.

    Returns:
        Exit code.
    """
    report = client.sync()
    print_json(asdict(report))
    return 0


def _print_detail(detail: Any, label: str, record_id: int) -> int:
    if detail is None:
        print(f"error: {label} {record_id} not found", file=sys.stderr)
        return 1
    payload = asdict(detail)
    payload["raw"] = list(detail.raw)
    print_json(payload)
    return 0

