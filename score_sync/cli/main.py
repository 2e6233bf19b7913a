from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import asdict, replace
from typing import Any

from score_sync.config.runtime import ScoreSyncSettings
from score_sync.services.score_store import RemoteScoreStore
from score_sync.utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="score-sync", description="Leaderboard API client")
    parser.add_argument("--base-url", help="Score API base URL (default: $SCORE_API_BASE_URL)")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--utc7", action="store_true", help="Timestamp records in UTC+7 instead of UTC")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every request and its outcome")
    subparsers = parser.add_subparsers(dest="command")

    leaderboard_parser = subparsers.add_parser("leaderboard", help="Show one leaderboard page")
    leaderboard_parser.add_argument("--page", type=int, default=1)
    leaderboard_parser.add_argument("--page-size", type=int, default=None)

    ensure_parser = subparsers.add_parser("ensure", help="Create the player's record if it does not exist")
    ensure_parser.add_argument("name")

    submit_parser = subparsers.add_parser("submit", help="Create or update the player's score")
    submit_parser.add_argument("name")
    submit_parser.add_argument("score", type=int)

    delete_parser = subparsers.add_parser("delete", help="Delete the player's record")
    delete_parser.add_argument("name")

    rank_parser = subparsers.add_parser("rank", help="Show the player's rank")
    rank_parser.add_argument("name")

    serve_parser = subparsers.add_parser("serve-dev", help="Run the in-memory development API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=5289)

    return parser


def settings_from_args(args: argparse.Namespace, base: ScoreSyncSettings | None = None) -> ScoreSyncSettings:
    settings = base or ScoreSyncSettings.from_env()
    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.timeout is not None:
        overrides["request_timeout_seconds"] = args.timeout
    if args.utc7:
        overrides["use_utc7_timestamps"] = True
    if args.verbose:
        overrides["log_requests"] = True
    return replace(settings, **overrides) if overrides else settings


async def run_command(args: argparse.Namespace, store: RemoteScoreStore, settings: ScoreSyncSettings) -> tuple[int, Any]:
    if args.command == "leaderboard":
        page = await store.get_leaderboard_page(args.page, args.page_size or settings.leaderboard_page_size)
        if page is None:
            return 1, None
        return 0, {
            "page": page.page,
            "pageSize": page.page_size,
            "total": page.total,
            "records": [asdict(record) for record in page.records],
        }

    if args.command == "ensure":
        record = await store.ensure_exists(args.name)
        return (0, asdict(record)) if record is not None else (1, None)

    if args.command == "submit":
        record = await store.upsert_score(args.name, args.score)
        return (0, asdict(record)) if record is not None else (1, None)

    if args.command == "delete":
        deleted = await store.delete(args.name)
        return (0 if deleted else 1), {"deleted": deleted}

    if args.command == "rank":
        rank = await store.get_rank(args.name)
        return (0, asdict(rank)) if rank is not None else (1, None)

    raise ValueError(f"unknown command: {args.command}")


def main(argv: list[str] | None = None, store: RemoteScoreStore | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(logging.INFO if args.verbose else logging.WARNING)

    if args.command == "serve-dev":
        from score_sync.devserver.app import serve

        serve(host=args.host, port=args.port)
        return 0

    settings = settings_from_args(args)
    store = store or RemoteScoreStore.from_settings(settings)
    try:
        exit_code, payload = asyncio.run(run_command(args, store, settings))
    finally:
        store.transport.close()

    if payload is None:
        print(f"{args.command} failed, see log output for details")
    else:
        print(json.dumps(payload, indent=2))
    return exit_code


def entrypoint() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    entrypoint()
