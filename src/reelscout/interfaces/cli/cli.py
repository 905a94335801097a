from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from reelscout.domain.entities.catalog import SearchSession
from reelscout.infrastructure.config import AppConfig, load_config
from reelscout.infrastructure.logging.setup import configure_logging
from reelscout.interfaces.api.catalog.presenter import title_to_dict
from reelscout.interfaces.app import create_app
from reelscout.interfaces.app_state import AppState
from reelscout.interfaces.composition import close_resources, open_resources

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="reelscout")

    # Server options
    parser.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides HOST env).",
    )
    parser.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides PORT env).",
    )

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--provider-dir",
        default=None,
        help="Override providers directory.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    commands = parser.add_subparsers(dest="command")
    commands.add_parser("serve", help="Run the HTTP API (default).")

    search = commands.add_parser("search", help="Run one search and print JSON.")
    search.add_argument("query", help="Free-text title query.")
    search.add_argument(
        "--master-title",
        default=None,
        help="Canonical title for providers that index English titles.",
    )
    search.add_argument(
        "--resolve",
        action="store_true",
        help="Run the fallback cascade for titles without real links.",
    )

    return parser.parse_args(argv)


async def _run_search(
    config: AppConfig, query: str, *, master_title: str | None, resolve: bool
) -> list[dict[str, Any]]:
    state = AppState()
    state.config = config
    await open_resources(state)
    try:
        session = SearchSession()
        result = await state.aggregate_uc.run(
            query, master_title=master_title, session=session
        )
        titles = result.titles
        if resolve:
            for title in titles:
                if title.needs_fallback:
                    await state.resolve_uc.execute(
                        title,
                        session=session,
                        token=result.query.token,
                        master_title=result.query.master_title,
                    )
            titles = session.titles
        return [title_to_dict(t) for t in titles]
    finally:
        await close_resources(state)


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, then either serves the API or runs a
    one-shot search.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    cli_overrides: dict[str, Any] = {}
    if args.provider_dir:
        cli_overrides["provider_dir"] = args.provider_dir
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    config = load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=cli_overrides,
    )

    log_config = configure_logging(config)

    if args.command == "search":
        if not args.query.strip():
            log.error("cli_empty_query")
            return 2
        titles = asyncio.run(
            _run_search(
                config,
                args.query,
                master_title=args.master_title,
                resolve=args.resolve,
            )
        )
        json.dump(titles, sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")
        return 0 if titles else 1

    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "7878"))

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_config=log_config,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
