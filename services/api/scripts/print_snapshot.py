#!/usr/bin/env python3
"""Print the deals snapshot as JSON.

Useful to inspect validation outcomes for a frozen instant, or to fetch the
live snapshot from a running API.

Run (local):
  cd services/api
  python -m scripts.print_snapshot
  python -m scripts.print_snapshot --now 2025-01-15T12:00:00Z --type cruise
  python -m scripts.print_snapshot --remote http://localhost:8080
"""

import argparse
import asyncio
import json
import logging
import os
import sys


# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.schemas import DealFilter, DealSnapshot  # noqa: E402
from app.services.catalog import build_default_catalog  # noqa: E402
from app.services.clock import parse_iso  # noqa: E402
from app.services.deals_client import DealsClient  # noqa: E402
from app.services.errors import RefreshError  # noqa: E402
from app.services.snapshot import filter_deals, get_deals_snapshot, summarize_deals  # noqa: E402
from app.settings import get_settings  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--now", help="Reference instant (ISO-8601). Defaults to the wall clock.")
    parser.add_argument(
        "--type",
        default=DealFilter.ALL.value,
        choices=[f.value for f in DealFilter],
        help="Category filter applied to the printed deals",
    )
    parser.add_argument("--remote", help="Fetch from a running API at this base URL instead")
    return parser.parse_args(argv)


async def _fetch_remote(base_url: str) -> DealSnapshot:
    async with DealsClient(base_url) as client:
        return await client.fetch_snapshot()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.remote:
        try:
            snapshot = asyncio.run(_fetch_remote(args.remote))
        except RefreshError as e:
            print(str(e), file=sys.stderr)
            return 1
    else:
        now = parse_iso(args.now) if args.now else None
        snapshot = get_deals_snapshot(
            build_default_catalog(),
            now,
            tz=get_settings().display_tz,
        )

    deals = filter_deals(snapshot.deals, args.type)
    dump_options = {"mode": "json", "by_alias": True, "exclude_none": True}
    payload = snapshot.model_dump(**dump_options)
    payload["deals"] = [deal.model_dump(**dump_options) for deal in deals]
    payload["filteredSummary"] = summarize_deals(deals).model_dump(**dump_options)

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    raise SystemExit(main())
