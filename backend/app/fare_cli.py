#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.distance import build_resolver  # noqa: E402
from backend.app.errors import FareComparisonError  # noqa: E402
from backend.app.fares import DEFAULT_PROVIDERS, provider_index  # noqa: E402
from backend.app.logging_config import configure_structlog  # noqa: E402
from backend.app.service import ComparisonResult, FareComparisonService  # noqa: E402
from backend.app.settings import settings  # noqa: E402


def format_result(result: ComparisonResult) -> str:
    providers = provider_index(DEFAULT_PROVIDERS)
    lines = [
        f"Distance: {result.distance_km} km",
        f"Estimated time: {result.duration_min} min",
        "",
    ]
    width = max((len(q.label) for q in result.fares), default=0)
    for quote in result.fares:
        provider = providers.get(quote.key)
        link = result.links.get(provider.link_group, "") if provider else ""
        lines.append(f"{quote.label:<{width}}  Rs {quote.price:>5}  {link}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compare ride-hailing fares for a trip.")
    parser.add_argument("origin", help="'lat,lng' pair, or an address when GOOGLE_API_KEY is set")
    parser.add_argument("destination", help="'lat,lng' pair, or an address")
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    args = parser.parse_args(argv)

    configure_structlog(json_logs=False, environment=settings.SENTRY_ENVIRONMENT)
    # stdout carries the result; only warnings and errors are logged.
    logging.getLogger().setLevel(logging.WARNING)

    service = FareComparisonService(build_resolver(settings))
    try:
        result = asyncio.run(service.compare(args.origin, args.destination))
    except FareComparisonError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.as_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
