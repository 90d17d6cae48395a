#!/usr/bin/env python3
"""Example: list the stations of a few SeedLink servers, reusing results through a shared cache."""

import asyncio
import sys

from seedlink_stations import QueryOrchestrator, ResultCache, parse_targets
from seedlink_stations.errors import InvalidTargetError


async def main() -> None:
    hosts = "geofon.gfz-potsdam.de,rtserve.iris.washington.edu:18000"  # change to your servers
    timeout_s = 5.0

    try:
        targets = parse_targets(hosts)
    except InvalidTargetError as e:
        print(f"Invalid target: {e}", file=sys.stderr)
        sys.exit(1)

    orchestrator = QueryOrchestrator(ResultCache(refresh_interval=60), timeout=timeout_s)
    for result in await orchestrator.run(targets):
        if result.error is not None:
            print(f"{result.target_id}: {result.error.value}")
            continue
        print(f"{result.target_id}: {result.server_identifier} ({len(result.stations)} stations)")
        for s in result.stations[:10]:
            print(f"  {s.network}.{s.station}  {s.site}")

    # Second run is answered from the cache without opening connections
    cached = await orchestrator.run(targets)
    print(f"Cached results: {len(cached)}")


if __name__ == "__main__":
    asyncio.run(main())
