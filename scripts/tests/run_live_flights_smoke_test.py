#!/usr/bin/env python
"""
Render live flight pages against the real Infinite Flight API.

Needs INFINITE_FLIGHT_API_KEY (or the SSM parameter) plus a filter, e.g.
LIVE_FILTER_TYPE=suffix LIVE_FILTER_SUFFIX=VA.

Usage (from repo root):
    python scripts/tests/run_live_flights_smoke_test.py [pages]
"""

import asyncio
import sys

from livefleet.config import get_filter_criteria, resolve_infinite_flight_api_key, settings
from livefleet.domain import LiveFlightsError
from livefleet.ingestors import InfiniteFlightClient
from livefleet.main import build_live_service


async def main(max_pages: int) -> None:
    api_key = resolve_infinite_flight_api_key()
    if not api_key:
        print("No Infinite Flight API key available; set INFINITE_FLIGHT_API_KEY.")
        return

    client = InfiniteFlightClient(api_key=api_key)
    service = build_live_service()
    criteria = get_filter_criteria()

    print(f"=== Live flights for {settings.airline_name} ({criteria.describe()}) ===\n")

    try:
        page = await service.render_first_page(
            client.get_flights,
            client.get_aircraft_catalog,
            client.get_flight_plan,
            criteria,
            source_label=settings.airline_name,
        )
    except LiveFlightsError as exc:
        print(f"Live flights failed: {exc.user_message} ({exc.detail})")
        return

    while True:
        print(page.to_text())
        print(f"\n-- {page.footer} --\n")
        if not page.has_next or page.page_number >= max_pages:
            break
        page = await service.render_page(page.page_number + 1, client.get_flight_plan)

    print(f"Plan cache: {service.plan_cache.stats}")


if __name__ == "__main__":
    asyncio.run(main(int(sys.argv[1]) if len(sys.argv) > 1 else 2))
