#!/usr/bin/env python3
"""Run cross-platform correlation for one company and print the dashboard."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from saas_analytics.api.services.analytics_service import CrossPlatformAnalyticsService
from saas_analytics.api.services.record_store import SqlPlatformRecordStore
from saas_analytics.core.database import init_db
from saas_analytics.core.exceptions import AllPlatformsUnreachable


async def run(company_id: str) -> int:
    service = CrossPlatformAnalyticsService(SqlPlatformRecordStore())
    try:
        result = await service.get_dashboard(company_id)
    except AllPlatformsUnreachable as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result.model_dump(mode="json"), indent=2))
    return 0


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("company_id", nargs="?", default="demo-company")
    args = parser.parse_args()

    init_db()
    sys.exit(asyncio.run(run(args.company_id)))


if __name__ == "__main__":
    main()
