"""
Smoke test a running API: GET /billboards returns 200 and the item shape.

Usage:
    python scripts/verify_api.py [--base-url URL]
"""

import argparse
import logging
import os
import sys

import httpx

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.logging import setup_logging

logger = logging.getLogger(__name__)

REQUIRED_KEYS = [
    "id", "name", "vendor", "address", "lat", "lng",
    "board_type", "traffic_tier", "price_tier", "image_url",
]


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Verify the billboards endpoint")
    parser.add_argument(
        "--base-url",
        default=os.getenv("BASE_URL", "http://localhost:8000"),
        help="API base URL (default: BASE_URL or http://localhost:8000)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    setup_logging()

    url = f"{args.base_url.rstrip('/')}/billboards"
    try:
        response = httpx.get(url, params={"limit": 10}, timeout=10.0)
    except httpx.HTTPError as e:
        logger.error(f"Request failed (is the API running?): {e}")
        return 1

    if response.status_code != 200:
        logger.error(f"API returned {response.status_code}")
        return 1

    data = response.json()
    billboards = data.get("billboards")
    if not isinstance(billboards, list):
        logger.error(f"Response missing billboards array: {data}")
        return 1

    logger.info(f"API OK: 200, billboards={len(billboards)}, totalCount={data.get('totalCount')}")
    if billboards:
        missing = [key for key in REQUIRED_KEYS if key not in billboards[0]]
        if missing:
            logger.warning(f"First item missing keys: {missing}")
        else:
            logger.info("First item has required keys.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
