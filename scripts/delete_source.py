"""
Delete every billboard carrying a source tag.

Usage:
    python scripts/delete_source.py TAG

Example:
    # Remove placeholder rows
    python scripts/delete_source.py seed
"""

import argparse
import asyncio
import logging
import os
import sys

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.database import dispose_engine, get_session_maker
from core.exceptions import ETLException
from core.logging import setup_logging
from ingestion.loaders.billboard_loader import BillboardLoader

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Delete all billboards with a given source tag",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("tag", help="Source tag, e.g. seed")
    return parser.parse_args()


async def delete_source(tag: str) -> int:
    try:
        async with get_session_maker()() as session:
            return await BillboardLoader(session).delete_source(tag)
    finally:
        await dispose_engine()


def main() -> int:
    args = parse_args()
    setup_logging()

    try:
        deleted = asyncio.run(delete_source(args.tag))
    except ETLException as e:
        logger.error(e.message)
        return 1

    logger.info(f"Deleted {deleted} billboards with source={args.tag}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
