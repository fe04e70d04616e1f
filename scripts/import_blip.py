"""
Import digital billboards from a Blip marketplace JSON export.

Replaces every billboard tagged "blip_digital". Cities are resolved from
each record's province/city and created on first sight.

Usage:
    python scripts/import_blip.py [PATH]

PATH defaults to BLIP_DEFAULT_PATH.
"""

import argparse
import asyncio
import logging
import os
import sys

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import dispose_engine, get_session_maker
from core.exceptions import ConfigurationError, ETLException
from core.logging import setup_logging
from ingestion.extractors.blip_extractor import BlipSource
from ingestion.runner import ImportRunner

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Import Blip digital billboards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=settings.BLIP_DEFAULT_PATH,
        help="Path to the JSON array export (default: BLIP_DEFAULT_PATH)",
    )
    return parser.parse_args()


async def run_import(path: str) -> dict:
    source = BlipSource(os.path.abspath(path))

    try:
        async with get_session_maker()() as session:
            runner = ImportRunner(session)
            return await runner.run(source)
    finally:
        await dispose_engine()


def main() -> int:
    args = parse_args()
    setup_logging()

    try:
        result = asyncio.run(run_import(args.path))
    except ConfigurationError as e:
        logger.error(e.message)
        return 1
    except ETLException as e:
        logger.error(f"Import failed: {e}")
        return 1

    logger.info(
        f"Done. Read: {result['records_read']}, Inserted: {result['inserted']}, "
        f"Skipped: {result['skipped']}, Cities created: {result['cities_created']}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
