"""
Import municipal billboard permits from a GeoJSON FeatureCollection.

Replaces every billboard tagged "houston_geojson" with the features in the
file, all assigned to one target city.

Usage:
    python scripts/import_geojson.py PATH [--city-id UUID] [--source-tag TAG]

The target city defaults to DEFAULT_CITY_ID from the environment.
"""

import argparse
import asyncio
import logging
import os
import sys
from uuid import UUID

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import dispose_engine, get_session_maker
from core.exceptions import ConfigurationError, ETLException
from core.logging import setup_logging
from ingestion.extractors.geojson_extractor import GeoJSONSource
from ingestion.runner import ImportRunner
from models.base import SourceTag

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Import billboards from a GeoJSON FeatureCollection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("path", help="Path to the .geojson file")
    parser.add_argument(
        "--city-id",
        default=settings.DEFAULT_CITY_ID,
        help="Target city id (default: DEFAULT_CITY_ID)",
    )
    parser.add_argument(
        "--source-tag",
        default=SourceTag.HOUSTON_GEOJSON.value,
        help="Source tag replaced by this import",
    )
    return parser.parse_args()


async def run_import(path: str, city_id: str, source_tag: str) -> dict:
    if not city_id:
        raise ConfigurationError(
            "No target city; pass --city-id or set DEFAULT_CITY_ID",
            context={"setting": "DEFAULT_CITY_ID"}
        )
    try:
        target_city = UUID(city_id)
    except ValueError:
        raise ConfigurationError(
            f"Invalid city id: {city_id}",
            context={"city_id": city_id}
        )

    source = GeoJSONSource(path, city_id=target_city, source_tag=source_tag)

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
        result = asyncio.run(run_import(args.path, args.city_id, args.source_tag))
    except ConfigurationError as e:
        logger.error(e.message)
        return 1
    except ETLException as e:
        logger.error(f"Import failed: {e}")
        return 1

    logger.info(
        f"Done. Read: {result['records_read']}, Deleted: {result['deleted']}, "
        f"Inserted: {result['inserted']}, Skipped: {result['skipped']}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
