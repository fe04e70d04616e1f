"""
Check that the target city exists and report its billboard count.

Usage:
    python scripts/verify_db.py [--city-id UUID]
"""

import argparse
import asyncio
import logging
import os
import sys
from uuid import UUID

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.database import dispose_engine, get_session_maker
from core.exceptions import ConfigurationError
from core.logging import setup_logging
from models.billboard import Billboard
from models.location import City

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Verify city and billboard rows")
    parser.add_argument(
        "--city-id",
        default=settings.DEFAULT_CITY_ID,
        help="City to check (default: DEFAULT_CITY_ID)",
    )
    return parser.parse_args()


async def verify(city_id: UUID) -> bool:
    try:
        async with get_session_maker()() as session:
            city = await session.get(City, city_id)
            if city is None:
                logger.error(f"City not found. Expected id: {city_id}")
                return False
            logger.info(f"City OK: {city.name} {city.state_code}")

            result = await session.execute(
                select(func.count()).select_from(Billboard).where(Billboard.city_id == city_id)
            )
            logger.info(f"Billboards for {city.name}: {result.scalar() or 0}")
            return True
    finally:
        await dispose_engine()


def main() -> int:
    args = parse_args()
    setup_logging()

    if not args.city_id:
        logger.error("No city to check; pass --city-id or set DEFAULT_CITY_ID")
        return 1

    try:
        ok = asyncio.run(verify(UUID(args.city_id)))
    except ValueError:
        logger.error(f"Invalid city id: {args.city_id}")
        return 1
    except ConfigurationError as e:
        logger.error(e.message)
        return 1
    except SQLAlchemyError as e:
        logger.error(f"Database error (tables may not exist): {e}")
        return 1

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
