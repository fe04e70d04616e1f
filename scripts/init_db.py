import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.database import dispose_engine, get_engine
from core.exceptions import ConfigurationError
from core.logging import setup_logging
# Import all models to ensure they are registered
from models import Base

logger = logging.getLogger(__name__)


async def init_database():
    logger.info("Connecting to database...")
    engine = get_engine()

    try:
        async with engine.begin() as conn:
            logger.info("Creating tables...")
            # Create all tables defined in models
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Tables created successfully.")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    setup_logging()
    try:
        asyncio.run(init_database())
    except ConfigurationError as e:
        logger.error(e.message)
        sys.exit(1)
