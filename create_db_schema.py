import asyncio
import logging

from config.settings import settings
from core.db import Database
from core.logging import configure_logging

logger = logging.getLogger(__name__)


async def main():
    """
    One-time script to create the users table in the configured MySQL database.
    Uses a temporary Database handle built from settings.MYSQL_ASYNC_URL.
    """
    db_url = settings.MYSQL_ASYNC_URL
    if not db_url:
        raise RuntimeError("MYSQL_ASYNC_URL is not configured")

    database = Database(db_url)
    await database.connect()
    await database.create_all()
    await database.dispose()
    logger.info("Database schema created/updated successfully.")


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(main())
