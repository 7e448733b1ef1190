import logging

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from comment_board.config import Settings

logger = logging.getLogger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the bounded connection pool shared by every store gateway.

    The pool never grows past ``db_pool_size``; callers wait up to
    ``db_pool_timeout`` seconds for a free connection.
    """
    engine = create_async_engine(
        settings.database_url,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
    )
    logger.info(
        f"Initialized database pool for {engine.url.render_as_string(hide_password=True)}"
    )
    return engine


async def dispose_engine(engine: AsyncEngine) -> None:
    await engine.dispose()
    logger.info("Database connection pool closed")
