import asyncio

from backoffice.db.session import engine
from backoffice.db.base import Base

# every model has to be imported before create_all
import backoffice.models  # noqa: F401


async def init_db() -> None:
    """
    Create all tables
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_tables_exist() -> None:
    """
    Create missing tables (called on startup)
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(init_db())
