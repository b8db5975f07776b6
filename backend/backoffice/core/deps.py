"""Dependency injection - single-user deployment (no auth)"""
from typing import AsyncGenerator
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.db.session import SessionLocal
from backoffice.services.storage import Storage


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session per request
    """
    async with SessionLocal() as session:
        yield session


async def get_storage(db: AsyncSession = Depends(get_db)) -> Storage:
    """Repository bound to the request session"""
    return Storage(db)
