"""
SQLAlchemy unit of work.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from fashop.domains.marketplace.application.ports import ITransactionManager

logger = logging.getLogger(__name__)


class SqlAlchemyTransactionManager(ITransactionManager):
    """Commits the session when the block succeeds, rolls back otherwise."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        try:
            yield
        except Exception as e:
            logger.debug(f"Rolling back transaction: {type(e).__name__}")
            await self.session.rollback()
            raise
        await self.session.commit()
