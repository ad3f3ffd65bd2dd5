"""Store failure handling shared by all services.

Learn: Services never leak SQLAlchemy exceptions to the routes. Any
database error inside `store_guard` rolls the session back, is logged,
and surfaces as a StoreError, which routes map to HTTP 500. Domain
errors (conflict, not found) raised inside the guard pass through
untouched.
"""

from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class StoreError(Exception):
    """The database could not complete an operation."""

    def __init__(self, operation: str):
        super().__init__(f"Could not {operation}")
        self.operation = operation


@asynccontextmanager
async def store_guard(db: AsyncSession, operation: str):
    try:
        yield
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("store.error", operation=operation, error=str(e))
        raise StoreError(operation) from e
