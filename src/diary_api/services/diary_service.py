"""Diary service: text entries owned by a user.

Writing an entry also grants the author the default diary permission,
in the same transaction as the entry itself.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diary_api.db.models import DEFAULT_PERMISSION, Diary
from diary_api.services.errors import store_guard
from diary_api.services.permission_service import PermissionService

logger = structlog.get_logger()


class DiaryService:
    """Business logic for diary entries."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.permissions = PermissionService(db)

    async def create_entry(self, user_id: uuid.UUID, text: str) -> Diary:
        async with store_guard(self.db, "create diary entry"):
            diary = Diary(user_id=user_id, text=text)
            self.db.add(diary)
            await self.db.flush()
            await self.permissions.add(user_id, [DEFAULT_PERMISSION])
            await self.db.commit()

        logger.info("diary.created", diary_id=str(diary.id), user_id=str(user_id))
        return diary

    async def list_entries(self, user_id: uuid.UUID) -> list[Diary]:
        async with store_guard(self.db, "list diary entries"):
            result = await self.db.execute(
                select(Diary)
                .where(Diary.user_id == user_id)
                .order_by(Diary.created_at.desc())
            )
            return list(result.scalars().all())

    async def get_entry(
        self, user_id: uuid.UUID, diary_id: uuid.UUID
    ) -> Diary | None:
        """Fetch one entry, only if it belongs to `user_id`."""
        async with store_guard(self.db, "get diary entry"):
            result = await self.db.execute(
                select(Diary).where(Diary.id == diary_id, Diary.user_id == user_id)
            )
            return result.scalars().first()
