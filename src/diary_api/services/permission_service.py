"""Permission service: capability grants for users.

Learn: A grant is one row holding a list of capability tags. Grants
are append-only and never de-duplicated, so granting the default twice
leaves two identical rows. The union of a user's tags is what ends up
in their access token.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diary_api.db.models import DEFAULT_PERMISSION, Permission, UserPermission
from diary_api.services.errors import store_guard

logger = structlog.get_logger()


class PermissionService:
    """Business logic for capability grants."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(
        self, user_id: uuid.UUID, tags: list[UserPermission]
    ) -> Permission:
        """Stage a grant in the current transaction (flush, no commit).

        Used by other services that grant permissions as a side effect
        and commit their own work together with the grant.
        """
        grant = Permission(user_id=user_id, permission=[t.value for t in tags])
        self.db.add(grant)
        await self.db.flush()
        logger.info(
            "permission.granted",
            user_id=str(user_id),
            permission=grant.permission,
        )
        return grant

    async def grant_default(self, user_id: uuid.UUID) -> Permission:
        async with store_guard(self.db, "grant permission"):
            grant = await self.add(user_id, [DEFAULT_PERMISSION])
            await self.db.commit()
        return grant

    async def list_for_user(self, user_id: uuid.UUID) -> list[Permission]:
        async with store_guard(self.db, "list permissions"):
            result = await self.db.execute(
                select(Permission)
                .where(Permission.user_id == user_id)
                .order_by(Permission.created_at)
            )
            return list(result.scalars().all())

    async def tags_for_user(self, user_id: uuid.UUID) -> list[str]:
        """All distinct tags a user holds across their grants, sorted."""
        grants = await self.list_for_user(user_id)
        return sorted({tag for grant in grants for tag in grant.permission})
