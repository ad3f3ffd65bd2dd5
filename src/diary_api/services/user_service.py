"""User service: registration, login and listing.

Learn: Service layer separates business logic from HTTP routing.
Routes call services, services call the database. Each failure mode
has its own exception so the route can answer with the right status
code (409 taken, 404 unknown user, 401 wrong password) instead of a
blanket 500. Database faults become StoreError, the catch-all floor.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from diary_api.auth.jwt import create_access_token
from diary_api.auth.password import hash_password, verify_password
from diary_api.db.models import User
from diary_api.services.errors import store_guard
from diary_api.services.permission_service import PermissionService

logger = structlog.get_logger()


class UsernameTakenError(Exception):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str):
        super().__init__(f"Username '{username}' is already taken")
        self.username = username


class UserNotFoundError(Exception):
    """Raised when logging in with an unknown username."""

    def __init__(self, username: str):
        super().__init__(f"User '{username}' not found")
        self.username = username


class InvalidCredentialsError(Exception):
    """Raised when the supplied password does not match."""


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.permissions = PermissionService(db)

    async def get_by_username(self, username: str) -> User | None:
        async with store_guard(self.db, "look up user"):
            result = await self.db.execute(
                select(User).where(User.username == username)
            )
            return result.scalars().first()

    async def register(self, username: str, password: str) -> User:
        """Create a user with a bcrypt-hashed password.

        The existence check catches the common case; the unique index on
        username catches a concurrent registration that slipped past it.
        """
        if await self.get_by_username(username):
            raise UsernameTakenError(username)

        user = User(username=username, password_hash=hash_password(password))
        async with store_guard(self.db, "register user"):
            self.db.add(user)
            try:
                await self.db.commit()
            except IntegrityError as e:
                await self.db.rollback()
                raise UsernameTakenError(username) from e

        logger.info("auth.registered", user_id=str(user.id), username=username)
        return user

    async def login(self, username: str, password: str) -> str:
        """Check credentials and return a signed access token.

        The token payload holds the user's public fields and the
        capability tags they were granted, never the password hash.
        """
        user = await self.get_by_username(username)
        if not user:
            logger.info("auth.login_failed", username=username, reason="not_found")
            raise UserNotFoundError(username)

        if not verify_password(password, user.password_hash):
            logger.info(
                "auth.login_failed", username=username, reason="bad_password"
            )
            raise InvalidCredentialsError("Invalid credentials")

        tags = await self.permissions.tags_for_user(user.id)
        token = create_access_token(
            {
                "id": str(user.id),
                "username": user.username,
                "createdAt": user.created_at.isoformat(),
                "permission": tags,
            }
        )
        logger.info("auth.logged_in", user_id=str(user.id))
        return token

    async def list_all(self) -> list[User]:
        async with store_guard(self.db, "list users"):
            result = await self.db.execute(select(User).order_by(User.created_at))
            return list(result.scalars().all())
