"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request. The bearer token
is the only input: its payload already carries the user id, username
and permission list, so no database lookup happens here.
"""

import uuid
from typing import Optional

import structlog
from fastapi import Depends, Header, HTTPException

from diary_api.auth.jwt import TokenError, verify_token

logger = structlog.get_logger()


class CurrentIdentity:
    """Represents the authenticated user making the request.

    Learn: Built from a verified token payload. Downstream code uses
    user_id to scope queries and permissions for capability checks.
    """

    def __init__(
        self,
        user_id: str,
        username: Optional[str] = None,
        permissions: Optional[list[str]] = None,
    ):
        self.user_id = user_id
        self.username = username
        self.permissions = permissions or []

    @classmethod
    def from_payload(cls, payload: dict) -> "CurrentIdentity":
        """Raises TokenError when "sub" is not a user id."""
        try:
            user_id = str(uuid.UUID(str(payload["sub"])))
        except (KeyError, ValueError):
            raise TokenError("Invalid token: subject is not a user id")
        return cls(
            user_id=user_id,
            username=payload.get("username"),
            permissions=list(payload.get("permission") or []),
        )

    def has_permission(self, tag: str) -> bool:
        """Check if this identity was granted a capability tag."""
        return tag in self.permissions


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
) -> Optional[CurrentIdentity]:
    """Extract current identity (optional, returns None if no auth).

    A header that is present but carries a bad token is still a 401;
    only a missing bearer token yields None.
    """
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:].strip()
        return _authenticate_jwt(token)

    return None


async def get_current_user(
    identity: Optional[CurrentIdentity] = Depends(get_current_user_optional),
) -> CurrentIdentity:
    """Extract current identity (required, 401 if no auth)."""
    if not identity:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def _authenticate_jwt(token: str) -> CurrentIdentity:
    """Authenticate via JWT token."""
    try:
        payload = verify_token(token)
        return CurrentIdentity.from_payload(payload)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
