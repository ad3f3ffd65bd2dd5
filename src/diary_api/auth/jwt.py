"""JWT access token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The
login flow signs the user's public fields plus their capability tags;
protected routes decode the token and trust its payload without a
database round-trip.

Expiry is enforced unless DIARY_JWT_VERIFY_EXPIRATION is false, in
which case an issued token stays valid forever.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from diary_api.config import settings


class TokenError(Exception):
    """Raised when token creation/verification fails."""


def create_access_token(
    claims: dict,
    secret: Optional[str] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """Sign `claims` as an access token.

    `claims` must carry an "id"; it is copied into the standard "sub"
    claim. "iat" and "exp" are added here.
    """
    if "id" not in claims:
        raise TokenError("Token claims need an 'id'")
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=expires_minutes)
    payload = {
        **claims,
        "sub": str(claims["id"]),
        "type": "access",
        "iat": now,
        "exp": expires,
    }
    return jwt.encode(
        payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm
    )


def verify_token(
    token: str,
    secret: Optional[str] = None,
    verify_exp: Optional[bool] = None,
) -> dict:
    """Verify and decode a JWT token.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    if verify_exp is None:
        verify_exp = settings.jwt_verify_expiration
    try:
        return jwt.decode(
            token,
            secret or settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": verify_exp, "require": ["sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")
