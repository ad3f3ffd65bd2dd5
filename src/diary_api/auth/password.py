"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks. Passwords
never reach the database in plaintext.
"""

import bcrypt

from diary_api.config import settings

# bcrypt only looks at the first 72 bytes of a password; request schemas
# reject anything longer so two passwords can never share a hash.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt.

    The work factor comes from DIARY_PASSWORD_HASH_ROUNDS (12 by default,
    ~100ms per hash on modern hardware).
    Hashes start with "$2b$" and embed their own salt.
    """
    pw_bytes = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.password_hash_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False
