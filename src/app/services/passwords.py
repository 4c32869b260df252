"""Password hashing helpers (bcrypt)."""

from typing import Optional

import bcrypt

from config import ApplicationConfig

# bcrypt only looks at the first 72 bytes; newer releases refuse anything longer
MAX_PASSWORD_BYTES = 72

_dummy_hash: Optional[bytes] = None


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Return a bcrypt hash of the password using BCRYPT_ROUNDS by default."""
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds or ApplicationConfig.BCRYPT_ROUNDS)
    return bcrypt.hashpw(encoded, salt).decode()


def _checkpw(password: str, password_hash: bytes) -> bool:
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        # Still pay for one comparison so the response time does not change
        encoded = encoded[:MAX_PASSWORD_BYTES]
        bcrypt.checkpw(encoded, password_hash)
        return False
    return bcrypt.checkpw(encoded, password_hash)


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of a password against a stored bcrypt hash."""
    try:
        return _checkpw(password, password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False


def burn_password_check(password: str) -> None:
    """
    Spend the same time as a real check when there is no hash to compare.

    Keeps login timing identical whether or not the email exists.
    """
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("dummy_password").encode()
    _checkpw(password, _dummy_hash)
