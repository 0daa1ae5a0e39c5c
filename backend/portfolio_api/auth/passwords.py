from __future__ import annotations

from functools import lru_cache

from passlib.context import CryptContext

_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return _context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return _context.verify(plain, hashed)
    except ValueError:
        # Unrecognized or malformed stored hash.
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return _context.hash("dummy-password-for-timing")


def verify_against_dummy(plain: str) -> None:
    """Burn the same hashing cost as a real check when no user matched."""
    _context.verify(plain, _dummy_hash())
