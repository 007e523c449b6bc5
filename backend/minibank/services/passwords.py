"""Password hashing and verification (Argon2id via argon2-cffi)."""
from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError as Argon2InvalidHashError
from argon2.exceptions import VerificationError, VerifyMismatchError

from minibank.config import get_settings
from minibank.services.errors import InvalidHashError


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Build the process-wide hasher from configured cost parameters."""
    settings = get_settings()
    return PasswordHasher(
        time_cost=settings.password_time_cost,
        memory_cost=settings.password_memory_cost,
        parallelism=settings.password_parallelism,
    )


def hash_password(password: str) -> str:
    """Hash a password with a freshly generated random salt."""
    return get_password_hasher().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Returns False on mismatch. Raises InvalidHashError when the stored hash
    cannot be parsed at all, so callers can tell corrupt data from a wrong
    password.
    """
    try:
        return get_password_hasher().verify(hashed_password, plain_password)
    except VerifyMismatchError:
        return False
    except Argon2InvalidHashError as exc:
        raise InvalidHashError() from exc
    except VerificationError:
        return False
