"""User registration, lookup, deletion and login."""
import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from minibank.database import atomic
from minibank.models.account import Account
from minibank.models.user import User
from minibank.services.errors import (
    InvalidCredentialsError,
    UserNotFoundError,
    UsernameTakenError,
)
from minibank.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str) -> User | None:
    """Look up a user by username."""
    return db.execute(select(User).where(User.username == username)).scalars().first()


def register(db: Session, username: str, password: str) -> User:
    """Create a user with a salted Argon2 hash of the password."""
    if get_user_by_username(db, username) is not None:
        raise UsernameTakenError()

    user = User(username=username, password_hash=hash_password(password))
    with atomic(db):
        db.add(user)
        try:
            db.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration of the same name.
            raise UsernameTakenError() from exc
        user_id = user.id

    logger.info(f"Registered user {user_id}")
    return user


def get_user(db: Session, user_id: str) -> User:
    """Get a user by id."""
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


def delete_user(db: Session, user_id: str) -> int:
    """Delete a user and all of their accounts in one transaction.

    Returns the number of user rows removed (0 when the user did not exist).
    """
    with atomic(db):
        db.execute(delete(Account).where(Account.user_id == user_id))
        result = db.execute(delete(User).where(User.id == user_id))
        removed = result.rowcount

    if removed:
        logger.info(f"Deleted user {user_id}")
    return removed


def login(db: Session, username: str, password: str) -> User:
    """Check a username/password pair without touching stored state.

    Raises UserNotFoundError for an unknown username, InvalidHashError if the
    stored hash is unreadable and InvalidCredentialsError on a wrong password.
    """
    user = get_user_by_username(db, username)
    if user is None:
        raise UserNotFoundError()

    if not verify_password(password, user.password_hash):
        logger.info(f"Rejected login for user {user.id}")
        raise InvalidCredentialsError()

    return user
