import os
import sys
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("PASSWORD_TIME_COST", "1")
os.environ.setdefault("PASSWORD_MEMORY_COST", "8192")
os.environ.setdefault("PASSWORD_PARALLELISM", "1")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from minibank.database import Base, create_db_engine
from minibank.models.account import Account
from minibank.models.user import User
from minibank.services import identity, ledger
from minibank.services.errors import (
    InvalidCredentialsError,
    InvalidHashError,
    UserNotFoundError,
    UsernameTakenError,
)


def _build_session():
    engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def test_register_stores_salted_argon2_hash():
    session = _build_session()

    user = identity.register(session, "alice", "alice123")

    assert user.username == "alice"
    assert user.password_hash != "alice123"
    assert user.password_hash.startswith("$argon2id$")
    assert identity.get_user(session, user.id).id == user.id


def test_register_duplicate_username_conflicts():
    session = _build_session()
    identity.register(session, "alice", "alice123")

    with pytest.raises(UsernameTakenError):
        identity.register(session, "alice", "different-password")

    assert session.query(User).count() == 1


def test_get_missing_user_raises_not_found():
    session = _build_session()

    with pytest.raises(UserNotFoundError):
        identity.get_user(session, "00000000-0000-0000-0000-000000000000")


def test_login_with_fresh_credentials_succeeds():
    session = _build_session()
    registered = identity.register(session, "alice", "alice123")

    user = identity.login(session, "alice", "alice123")

    assert user.id == registered.id


def test_login_with_wrong_password_is_credential_error():
    session = _build_session()
    identity.register(session, "alice", "alice123")

    with pytest.raises(InvalidCredentialsError):
        identity.login(session, "alice", "wrong-password")


def test_login_with_unknown_username_is_not_found():
    session = _build_session()

    with pytest.raises(UserNotFoundError):
        identity.login(session, "nobody", "whatever")


def test_login_with_corrupt_stored_hash_is_hash_error():
    session = _build_session()
    user = User(username="broken", password_hash="not-a-valid-hash")
    session.add(user)
    session.commit()

    with pytest.raises(InvalidHashError):
        identity.login(session, "broken", "whatever")


def test_login_does_not_rewrite_stored_hash():
    session = _build_session()
    user = identity.register(session, "alice", "alice123")
    stored_hash = user.password_hash

    identity.login(session, "alice", "alice123")
    session.expire_all()

    assert identity.get_user(session, user.id).password_hash == stored_hash


def test_delete_user_removes_accounts_and_user():
    session = _build_session()
    user = identity.register(session, "alice", "alice123")
    ledger.create_account(session, user.id)
    ledger.create_account(session, user.id)
    user_id = user.id

    removed = identity.delete_user(session, user_id)

    assert removed == 1
    assert session.query(Account).filter(Account.user_id == user_id).count() == 0
    with pytest.raises(UserNotFoundError):
        identity.get_user(session, user_id)


def test_delete_missing_user_returns_zero():
    session = _build_session()

    assert identity.delete_user(session, "00000000-0000-0000-0000-000000000000") == 0


def test_delete_user_keeps_counterparty_history():
    session = _build_session()
    alice = identity.register(session, "alice", "alice123")
    bob = identity.register(session, "bob", "bob12345")
    alice_account = ledger.create_account(session, alice.id)
    bob_account = ledger.create_account(session, bob.id)
    ledger.deposit(session, alice_account.id, Decimal("10.00"))
    ledger.transfer(session, alice_account.id, bob_account.id, Decimal("5.00"))

    identity.delete_user(session, alice.id)

    history = ledger.list_transactions(session, bob_account.id)
    assert len(history) == 1
    assert history[0].from_account is None
    assert history[0].to_account == bob_account.id
    assert ledger.get_account(session, bob_account.id).balance == Decimal("5.00")
