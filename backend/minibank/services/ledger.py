"""Account ledger: balances, deposits and transfers.

All balance mutations go straight to the database. Transfers lock the rows
they touch so that concurrent debits of the same account serialize on the
row lock instead of racing on a stale balance.
"""
import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from minibank.database import atomic
from minibank.models.account import Account
from minibank.models.transaction import Transaction
from minibank.services.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
)

logger = logging.getLogger(__name__)

MONEY_PLACES = 2
# Balances and amounts must fit NUMERIC(18, 2): at most 16 integer digits.
MAX_BALANCE = Decimal("9999999999999999.99")


def validate_amount(amount: Decimal) -> Decimal:
    """Reject amounts that are not finite, not positive, too precise or too large."""
    try:
        amount = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidAmountError() from exc

    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError()
    if amount.as_tuple().exponent < -MONEY_PLACES:
        raise InvalidAmountError()
    if amount > MAX_BALANCE:
        raise InvalidAmountError()
    return amount


def _balance_limit_error() -> InvalidAmountError:
    return InvalidAmountError("Resulting balance would exceed the account limit")


def create_account(db: Session, user_id: str) -> Account:
    """Open a zero-balance account for an existing user.

    An unknown user_id is rejected by the foreign key and surfaces as
    ConstraintViolationError.
    """
    account = Account(user_id=user_id, balance=Decimal("0.00"))
    with atomic(db):
        db.add(account)
        db.flush()
        account_id = account.id

    logger.info(f"Created account {account_id} for user {user_id}")
    return account


def list_accounts(db: Session, user_id: str) -> list[Account]:
    """Get all accounts owned by a user (possibly none)."""
    stmt = select(Account).where(Account.user_id == user_id).order_by(Account.created_at)
    return list(db.execute(stmt).scalars().all())


def get_account(db: Session, account_id: str) -> Account:
    """Get a single account by id."""
    account = db.get(Account, account_id, populate_existing=True)
    if account is None:
        raise AccountNotFoundError()
    return account


def deposit(db: Session, account_id: str, amount: Decimal) -> Account:
    """Add money to an account and return it with the new balance."""
    amount = validate_amount(amount)
    stmt = (
        update(Account)
        .where(Account.id == account_id, Account.balance <= MAX_BALANCE - amount)
        .values(balance=Account.balance + amount)
        .execution_options(synchronize_session="fetch", populate_existing=True)
        .returning(Account)
    )
    with atomic(db):
        account = db.execute(stmt).scalars().first()
        if account is None:
            if db.get(Account, account_id) is None:
                raise AccountNotFoundError()
            raise _balance_limit_error()

    logger.info(f"Deposited {amount} into account {account_id}")
    return account


def _lock_accounts(db: Session, account_ids: set[str]) -> dict[str, Account]:
    """SELECT ... FOR UPDATE the given accounts, always in ascending id order."""
    stmt = (
        select(Account)
        .where(Account.id.in_(sorted(account_ids)))
        .order_by(Account.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return {account.id: account for account in db.execute(stmt).scalars().all()}


def transfer(db: Session, from_account_id: str, to_account_id: str, amount: Decimal) -> Transaction:
    """Move money between two accounts and record the ledger entry.

    Runs as one database transaction: both rows are locked, the sender's
    balance is checked, both balances are updated and the entry inserted,
    then everything commits together. Any failure rolls all of it back.
    A transfer to the same account nets to zero but is still recorded.
    """
    amount = validate_amount(amount)

    with atomic(db):
        locked = _lock_accounts(db, {from_account_id, to_account_id})
        sender = locked.get(from_account_id)
        receiver = locked.get(to_account_id)
        if sender is None or receiver is None:
            raise AccountNotFoundError()

        if sender.balance < amount:
            logger.info(f"Transfer of {amount} from {from_account_id} rejected: insufficient funds")
            raise InsufficientFundsError()

        sender.balance = sender.balance - amount
        if receiver.balance + amount > MAX_BALANCE:
            raise _balance_limit_error()
        receiver.balance = receiver.balance + amount

        entry = Transaction(
            from_account=from_account_id,
            to_account=to_account_id,
            amount=amount,
        )
        db.add(entry)
        db.flush()
        entry_id = entry.id

    logger.info(f"Transferred {amount} from {from_account_id} to {to_account_id} (entry {entry_id})")
    return entry


def list_transactions(
    db: Session,
    account_id: str,
    limit: int = 100,
    offset: int = 0,
) -> list[Transaction]:
    """Get transfers sent or received by an account, newest first."""
    stmt = (
        select(Transaction)
        .where(or_(Transaction.from_account == account_id, Transaction.to_account == account_id))
        .order_by(Transaction.created_at.desc(), Transaction.id)
        .offset(offset)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())
