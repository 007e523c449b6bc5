"""SQLAlchemy models package."""
from minibank.models.user import User
from minibank.models.account import Account
from minibank.models.transaction import Transaction

__all__ = [
    "User",
    "Account",
    "Transaction",
]
