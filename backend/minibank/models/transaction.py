"""Ledger entry recorded for every completed transfer."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, func

from minibank.database import Base
from minibank.models.account import MONEY


class Transaction(Base):
    """Immutable record of a transfer between two accounts."""
    
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_from_account_created", "from_account", "created_at"),
        Index("ix_transactions_to_account_created", "to_account", "created_at"),
    )
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # History outlives deleted accounts, so the references are nulled, not cascaded.
    from_account = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"))
    to_account = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"))
    amount = Column(MONEY, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
