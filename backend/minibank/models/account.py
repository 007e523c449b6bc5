"""Bank account model."""
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from minibank.database import Base

CENTS_PER_UNIT = 100
CENT = Decimal("0.01")


class Money(TypeDecorator):
    """Exact decimal with two fractional digits and up to 16 integer digits.

    Server databases store it as NUMERIC(18, 2). SQLite has no exact decimal
    type and would round-trip through float, so there it is stored as integer
    cents instead.
    """

    impl = Numeric
    cache_ok = True

    def __init__(self):
        super().__init__(precision=18, scale=2, asdecimal=True)

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(BigInteger())
        return super().load_dialect_impl(dialect)

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return int((Decimal(value) * CENTS_PER_UNIT).to_integral_value())

    def process_result_value(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return (Decimal(value) / CENTS_PER_UNIT).quantize(CENT)


MONEY = Money()


class Account(Base):
    """Account holding an exact decimal balance for one user."""
    
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),
    )
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    balance = Column(MONEY, nullable=False, default=Decimal("0.00"), server_default="0")
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
    
    # Relationships
    user = relationship("User", back_populates="accounts")
