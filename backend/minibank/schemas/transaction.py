"""Transfer schemas."""
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class TransferRequest(BaseModel):
    """Move money from one account to another."""
    
    from_account: UUID
    to_account: UUID
    amount: Decimal


class TransactionResponse(BaseModel):
    """Ledger entry response."""
    
    id: str
    from_account: str | None
    to_account: str | None
    amount: Decimal
    created_at: datetime | None
    
    class Config:
        from_attributes = True
