"""Account schemas."""
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class AccountCreate(BaseModel):
    """Open an account for a user."""
    
    user_id: UUID


class AccountResponse(BaseModel):
    """Account response."""
    
    id: str
    user_id: str
    balance: Decimal
    
    class Config:
        from_attributes = True


class DepositRequest(BaseModel):
    """Add money to an account."""
    
    account_id: UUID
    amount: Decimal
