"""Accounts API endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from minibank.api.deps import get_db, id_str
from minibank.schemas.account import AccountCreate, AccountResponse, DepositRequest
from minibank.schemas.common import ErrorResponse
from minibank.schemas.transaction import TransactionResponse
from minibank.services import ledger

router = APIRouter(tags=["accounts"])


@router.post("/accounts", response_model=AccountResponse, responses={400: {"model": ErrorResponse}})
def create_account(account_data: AccountCreate, db: Session = Depends(get_db)):
    """Open a zero-balance account for a user."""
    return ledger.create_account(db, id_str(account_data.user_id))


@router.get("/accounts/{user_id}", response_model=list[AccountResponse])
def list_accounts(user_id: UUID, db: Session = Depends(get_db)):
    """List the accounts owned by the user with this id."""
    return ledger.list_accounts(db, id_str(user_id))


@router.get("/accounts/{account_id}/transactions", response_model=list[TransactionResponse])
def get_transaction_history(
    account_id: UUID,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Transfers sent or received by an account, newest first."""
    return ledger.list_transactions(db, id_str(account_id), limit=limit, offset=offset)


@router.post(
    "/addmoney",
    response_model=AccountResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def add_money(deposit_data: DepositRequest, db: Session = Depends(get_db)):
    """Deposit money into an account."""
    return ledger.deposit(db, id_str(deposit_data.account_id), deposit_data.amount)
