"""Transfer API endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from minibank.api.deps import get_db, id_str
from minibank.schemas.common import ErrorResponse
from minibank.schemas.transaction import TransactionResponse, TransferRequest
from minibank.services import ledger

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post(
    "",
    response_model=TransactionResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
def make_transfer(transfer_data: TransferRequest, db: Session = Depends(get_db)):
    """Transfer money between two accounts."""
    return ledger.transfer(
        db,
        id_str(transfer_data.from_account),
        id_str(transfer_data.to_account),
        transfer_data.amount,
    )
