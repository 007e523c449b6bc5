"""User and authentication API endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from minibank.api.deps import get_db, id_str
from minibank.api.errors import error_response
from minibank.schemas.account import AccountResponse
from minibank.schemas.common import ErrorResponse, MessageResponse
from minibank.schemas.user import LoginResponse, UserLogin, UserRegister, UserResponse
from minibank.services import identity, ledger
from minibank.services.errors import UserNotFoundError

router = APIRouter(tags=["users"])


@router.post("/register", response_model=UserResponse, responses={400: {"model": ErrorResponse}})
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a new user."""
    return identity.register(db, user_data.username, user_data.password)


@router.post("/login", response_model=LoginResponse, responses={401: {"model": ErrorResponse}})
def login(user_data: UserLogin, db: Session = Depends(get_db)):
    """Check credentials and return the user with their accounts."""
    try:
        user = identity.login(db, user_data.username, user_data.password)
    except UserNotFoundError as exc:
        # Unknown usernames are a failed login, not a missing resource.
        return error_response(exc, status.HTTP_401_UNAUTHORIZED)

    accounts = ledger.list_accounts(db, user.id)
    return LoginResponse(
        user=UserResponse.model_validate(user),
        accounts=[AccountResponse.model_validate(a) for a in accounts],
    )


@router.get("/users/{user_id}", response_model=UserResponse, responses={404: {"model": ErrorResponse}})
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    """Get a user by id."""
    return identity.get_user(db, id_str(user_id))


@router.delete("/users/{user_id}", response_model=MessageResponse, responses={404: {"model": ErrorResponse}})
def delete_user(user_id: UUID, db: Session = Depends(get_db)):
    """Delete a user together with all of their accounts."""
    if not identity.delete_user(db, id_str(user_id)):
        raise UserNotFoundError()
    return MessageResponse(message="User deleted")


@router.get("/users/{user_id}/accounts", response_model=list[AccountResponse])
def get_user_accounts(user_id: UUID, db: Session = Depends(get_db)):
    """List a user's accounts."""
    return ledger.list_accounts(db, id_str(user_id))
