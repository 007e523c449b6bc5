"""User and authentication schemas."""
from datetime import datetime

from pydantic import BaseModel, Field

from minibank.schemas.account import AccountResponse


class UserRegister(BaseModel):
    """User registration request."""
    
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class UserLogin(BaseModel):
    """User login request."""
    
    username: str
    password: str


class UserResponse(BaseModel):
    """Public user info. Never includes password material."""
    
    id: str
    username: str
    created_at: datetime | None = None
    
    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Login result: the user and their accounts."""
    
    user: UserResponse
    accounts: list[AccountResponse]
