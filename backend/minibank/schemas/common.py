"""Shared response schemas."""
from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Generic message response."""
    
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    
    error: str
    code: str
    details: list[Any] | None = None
    # Only sent, as true, for errors the client may safely retry.
    retryable: bool | None = None
