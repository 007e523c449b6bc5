"""Translate service errors into JSON error responses."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from minibank.database import translate_db_error
from minibank.schemas.common import ErrorResponse
from minibank.services.errors import BankError

logger = logging.getLogger(__name__)


def error_response(exc: BankError, status_code: int | None = None) -> JSONResponse:
    """Build the error body for a service error, optionally overriding its status."""
    body = ErrorResponse(error=exc.message, code=exc.code, retryable=exc.retryable or None)
    return JSONResponse(
        status_code=status_code or exc.status_code,
        content=body.model_dump(exclude_none=True),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers shared by every router."""

    @app.exception_handler(BankError)
    async def handle_bank_error(request: Request, exc: BankError) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        body = ErrorResponse(
            error="Invalid request",
            code="invalid_request",
            details=jsonable_encoder(exc.errors()),
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(exclude_none=True))

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception(f"Database error while handling {request.method} {request.url.path}")
        return error_response(translate_db_error(exc))
