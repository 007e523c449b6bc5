"""minibank - banking backend API."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from minibank.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    from minibank.database import Base, check_database_connection, engine

    # Import all models so they're registered with Base
    from minibank import models  # noqa: F401

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # No usable pool means no service: let startup fail.
    check_database_connection()

    if settings.create_tables_on_startup:
        Base.metadata.create_all(bind=engine)

    logger.info(f"{settings.app_name} started")
    yield
    engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Users, accounts and atomic money transfers",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


# Import and include routers
from minibank.api import accounts, transactions, users  # noqa: E402
from minibank.api.errors import register_error_handlers  # noqa: E402

register_error_handlers(app)
app.include_router(users.router)
app.include_router(accounts.router)
app.include_router(transactions.router)


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("minibank.main:app", host="127.0.0.1", port=3000)
