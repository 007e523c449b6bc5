"""Application configuration."""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "minibank"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_pool_timeout: int = 30
    lock_timeout_ms: int = 5000
    create_tables_on_startup: bool = True

    # Password hashing (argon2-cffi defaults)
    password_time_cost: int = 3
    password_memory_cost: int = 65536
    password_parallelism: int = 4

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, value: str) -> str:
        """Fail closed when no database target is configured."""
        if not value or not value.strip():
            raise ValueError("DATABASE_URL must be set.")
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {value}")
        return level

    @field_validator("lock_timeout_ms", "database_pool_size", "database_pool_timeout")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
