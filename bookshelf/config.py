"""Application configuration."""

import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Literal

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# The store accepts at most this many writes in one committed batch
STORE_BATCH_LIMIT = 500


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Book store. Unset means "store unavailable": reads come back empty and
    # writes are skipped.
    DATABASE_URL: str | None = None

    # API (constants, not from env)
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Bookshelf API"
    VERSION: str = "0.1.0"

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = "development"

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Books
    SEARCH_TEXT_MAX_LENGTH: int = 500
    DELETE_BATCH_SIZE: int = STORE_BATCH_LIMIT
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def blank_database_url_is_unset(cls, value: str | None) -> str | None:
        """Treat an empty DATABASE_URL like a missing one."""
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("DELETE_BATCH_SIZE", mode="after")
    @classmethod
    def validate_batch_size(cls, value: int) -> int:
        """Batches must be non-empty and fit the store's write ceiling."""
        if not 1 <= value <= STORE_BATCH_LIMIT:
            msg = f"DELETE_BATCH_SIZE must be between 1 and {STORE_BATCH_LIMIT}"
            raise ValueError(msg)
        return value

    @property
    def store_configured(self) -> bool:
        """Whether a book store is configured at all."""
        return self.DATABASE_URL is not None


def configure_logging(environment: str = "development") -> None:
    """Configure structured logging with structlog."""
    # Determine if we should use JSON output (production) or console output (dev)
    use_json = environment == "production"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )

    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Cached loggers ignore later reconfiguration, so only production caches
        cache_logger_on_first_use=use_json,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
