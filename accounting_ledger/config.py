"""
Ledger settings, read once from the environment (and .env).
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Accounting Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/accounting_ledger"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Ledger
    # Actor recorded in audit stamps when the caller sends no X-User header
    DEFAULT_ACTOR: str = os.getenv("DEFAULT_ACTOR", "system")
    ENTRY_NUMBER_PREFIX: str = os.getenv("ENTRY_NUMBER_PREFIX", "JE")


@lru_cache()
def get_settings() -> Settings:
    """Settings are built on first use and shared afterwards."""
    return Settings()
