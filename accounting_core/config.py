"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Accounting Core"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = _as_bool(os.getenv("DEBUG", "false"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./accounting.db"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "console").lower()

    # Ledger
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "OMR")
    SEED_DEFAULTS: bool = _as_bool(os.getenv("SEED_DEFAULTS", "true"))

    # Reporting
    # DRAFT entries count toward reports unless disabled here
    REPORTS_INCLUDE_DRAFTS: bool = _as_bool(
        os.getenv("REPORTS_INCLUDE_DRAFTS", "true")
    )
    CASH_ACCOUNT_CODES: tuple[str, ...] = tuple(
        code.strip()
        for code in os.getenv("CASH_ACCOUNT_CODES", "1000,1100").split(",")
        if code.strip()
    )
    FORECAST_HISTORY_MONTHS: int = int(os.getenv("FORECAST_HISTORY_MONTHS", "6"))
    FORECAST_MONTHS: int = int(os.getenv("FORECAST_MONTHS", "3"))

    # Audit log
    AUDIT_LOG_DEFAULT_LIMIT: int = int(os.getenv("AUDIT_LOG_DEFAULT_LIMIT", "100"))
    AUDIT_LOG_MAX_LIMIT: int = int(os.getenv("AUDIT_LOG_MAX_LIMIT", "500"))


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls, so environment variables are read only
    at startup.
    """
    return Settings()
