"""
Application configuration using Pydantic Settings
"""
from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """
    # Remote workflow API (source of invoices, projects, payments, profiles)
    API_BASE_URL: str = "http://localhost:3001/api"
    API_TIMEOUT: float = 10.0
    # Service account token for background refresh (requests use the caller's token)
    API_SERVICE_TOKEN: str = ""

    # Application
    DEBUG: bool = False

    # Snapshot refresh (seconds between background refetches, 0 disables)
    REFRESH_INTERVAL_SECONDS: int = 0

    # Finance engine
    TOTALS_TOLERANCE: Decimal = Decimal("0.01")
    # Invoices screen: show every invoice when the editor/month filter matches nothing
    INVOICE_FILTER_FALLBACK: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance (singleton)
    """
    return Settings()
