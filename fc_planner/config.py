from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "FC Allocation Planner"
    ENVIRONMENT: str = "local"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Input Sources (URL or local path)
    # ==============================
    SALES_SOURCE: Optional[str] = None
    FC_STOCK_SOURCE: Optional[str] = None
    CENTRAL_STOCK_SOURCE: Optional[str] = None
    REMARKS_SOURCE: Optional[str] = None
    SOURCE_WORKBOOK: Optional[str] = None
    SOURCE_TIMEOUT_SECONDS: int = 30


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
