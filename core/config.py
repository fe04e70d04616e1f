"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database (no default: imports and the API refuse to start without it)
    DATABASE_URL: Optional[str] = None

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Import jobs
    IMPORT_BATCH_SIZE: int = 100
    DEFAULT_CITY_ID: Optional[str] = None
    BLIP_DEFAULT_PATH: str = "WebScrapeData/Digital_Billboards_blip_Houston.json"

    # Query limits
    QUERY_DEFAULT_LIMIT: int = 50
    QUERY_MAX_LIMIT: int = 2500

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
