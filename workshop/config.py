# -*- coding: utf-8 -*-
"""
Workshop CRM Configuration
"""
from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    # App info
    APP_NAME: str = "Workshop CRM"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Backend REST API
    API_URL: str = "http://localhost:3000"
    API_TIMEOUT: float = 10.0

    # Validation
    MOBILE_MIN_DIGITS: int = 10

    # Reports
    TOP_N: int = 5

    # Order drafts
    DRAFT_TTL: int = 3600  # 1 hour idle

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Paths
    BASE_DIR: Path = Path(__file__).parent.parent
    DATA_DIR: Path = BASE_DIR / "data"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Messages shown when the backend gives nothing better
GENERIC_ERRORS = {
    "order_create": "Failed to create order. Please try again.",
    "request": "Request failed. Please try again.",
    "transport": "Could not reach the server. Please try again.",
}


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
