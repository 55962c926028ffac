# backend/farmdesk/core/config.py

from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # "memory" serves fixture data, "remote" talks to the record API
    STORE_BACKEND: str = "memory"

    # Remote record API (only read when STORE_BACKEND == "remote")
    RECORD_API_URL: str = "https://api.apper.io"
    RECORD_API_PROJECT_ID: Optional[str] = None
    RECORD_API_PUBLIC_KEY: Optional[str] = None
    RECORD_API_TIMEOUT: float = 10.0

    # Artificial latency of the in-memory store
    MOCK_DELAY_MIN_MS: int = 200
    MOCK_DELAY_MAX_MS: int = 500

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"

settings = Settings()
