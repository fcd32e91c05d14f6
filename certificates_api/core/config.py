"""
Application configuration settings.
Loads from environment variables (and .env) with type checking.
"""

from pathlib import Path
from pydantic import validator
from pydantic_settings import BaseSettings
from typing import List

BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    # Application Metadata
    PROJECT_TITLE: str = "Certificates API"
    PROJECT_DESCRIPTION: str = "Backend API for storing and retrieving student certificates"
    PROJECT_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"  # or 'testing', 'production'

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database Configuration
    MONGODB_URI: str = "mongodb://127.0.0.1:27017/certificates"
    MONGODB_DEFAULT_DB: str = "certificates"
    MONGODB_COLLECTION: str = "certificates"
    MONGODB_RETRY_DELAY_SECONDS: float = 5.0
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    # Requests
    MAX_BODY_SIZE: int = 50 * 1024 * 1024  # 50MB
    STATIC_DIR: str = str(BASE_DIR / "static")

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    @validator("MAX_BODY_SIZE")
    def validate_max_body_size(cls, v):
        if v > 100 * 1024 * 1024:  # 100MB max
            raise ValueError("MAX_BODY_SIZE cannot exceed 100MB")
        return v

    @validator("MONGODB_RETRY_DELAY_SECONDS")
    def validate_retry_delay(cls, v):
        if v < 0:
            raise ValueError("MONGODB_RETRY_DELAY_SECONDS cannot be negative")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


settings = Settings()
