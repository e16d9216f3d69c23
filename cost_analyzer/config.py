"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./cost_analyzer.db"

    # App settings
    app_name: str = "Cost Analyzer API"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # JWT Configuration
    jwt_secret_key: str = "CHANGE-ME-IN-PRODUCTION-USE-LONG-RANDOM-STRING"
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "dev-issuer"
    jwt_clock_skew_seconds: int = 300

    # Development token issuance (defaults to on outside production)
    enable_dev_endpoints: Optional[bool] = None
    dev_token_default_hours: int = 1

    # CORS (React dev server)
    cors_origins: List[str] = [
        "http://localhost:5173",
        "https://localhost:5173",
    ]

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"

    @model_validator(mode="after")
    def default_dev_endpoints(self) -> "Settings":
        if self.enable_dev_endpoints is None:
            self.enable_dev_endpoints = self.app_env != "production"
        return self


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
