"""
SpoolVault — Configuration settings.

Loads from environment variables (or a .env file) with sensible defaults.
"""

from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./spoolvault.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Perimeter key - leave empty to disable (trusted network mode)
    api_key: Optional[str] = None

    # JWT secret for token signing. Required for login.
    jwt_secret_key: Optional[str] = None
    access_token_expire_hours: int = 24

    # Comma-separated list, e.g. CORS_ORIGINS=http://localhost:5173,http://example.com
    cors_origins: str = ""

    # Login throttling (slowapi). Disable for test runs.
    rate_limit_enabled: bool = True

    # Bootstrap account created on first start when the users table is empty
    admin_username: str = "admin"
    admin_password: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
