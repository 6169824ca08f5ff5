from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "test", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    APP_URL: str = "http://localhost:3000"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "https://shutterbox.app",
        "https://www.shutterbox.app",
    ]

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Tokens
    # Placeholder secrets keep local/test runs working; real deployments
    # override them via env.
    JWT_SECRET: str = "dev-jwt-secret"
    JWT_ALGORITHM: str = "HS256"
    SESSION_TOKEN_TTL_DAYS: int = 7
    SHARE_CAPABILITY_TTL_SECONDS: int = 3600
    SERVICE_ROLE_SECRET: str = "dev-service-role-secret"

    # Microservices URLs
    WALLET_SERVICE_URL: str = "http://wallet-service:8001"
    GALLERY_SERVICE_URL: str = "http://gallery-service:8002"
    IDENTITY_SERVICE_URL: str = "http://identity-service:8003"

    # Credits
    ALBUM_CREATION_COST: int = 10
    WELCOME_BONUS_CREDITS: int = 300

    # OTP
    OTP_EXPIRY_MINUTES: int = 10
    OTP_MAX_ATTEMPTS: int = 5
    OTP_MAX_PER_WINDOW: int = 3
    OTP_WINDOW_SECONDS: int = 3600

    # Rate limiting (slowapi storage, e.g. redis://redis:6379/0)
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_ENABLED: bool = True

    # Email (SMTP)
    SMTP_HOST: str = "smtp-relay.brevo.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    DEFAULT_FROM_EMAIL: str = "no-reply@shutterbox.app"
    DEFAULT_FROM_NAME: str = "Shutterbox"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
