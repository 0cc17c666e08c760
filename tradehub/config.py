"""Application configuration using Pydantic Settings"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    environment: str = "development"

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # AWS / S3
    aws_region: str = "ap-south-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_endpoint_url: Optional[str] = None
    s3_bucket: str = "tradehub-uploads"
    max_upload_size_mb: int = 10
    max_portfolio_files: int = 10

    # Security
    secret_key: str
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24
    bcrypt_rounds: int = 12
    auth_cookie_name: str = "authToken"
    auth_cookie_secure: bool = False

    # Email verification
    verification_code_ttl_minutes: int = 10
    verification_single_use: bool = False

    # Placeholder pictures for new accounts
    default_avatar_url: str = (
        "https://tradehub-uploads.s3.ap-south-1.amazonaws.com/defaults/profile_avatar.jpg"
    )
    default_cover_url: str = (
        "https://tradehub-uploads.s3.ap-south-1.amazonaws.com/defaults/default_cover.png"
    )

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def signing_key(self) -> str:
        """Key used to sign tokens; jwt_secret wins over secret_key when set"""
        return self.jwt_secret or self.secret_key

    @property
    def async_database_url(self) -> str:
        """Database URL with an async driver"""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.database_url
