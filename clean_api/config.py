"""
Configuration management for the catalog API.

Loads and validates environment variables for the application.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    # Service Configuration
    APP_NAME: str = "Clean Architecture API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "production"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./clean_api.db"
    DATABASE_ECHO: bool = False

    # JWT Configuration
    JWT_SECRET_KEY: str = "your-super-secret-key-change-in-production-min-32-chars"
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "CleanArchitectureApi"
    JWT_AUDIENCE: str = "CleanArchitectureApiUsers"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    PASSWORD_RESET_TOKEN_EXPIRE_MINUTES: int = 60

    # Password Hashing
    PASSWORD_HASH_ROUNDS: int = 12

    # Identity
    DEFAULT_ROLE: str = "User"
    SEED_DATABASE: bool = True
    ADMIN_EMAIL: str = "admin@localhost"
    ADMIN_PASSWORD: str = "Admin123!"

    # CORS Configuration (comma-separated string)
    CORS_ORIGINS: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def get_cors_origins(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
