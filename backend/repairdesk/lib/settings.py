"""
Application settings loaded from environment variables.
Uses pydantic-settings for validation and .env file support.
"""
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Document store
    database_url: str = Field(
        default="",
        description="SQLAlchemy URL of the document store; empty disables all writes"
    )

    # JWT (tokens are issued by the identity provider, only verified here)
    jwt_secret: str = Field(
        default="change-me-in-prod",
        description="Secret key for JWT token verification"
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    admin_email_domain: str = Field(
        default="@satisfied.com",
        description="Users whose email ends with this suffix get admin access"
    )

    # Business
    business_timezone: str = Field(
        default="Asia/Kolkata",
        description="Timezone used for period boundaries and 'today'"
    )

    # Application
    app_name: str = Field(default="Satisfied Computers Backend", description="Application name")
    cors_origins: List[str] = Field(
        default=[
            "http://localhost:3000",  # React dev server
            "http://localhost:5173",  # Vite dev server
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        description="Origins allowed to call the API from a browser"
    )
    debug: bool = Field(default=False, description="Debug mode")


# Global settings instance
settings = Settings()
