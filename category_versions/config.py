"""Configuration management for the category version engine."""

from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Remote store
    api_base_url: str = Field(default="http://127.0.0.1:8000")
    api_token: str | None = Field(default=None)
    request_timeout: float = Field(default=30.0, gt=0)

    # Depth of the backend's fixed level numbering
    max_category_levels: int = Field(default=5, ge=1, le=10)

    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production points at a real, encrypted remote store."""
        if self.environment == "production":
            parsed = urlparse(self.api_base_url)
            if parsed.hostname in ("localhost", "127.0.0.1"):
                raise ValueError("API_BASE_URL should not use localhost in production")
            if parsed.scheme != "https":
                raise ValueError("API_BASE_URL must use https in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
