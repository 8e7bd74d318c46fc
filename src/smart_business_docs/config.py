"""Application settings loaded from the environment or a `.env` file."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed service configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    gemini_api_key: Optional[str] = Field(None, description="API key for the Gemini generative AI API.")
    gemini_model: str = Field("gemini-1.5-flash", description="Gemini model used for consultant replies.")

    jwt_secret: str = Field("dev-secret-change-me", description="Secret used to verify session tokens.")
    jwt_algorithm: str = Field("HS256", description="Signing algorithm for session tokens.")
    jwt_expires_min: int = Field(60, description="Lifetime of issued session tokens in minutes.")

    rate_limit: int = Field(50, description="Requests allowed per client and path within the window.")
    rate_limit_window: int = Field(60, description="Rate limit window in seconds.")

    ready_confidence_threshold: int = Field(65, description="Confidence needed when the model reports readiness.")
    auto_ready_confidence_threshold: int = Field(80, description="Confidence that allows generation outright.")

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


@lru_cache
def get_settings() -> Settings:
    return Settings()
