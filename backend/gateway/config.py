"""
Configuration and settings for the gateway.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEVELOPMENT = "development"


class Settings(BaseSettings):
    """Environment-backed settings for the API gateway and diagnostics."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Deployment
    node_env: str = Field(default=DEVELOPMENT)
    port: int = Field(default=5000)
    log_level: str = Field(default="INFO")

    # HTTP
    cors_origin: str = Field(default="http://localhost:5173")
    max_body_bytes: int = Field(default=10 * 1024 * 1024)

    # Firebase
    use_firebase: bool = Field(default=False)
    firebase_db_url: Optional[str] = Field(default=None)
    firebase_service_account_path: str = Field(
        default="firebase-service-account.json"
    )
    firebase_probe_collection: str = Field(default="users")
    firebase_probe_timeout: float = Field(default=5.0, gt=0)

    @property
    def is_development(self) -> bool:
        return self.node_env == DEVELOPMENT

    @property
    def firebase_enabled(self) -> bool:
        """Firebase is skipped only in development, unless forced on."""
        return not self.is_development or self.use_firebase


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
