"""Configuration model for the theme update resolver."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DAY_IN_SECONDS = 86400


class UpdaterConfig(BaseSettings):
    """Settings passed explicitly to the resolver and its collaborators."""

    index_base_url: str = Field(default="https://index.example.org/")
    cache_namespace: str = Field(default="themeupdater_updates_theme_", min_length=1)
    cache_enabled: bool = Field(default=True)
    default_ttl_seconds: int = Field(default=DAY_IN_SECONDS, ge=1)
    request_timeout_seconds: float = Field(default=10.0, gt=0.0)
    force_check_page: str = Field(default="themeupdater-updates")

    model_config = SettingsConfigDict(
        env_prefix="THEMEUPDATER_",
        extra="ignore",
    )

    @field_validator("index_base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("index_base_url must not be empty")
        return value if value.endswith("/") else f"{value}/"
