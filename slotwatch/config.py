from __future__ import annotations

from functools import lru_cache

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration (env-friendly).

    Every field can be overridden with a ``SLOTWATCH_`` prefixed environment
    variable or from a local .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SLOTWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "slotwatch"
    version: str = "0.1.0"

    api_base_url: AnyHttpUrl = "https://api3.clicsante.ca/v3"
    booking_base_url: AnyHttpUrl = "https://clients3.clicsante.ca"

    # Public credential shipped with the booking portal itself.
    auth_login: str = "public@trimoz.com"
    auth_password: str = "12345678!"
    role_header: str = "public"
    product_header: str = "clicsante"

    timezone: str = "America/Toronto"
    unified_service: int = 237
    horizon_days: int = Field(default=100, ge=1)
    excluded_name_fragment: str = "astrazeneca"
    max_pages: int = Field(default=50, ge=1)

    # 0 means no timeout at all.
    http_timeout_s: float = Field(default=0.0, ge=0.0)

    # 0 rebuilds the catalog on every pass.
    catalog_ttl_s: float = Field(default=0.0, ge=0.0)

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
