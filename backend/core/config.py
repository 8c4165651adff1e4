"""
Backend Configuration Module

Centralized settings management using Pydantic.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bottlematch.config import (
    DEFAULT_MAX_KEYWORDS,
    DEFAULT_MIN_MATCH_RATIO,
    DEFAULT_PRODUCT_URL_BASE,
    NO_IMAGE,
    MatchConfig,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # App Info
    app_name: str = Field(default="Bottle Price Compare", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")

    # CORS (browser extension and local frontend)
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        alias="CORS_ORIGINS",
    )

    # Matching
    min_match_ratio: float = Field(
        default=DEFAULT_MIN_MATCH_RATIO, gt=0.0, le=1.0, alias="MIN_MATCH_RATIO"
    )
    max_keywords: int = Field(default=DEFAULT_MAX_KEYWORDS, ge=1, alias="MAX_KEYWORDS")
    product_url_base: str = Field(
        default=DEFAULT_PRODUCT_URL_BASE, alias="PRODUCT_URL_BASE"
    )
    no_image_url: str = Field(default=NO_IMAGE, alias="NO_IMAGE_URL")
    strict_catalog: bool = Field(default=False, alias="STRICT_CATALOG")

    # Request guard
    max_catalog_size: int = Field(default=5000, ge=1, alias="MAX_CATALOG_SIZE")

    def match_config(self) -> MatchConfig:
        """Project the matching settings onto the engine's config value."""
        return MatchConfig(
            min_match_ratio=self.min_match_ratio,
            max_keywords=self.max_keywords,
            product_url_base=self.product_url_base,
            no_image=self.no_image_url,
            strict_catalog=self.strict_catalog,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
