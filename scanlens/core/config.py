"""
Core configuration management using Pydantic Settings.
Provider credentials and lookup tuning are read from the environment.
"""

from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from scanlens.services.barcode.interfaces import ProductSource


DEFAULT_PROVIDER_ORDER = [
    ProductSource.BARCODE_LOOKUP,
    ProductSource.OPENFOODFACTS,
    ProductSource.EAN_SEARCH,
    ProductSource.BARCODE_SPIDER,
    ProductSource.UPC_DATABASE,
]


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Application
    app_name: str = "ScanLens Product Lookup API"
    version: str = "1.0.0"
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Provider credentials
    barcode_lookup_api_key: Optional[str] = Field(default=None)
    barcode_spider_api_key: Optional[str] = Field(default=None)
    upc_database_api_key: Optional[str] = Field(default=None)
    ean_search_token: str = Field(default="0")  # free tier

    # Lookup behaviour
    provider_timeout: float = Field(default=8.0, gt=0)
    provider_order: Annotated[List[ProductSource], NoDecode] = Field(default_factory=lambda: list(DEFAULT_PROVIDER_ORDER))
    user_agent: str = Field(default="ScanLens/1.0 (+https://github.com/scanlens)")
    search_page_size_limit: int = Field(default=50, gt=0)

    @field_validator("provider_order", mode="before")
    @classmethod
    def parse_provider_order(cls, v):
        """Parse provider order from a comma separated string or list."""
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("provider_order")
    @classmethod
    def validate_provider_order(cls, v):
        if ProductSource.FALLBACK in v:
            raise ValueError("Fallback is always last and cannot be ordered")
        if len(set(v)) != len(v):
            raise ValueError("provider_order contains duplicates")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment values."""
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
