"""Application configuration helpers.

Environment variables prefixed with ``TRAVEL_QUOTE_`` override the defaults,
e.g. ``TRAVEL_QUOTE_MAX_TRAVELERS=10``.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


DEFAULT_CORS_ORIGINS = ",".join(
    [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "https://localhost:3000",
        "https://127.0.0.1:3000",
    ]
)


class Settings(BaseSettings):
    """Holds runtime configuration loaded from the environment."""

    catalog_path: Optional[Path] = Field(default=None, description="JSON catalog; built-in when unset")
    strict_catalog: bool = Field(default=False, description="Reject catalogs with tier overlaps or gaps")
    max_travelers: int = Field(default=20, ge=1)
    max_traveler_age: int = Field(default=100, ge=0)
    log_level: str = "INFO"
    cors_origins: str = DEFAULT_CORS_ORIGINS

    model_config = SettingsConfigDict(env_prefix="TRAVEL_QUOTE_", extra="ignore")

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings so every module shares the same values."""

    return Settings()
