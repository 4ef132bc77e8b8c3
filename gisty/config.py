"""Service configuration using Pydantic Settings."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api.github.com"


class Settings(BaseSettings):
    """
    Credentials, endpoints and cache location for the gist service.

    Frozen once constructed: every List/Iter/Get call reads the same values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GISTY_",
        frozen=True,
    )

    app_name: str = "Gisty"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080

    # GitHub API settings
    username: str = ""
    token: str = ""
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = 10.0

    # On-disk document cache, disabled when unset
    cache_dir: Path | None = None

    # Iteration
    iter_page_size: int = 40
    iter_cursor: Literal["offset", "page_number"] = "offset"

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _default_api_base_url(cls, value: str | None) -> str:
        if not value:
            return DEFAULT_API_BASE_URL
        return str(value).rstrip("/")

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _expand_cache_dir(cls, value: str | Path | None) -> Path | None:
        if value is None or value == "":
            return None
        return Path(os.path.expanduser(os.path.expandvars(str(value))))


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
