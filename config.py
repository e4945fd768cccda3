"""
Application Configuration

Settings come from environment variables or a .env file via pydantic-settings.
get_settings() is cached: one Settings instance per process.
"""
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # API
    cors_origins: str = "*"

    # Store
    seed_data_path: Optional[str] = None

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    @field_validator("log_format", mode="before")
    @classmethod
    def lowercase_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    @field_validator("seed_data_path", mode="before")
    @classmethod
    def empty_path_is_unset(cls, v):
        return v or None

    @property
    def cors_origin_list(self) -> List[str]:
        """CORS_ORIGINS is comma-separated, e.g. "http://a.test,http://b.test"."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
