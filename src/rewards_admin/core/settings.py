from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="allow")

    environment: Literal["development", "staging", "production"] = "development"
    database_url: str = "sqlite+aiosqlite:///./rewards_admin.db"
    database_echo: bool = False

    log_level: str = "INFO"
    log_json: bool = True

    # Dashboard list views
    dashboard_path_prefix: str = "/dashboard"
    list_cache_enabled: bool = True
    list_cache_ttl_seconds: int = 300

    # Form submissions
    success_redirect_delay_ms: int = 1500


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
