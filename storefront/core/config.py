# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key, every query still goes through RLS)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - LOCAL_STORAGE_PATH (JSON file backing device-local storage;
        unset => in-memory only)
      - LOG_LEVEL
    """

    PROJECT_NAME: str = "Storefront State API"
    API_V1_STR: str = "/api/v1"

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # JWT verification for the HTTP surface
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"


    LOCAL_STORAGE_PATH: str | None = None
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
