# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:// for local dev)
      - JWT_SECRET (secret used to sign and verify access tokens)

    Optional:
      - ACCESS_TOKEN_EXPIRE_MINUTES (defaults to 60, same as the old "1h")
      - CUSTOM_ACAI_PRODUCT_NAME (catalog row backing custom açaí lines)
      - CORS_ORIGINS (comma separated)
      - LOG_LEVEL
    """

    PROJECT_NAME: str = "Açaí Storefront API"
    API_V1_STR: str = "/api"

    DATABASE_URL: str

    # JWT issuance + verification
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Name of the catalog product that backs build-your-own açaí
    CUSTOM_ACAI_PRODUCT_NAME: str = "Açaí Personalizado"

    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
