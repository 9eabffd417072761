# app/client/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    Storefront client settings, read from STOREFRONT_* env vars.

      - STOREFRONT_API_BASE_URL (backend root including the /api prefix)
      - STOREFRONT_STORAGE_PATH (JSON file for token, user and guest cart;
        unset keeps everything in memory)
      - STOREFRONT_CUSTOM_ACAI_NAME (display name of guest custom açaí lines;
        matches the backend CUSTOM_ACAI_PRODUCT_NAME)
    """

    API_BASE_URL: str = "http://localhost:8000/api"
    STORAGE_PATH: str | None = None
    CUSTOM_ACAI_NAME: str = "Açaí Personalizado"

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
