"""Application configuration loaded from environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """s3logstore settings from env vars."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # s3://access_key_id:secret_access_key@host/location/bucket_name?ssl=true
    log_store_url: str = ""

    # Root logger level for the CLI (DEBUG, INFO, WARNING, ERROR)
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Return loaded settings from environment (and .env if present)."""
    return Settings()
