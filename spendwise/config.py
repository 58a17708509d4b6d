"""Configuration loaded from the environment (``SPENDWISE_*``) or ``.env``."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="SPENDWISE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Storage
    data_dir: Path = Path("data")

    # Service
    service_name: str = "spendwise"
    log_level: str = "INFO"

    # UI
    submit_delay_seconds: float = 0.3


settings = Settings()
