"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "homeu-scores"
    log_level: str = "INFO"

    # Scoring engine
    native_backend: Optional[str] = None  # Dotted module path, e.g. "homeu_native.scores"
    batch_max_workers: int = 4
    batch_parallel_threshold: int = 32  # Smaller batches are scored inline

    # Request defaults
    default_historical_collection_rate: float = 95.0


settings = Settings()
