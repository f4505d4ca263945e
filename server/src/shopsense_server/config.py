"""Server configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopsense.tracking.config import TrackingSettings


class Settings(BaseSettings):
    """
    Server settings loaded from environment variables.

    The engine's own settings sit under ``tracking``. They are read from
    ``SHOPSENSE_*`` like in any other embedding of the engine.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Identity records and tracked markers
    database_url: str = "postgresql://localhost/shopsense"
    pool_min_size: int = 1
    pool_max_size: int = 10
    create_schema: bool = True

    # Server
    port: int = 8007
    debug: bool = False
    log_level: str = "INFO"

    tracking: TrackingSettings = Field(default_factory=TrackingSettings)


settings = Settings()
