from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GTFSConfig(BaseSettings):
    """Configuration for downloading and loading GTFS bundles.

    Automatically loads from environment variables and .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    feed_url: str | None = Field(default=None, alias="GTFS_FEED_URL")
    download_timeout: float = Field(default=30.0, alias="GTFS_DOWNLOAD_TIMEOUT")
    user_agent: str = Field(default="gtfs-structures", alias="GTFS_USER_AGENT")


@lru_cache
def get_config() -> GTFSConfig:
    """Get GTFS configuration (cached singleton).

    Returns:
        GTFSConfig with values from .env file or environment variables.
    """
    return GTFSConfig()
