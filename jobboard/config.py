"""Runtime settings, read from ``JOBBOARD_*`` environment variables.

Values are validated at startup so a bad setting fails fast.
"""

import logging
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="JOBBOARD_")

    data_file: str = "data/jobs.json"
    session_ttl: int = Field(default=3600, gt=0)  # 1 hour
    cleanup_interval: int = Field(default=300, gt=0)  # every 5 minutes
    sse_ping_interval: float = Field(default=15, gt=0)
    seed_delay: float = Field(default=0.0, ge=0)
    generate_delay: float = Field(default=0.0, ge=0)
    log_level: str = "INFO"


def load_settings() -> Settings:
    return Settings()


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


__all__ = ["Settings", "load_settings", "setup_logging"]
