"""Application configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Process-level configuration, read from ``PERCENT_LIFT_*`` env vars.

    User preferences (units, default rest time, ...) are not configured here;
    they live in the ``settings`` table and are read through
    :class:`percent_lift.db.repositories.SettingsRepository`.
    """

    model_config = SettingsConfigDict(env_prefix="PERCENT_LIFT_", env_file=".env", extra="ignore")

    data_dir: Annotated[Path, Field(default=Path("data"), description="Directory holding the SQLite database.")]
    db_name: Annotated[str, Field(default="percent_lift.db", description="SQLite database file name.")]
    log_level: Annotated[str, Field(default="INFO", description="Loguru level for the stderr sink.")]
    rest_tick_seconds: Annotated[float, Field(default=1.0, gt=0, description="Rest timer wake-up interval.")]

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


@lru_cache
def get_config() -> AppConfig:
    """Return the cached process configuration."""
    return AppConfig()
