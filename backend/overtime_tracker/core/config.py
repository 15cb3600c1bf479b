import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "Overtime Tracking API"
    database_url: str = Field(
        default="postgresql://postgres:postgres@db:5432/overtime",
        description="Database connection string",
    )
    cors_origins: Annotated[list[str], NoDecode] = []
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    otlp_endpoint: str | None = Field(default=None, description="OTLP endpoint for traces/metrics")

    office_timezone: str = Field(default="UTC", description="Timezone the office hours are declared in")
    poll_interval_seconds: float = Field(default=1.5, gt=0, description="Advised client poll cadence")
    write_retry_limit: int = Field(default=3, ge=1, description="Attempts before a contended write gives up")

    model_config = SettingsConfigDict(env_prefix="OVERTIME_", extra="ignore")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("OVERTIME_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None


settings = get_settings()
