"""Environment-driven configuration for the back-office service.

Every tunable lives on ``AppSettings`` so the rest of the code never reads
``os.environ`` directly. Values come from the process environment first and
then from ``.env``/``.env.local`` files next to the working directory.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Restaurant Back Office"
    LOG_LEVEL: str = "INFO"

    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parent.parent.parent / "data")
    ASSETS_DIR: Path | None = None

    API_KEY: str = Field(default="", validation_alias=AliasChoices("API_KEY", "API_TOKEN"))
    JWT_SECRET: str = "change-me"
    JWT_ACCESS_TTL_MIN: int = 15
    JWT_REFRESH_TTL_DAYS: int = 7
    ALLOWED_ORIGINS: list[str] = Field(default_factory=list)

    DB_URL: str = Field(default="", validation_alias=AliasChoices("DATABASE_URL", "DB_URL"))

    # Pricing defaults. 2.5 is the "standard" 150% markup preset.
    DEFAULT_MARKUP: Decimal = Decimal("2.5")
    MIN_PROFIT_MARGIN: Decimal = Decimal("20")
    MIN_MARKUP_PERCENTAGE: Decimal = Decimal("50")

    LOGO_MAX_BYTES: int = 5 * 1024 * 1024

    @property
    def assets_dir(self) -> Path:
        return self.ASSETS_DIR if self.ASSETS_DIR is not None else self.DATA_DIR / "assets"

    @property
    def db_url(self) -> str:
        return self.DB_URL or f"sqlite:///{self.DATA_DIR / 'backoffice.db'}"

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: Any) -> list[str]:
        if value in (None, "", []):
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Iterable):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("ALLOWED_ORIGINS must be a comma separated string or list")

    @field_validator("DEFAULT_MARKUP")
    @classmethod
    def markup_must_be_positive(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise ValueError("DEFAULT_MARKUP must be greater than zero")
        return value


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    settings.assets_dir.mkdir(parents=True, exist_ok=True)
    return settings


settings = get_settings()
