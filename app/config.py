"""Application Configuration — layered settings via pydantic-settings.

Invariants:
    - Priority: init kwargs > environment (BESTSUB_*, "__" nesting) > .env > JSON config file
    - get_settings() is cached (lru_cache) — single instance per process
    - load_settings(path) writes the default config file when the path does not exist

Design Decisions:
    - Nested sections (server, database, jwt) mirror the JSON config file layout
    - JSON file read through JsonConfigSettingsSource so env vars can still override it
"""

import json
import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_CONFIG_PATH = Path("data") / "config.json"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class DatabaseSettings(BaseModel):
    url: str = "sqlite+aiosqlite:///data/bestsub.db"
    pool_size: int = 20
    max_overflow: int = 10

    @field_validator("url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Plain sqlite:// and postgresql:// URLs get their async drivers."""
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+asyncpg://", 1)
            if v.startswith("sqlite://"):
                return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v


class JWTSettings(BaseModel):
    secret: str = "bestsub-jwt-secret"
    # seconds; <= 0 falls back to 24h
    expires_in: int = 3600


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="BESTSUB_",
        env_nested_delimiter="__",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Frontend build served at "/"
    static_dir: str = "web/out"

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def default_config() -> dict:
    """Config file contents written on first start."""
    return {
        "server": ServerSettings().model_dump(),
        "database": DatabaseSettings().model_dump(),
        "jwt": JWTSettings().model_dump(),
    }


def load_settings(config_path: str | Path | None = None, **overrides) -> Settings:
    """Build Settings backed by a JSON config file, creating it if missing."""
    if config_path is None:
        return Settings(**overrides)

    path = Path(config_path)
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(default_config(), indent=4))

    class FileSettings(Settings):
        model_config = SettingsConfigDict(json_file=path)

    return FileSettings(**overrides)


@lru_cache
def get_settings() -> Settings:
    return load_settings(os.environ.get("BESTSUB_CONFIG_FILE"))
