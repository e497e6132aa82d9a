"""
Application-wide configuration via pydantic-settings.

Connection parameters come from DB_USER, DB_PASSWORD, DB_HOST, DB_PORT and
DB_NAME, read from the process environment and a local .env file.
DATABASE_URL overrides them entirely (handy for SQLite during development).
Application switches use the VGC_ prefix, e.g. VGC_DB_ECHO=true enables
SQLAlchemy query logging.

Usage:
    from vgc_manager.config.settings import load_settings

    settings = load_settings()          # reads ./.env
    engine = create_db_engine(settings)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from vgc_manager.core.exceptions import ConfigurationError

DEFAULT_ENV_FILE = Path(".env")

# Presence of any of these in the process environment makes the .env file optional.
_CONNECTION_VARS = ("DATABASE_URL", "DB_USER", "DB_NAME")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # --- Application metadata ---
    app_name: str = "Video Game Collection"
    app_version: str = "0.1.0"

    # --- Database connection ---
    db_user: Optional[str] = Field(None, validation_alias="DB_USER")
    db_password: str = Field("", validation_alias="DB_PASSWORD")
    db_host: str = Field("localhost", validation_alias="DB_HOST")
    db_port: int = Field(5432, validation_alias="DB_PORT")
    db_name: Optional[str] = Field(None, validation_alias="DB_NAME")
    database_url: Optional[str] = Field(None, validation_alias="DATABASE_URL")

    # --- Behaviour switches ---
    db_echo: bool = Field(False, validation_alias="VGC_DB_ECHO")
    log_level: str = Field("INFO", validation_alias="VGC_LOG_LEVEL")
    lenient_parsing: bool = Field(False, validation_alias="VGC_LENIENT_PARSING")
    create_schema: bool = Field(True, validation_alias="VGC_CREATE_SCHEMA")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @model_validator(mode="after")
    def _require_connection(self) -> "Settings":
        if self.database_url:
            return self
        missing = [
            var for var, value in (("DB_USER", self.db_user), ("DB_NAME", self.db_name))
            if not value
        ]
        if missing:
            raise ValueError(f"missing database settings: {', '.join(missing)}")
        return self

    @property
    def sqlalchemy_url(self) -> Union[str, URL]:
        """URL passed to create_engine(); password is escaped by URL.create."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+psycopg",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


def load_settings(env_file: Union[str, Path, None] = DEFAULT_ENV_FILE) -> Settings:
    """
    Build Settings from the environment and env_file.

    Raises ConfigurationError when the env file is missing or unreadable and
    the process environment does not provide the connection either, or when
    the resulting values are incomplete.
    """
    env_path = Path(env_file) if env_file is not None else None
    has_file = env_path is not None and env_path.is_file()

    if not has_file and not any(os.environ.get(var) for var in _CONNECTION_VARS):
        raise ConfigurationError(f"Environment file not found: {env_path}")

    try:
        return Settings(_env_file=env_path if has_file else None)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read environment file {env_path}: {exc}") from exc
