"""Application configuration and settings management."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, HttpUrl
from pydantic.functional_validators import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the listings subgraph."""

    subgraph_name: str = Field(
        default="listings",
        description="Name reported in the startup log line",
        alias="SUBGRAPH_NAME",
    )
    host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP listener binds to",
        alias="HOST",
    )
    port: int = Field(
        default=4003,
        ge=0,
        le=65535,
        description="TCP port the HTTP listener binds to",
        alias="PORT",
    )
    schema_path: Path = Field(
        default=Path("schema.graphql"),
        description="SDL file loaded once at startup",
        alias="SCHEMA_PATH",
    )
    listings_api_url: HttpUrl = Field(
        default="http://localhost:4010/",
        validate_default=True,
        description="Base URL of the listings REST service",
        alias="LISTINGS_API_URL",
    )
    log_level: str = Field(
        default="INFO",
        description="Root logger level",
        alias="LOG_LEVEL",
    )
    debug: bool = Field(
        default=False,
        description="Include exception details in GraphQL error responses",
        alias="DEBUG",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            level = value.strip().upper()
            if not isinstance(logging.getLevelName(level), int):
                raise ValueError(f"Unknown log level: {value}")
            return level
        return value

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance.

    Using LRU caching keeps a single settings object per process.
    """

    return Settings()  # type: ignore[call-arg]
