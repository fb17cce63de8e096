"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from ROOTS_GEN_* environment variables
  - Fall back to a .env file at the project root
  - Validate types and constraints before any work starts

Command-line flags take precedence over these settings; the settings only
supply defaults.

env_nested_delimiter="__" maps ROOTS_GEN_LOCAL_STORE__PEM_FILE to
local_store.pem_file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the .env file relative to the project root (two levels above this file),
# so settings load correctly regardless of the working directory at runtime.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"

DEFAULT_OUTPUT = Path("roots_list.go")


class LocalStoreSettings(BaseModel):
    """
    Local certificate store source.

    By default the macOS system root keychain is exported with
    /usr/bin/security. Setting `pem_file` reads an exported bundle instead.
    """

    pem_file: Path | None = Field(
        default=None,
        description="PEM bundle to read instead of exporting the system keychain",
    )


class AppSettings(BaseSettings):
    """
    Root application settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="ROOTS_GEN_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    output: Path = Field(default=DEFAULT_OUTPUT, description="Generated file to write")
    local_store: LocalStoreSettings = Field(default_factory=lambda: LocalStoreSettings())

    http_timeout_seconds: int = Field(default=60, ge=1)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level
