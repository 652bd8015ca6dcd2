"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `GROK_SEARCH_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "grok-4-1-fast"
DEFAULT_BASE_URL = "https://api.x.ai/v1"

# Environment variable name -> settings field
_ENV_FIELDS: dict[str, str] = {
    "XAI_API_KEY": "api_key",
    "XAI_MODEL": "model",
    "XAI_BASE_URL": "base_url",
    "XAI_TIMEOUT_S": "timeout_s",
    "GROK_SEARCH_LOG_LEVEL": "log_level",
}


class Settings(BaseSettings):
    """grok-search settings.

    xAI fields use the `XAI_` prefix; tool-level fields use `GROK_SEARCH_`.
    Empty values are treated as unset.
    """

    model_config = SettingsConfigDict(
        env_prefix="XAI_",
        env_file=None,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    # xAI
    api_key: str | None = Field(default=None)
    model: str = Field(default=DEFAULT_MODEL)
    base_url: str = Field(default=DEFAULT_BASE_URL)
    timeout_s: float | None = Field(default=None, gt=0)

    # Tool
    log_level: str = Field(
        default="WARNING",
        validation_alias="GROK_SEARCH_LOG_LEVEL",
    )

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> Settings:
        """Resolve settings from an explicit environment snapshot.

        Unlike `Settings()`, this never looks at the process environment or a `.env` file.

        Args:
            environ: Mapping of environment variable names to values.

        Returns:
            Settings: Parsed settings.
        """

        values = {
            field: environ[name]
            for name, field in _ENV_FIELDS.items()
            if environ.get(name)
        }
        return cls.model_validate(values)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("GROK_SEARCH_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
