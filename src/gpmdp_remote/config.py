"""Centralized application configuration."""

import os
import tomllib
from pathlib import Path
from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

DEFAULT_DATA_DIR = Path.home() / ".local" / "gpmdp-remote"
DEFAULT_URL = "ws://localhost:5672"
DEFAULT_CLIENT_NAME = "gpmdp-remote"

# Environment variable holding the credential issued by `gpmdp-remote auth`
AUTH_KEY_ENV = "GPMDP_AUTH_KEY"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for configuration and logs")
    url: str = Field(default=DEFAULT_URL, description="Websocket endpoint of the player's control API")
    client_name: str = Field(default=DEFAULT_CLIENT_NAME, min_length=1, description="Client identifier shown by the player")
    auth_key: str | None = Field(default=None, description="Credential issued by a previous interactive auth")
    log_level: LogLevel = Field(default="INFO", description="Level of the package log file")

    @field_validator("url")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        if not value.startswith(("ws://", "wss://")):
            msg = f"url must start with ws:// or wss://, got {value!r}"
            raise ValueError(msg)
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "gpmdp-remote.log"

    @classmethod
    def build(cls, data_dir: Path | None = None, url: str | None = None, *, verbose: bool = False) -> Self:
        """Build a Config from defaults, optional config.toml, environment, and CLI overrides.

        Later sources win: config.toml < GPMDP_AUTH_KEY < explicit arguments. ``verbose`` forces DEBUG logging.
        """
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {"data_dir": resolved_dir}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            for key in ("url", "client_name", "log_level"):
                if isinstance(toml_data.get(key), str):
                    kwargs[key] = toml_data[key]

        if auth_key := os.environ.get(AUTH_KEY_ENV):
            kwargs["auth_key"] = auth_key
        if url is not None:
            kwargs["url"] = url
        if verbose:
            kwargs["log_level"] = "DEBUG"

        return cls(**kwargs)
