"""Server configuration.

A single ``ServerConfig`` is built at startup (defaults, then an optional YAML
file, then command-line overrides) and handed to the components that need
it. Nothing reads configuration from module globals.
"""

import tempfile
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DOWNLOADS_PATH = str(Path(tempfile.gettempdir()) / "downloads")


class ServerConfig(BaseModel):
    """Complete configuration for the sync loop and the HTTP server."""

    model_config = ConfigDict(extra="forbid")

    # GlotPress
    gp_url: str = "https://translate.wordpress.com/projects/"
    gp_api_url: str = "https://translate.wordpress.com/api/projects/"
    root_project: str = "woocommerce"
    skip_inactive_projects: bool = False

    # Polling
    mode: Literal["poll", "notified"] = "poll"
    poll_interval: float = Field(default=600.0, description="Seconds to sleep after each cycle")
    update_key: str = "my-secret-key"

    # HTTP client
    request_timeout: float = 30.0
    requests_per_minute: int = 120
    max_retries: int = 1
    user_agent: str = "wc-lang-packs-server/1.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 8081
    downloads_path: str = DEFAULT_DOWNLOADS_PATH
    expose_db: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("poll_interval", "request_timeout")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v

    @field_validator("requests_per_minute", "max_retries")
    @classmethod
    def validate_at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("root_project")
    @classmethod
    def validate_root_project(cls, v: str) -> str:
        v = v.strip("/")
        if not v:
            raise ValueError("root_project must not be empty")
        return v

    @property
    def downloads_dir(self) -> Path:
        return Path(self.downloads_path)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ServerConfig":
        """Load configuration from a YAML file."""
        return cls(**read_yaml(path))

    @classmethod
    def load(
        cls,
        path: Optional[str | Path] = None,
        overrides: Optional[dict[str, Any]] = None,
    ) -> "ServerConfig":
        """Build the configuration from an optional file plus overrides.

        Overrides whose value is ``None`` are ignored so unset command-line
        options do not mask values from the file.

        Raises:
            FileNotFoundError: If ``path`` is given and does not exist
            yaml.YAMLError: If the file is not a YAML mapping
            pydantic.ValidationError: If a value is invalid
        """
        values = read_yaml(path) if path else {}
        values.update({k: v for k, v in (overrides or {}).items() if v is not None})
        return cls(**values)


def read_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML configuration file into a dictionary.

    An empty file yields an empty dictionary. Relative paths are resolved
    against the working directory.

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file is invalid YAML or not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise yaml.YAMLError(f"Config file {path} must hold a mapping, got {type(data).__name__}")
    return data
