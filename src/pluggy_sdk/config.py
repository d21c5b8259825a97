"""
Configuration management (SSOT).

All configuration keys for the SDK and its command-line runner are defined
here; no other module should invent config keys.

Precedence: environment variables > YAML file > defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_BASE_URL = "https://api.pluggy.ai"


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class PluggyConfig:
    """Pluggy API configuration.

    client_id/client_secret are exchanged for an API key on first use.
    """

    client_id: str = ""
    client_secret: str = ""
    base_url: str = DEFAULT_BASE_URL
    # Request timeout (seconds)
    timeout: int = 30
    # Retry attempts for transient GET/DELETE failures (0 = off)
    max_retries: int = 0
    backoff_factor: float = 0.5
    # Seconds between item status checks while waiting on a connection
    poll_interval: float = 3.0
    # Give up waiting on a connection after this many seconds (None = never)
    poll_timeout: float | None = None


@dataclass
class Config:
    """Application configuration (SSOT)."""

    pluggy: PluggyConfig = field(default_factory=PluggyConfig)

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if not self.pluggy.client_id:
            errors.append("pluggy.client_id is required")
        if not self.pluggy.client_secret:
            errors.append("pluggy.client_secret is required")
        if not self.pluggy.base_url:
            errors.append("pluggy.base_url is required")
        elif not self.pluggy.base_url.startswith(("http://", "https://")):
            errors.append("pluggy.base_url must start with http:// or https://")

        if self.pluggy.timeout <= 0:
            errors.append("pluggy.timeout must be positive")
        if self.pluggy.max_retries < 0:
            errors.append("pluggy.max_retries must not be negative")
        if self.pluggy.poll_interval < 0:
            errors.append("pluggy.poll_interval must not be negative")
        if self.pluggy.poll_timeout is not None and self.pluggy.poll_timeout <= 0:
            errors.append("pluggy.poll_timeout must be positive when set")

        return errors

    def require_valid(self) -> None:
        """Raise ConfigValidationError listing every problem."""
        errors = self.validate()
        if errors:
            raise ConfigValidationError("; ".join(errors))


def _env_number(name: str, default, cast):
    """Read a numeric environment override, keeping the default if unset."""
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigValidationError(f"{name} must be a number, got {raw!r}") from e


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    A missing file yields defaults. Environment variables override values:
    - PLUGGY_CLIENT_ID
    - PLUGGY_CLIENT_SECRET
    - PLUGGY_BASE_URL
    - PLUGGY_TIMEOUT (seconds)
    - PLUGGY_POLL_INTERVAL (seconds)
    - PLUGGY_POLL_TIMEOUT (seconds)
    """
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    pluggy_data = data.get("pluggy") or {}

    poll_timeout = pluggy_data.get("poll_timeout")
    pluggy = PluggyConfig(
        client_id=os.environ.get("PLUGGY_CLIENT_ID", pluggy_data.get("client_id", "")),
        client_secret=os.environ.get(
            "PLUGGY_CLIENT_SECRET", pluggy_data.get("client_secret", "")
        ),
        base_url=os.environ.get("PLUGGY_BASE_URL", pluggy_data.get("base_url", DEFAULT_BASE_URL)),
        timeout=_env_number("PLUGGY_TIMEOUT", int(pluggy_data.get("timeout", 30)), int),
        max_retries=int(pluggy_data.get("max_retries", 0)),
        backoff_factor=float(pluggy_data.get("backoff_factor", 0.5)),
        poll_interval=_env_number(
            "PLUGGY_POLL_INTERVAL", float(pluggy_data.get("poll_interval", 3.0)), float
        ),
        poll_timeout=_env_number(
            "PLUGGY_POLL_TIMEOUT",
            float(poll_timeout) if poll_timeout is not None else None,
            float,
        ),
    )

    return Config(pluggy=pluggy)


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Pluggy SDK Configuration
#
# Credentials can also come from the environment:
#   PLUGGY_CLIENT_ID, PLUGGY_CLIENT_SECRET, PLUGGY_BASE_URL

pluggy:
  client_id: "YOUR_CLIENT_ID"
  client_secret: "YOUR_CLIENT_SECRET"
  base_url: "https://api.pluggy.ai"
  timeout: 30                 # Request timeout (seconds)
  max_retries: 0              # Retries for transient GET/DELETE failures
  backoff_factor: 0.5
  poll_interval: 3.0          # Seconds between item status checks
  poll_timeout: null          # Give up waiting after N seconds (null = never)
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
