"""Configuration loading and constants for livedash."""

import os
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

CONFIG_FILE_NAME = ".livedash.yaml"

DEFAULT_TITLE = "Deployment Dashboard"
DEFAULT_REFRESH_INTERVAL = 0.1
DEFAULT_RESERVED_ROWS = 10
DEFAULT_LOG_BUFFER_SIZE = 1000

# Minimum reserved area: title row, one task row, separator
MIN_RESERVED_ROWS = 3

DEFAULT_WIDGET_DEFAULTS = {
    "progress_width": 40,
    "progress_color": "green",
    "dialog_width": 50,
    "dialog_height": 10,
    "combo_width": 30,
    "slider_width": 30,
}

DEFAULT_THEME = {
    "primary": "blue",
    "secondary": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "white",
}


@dataclass
class DashboardConfig:
    """Settings for one dashboard session, stored in .livedash.yaml."""

    title: str = DEFAULT_TITLE
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    reserved_rows: int = DEFAULT_RESERVED_ROWS
    log_buffer_size: int = DEFAULT_LOG_BUFFER_SIZE
    enable_colors: bool = True
    enable_animations: bool = True
    widget_defaults: dict[str, Any] = field(
        default_factory=lambda: dict(DEFAULT_WIDGET_DEFAULTS)
    )
    theme: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_THEME))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DashboardConfig":
        """Create a config from a parsed YAML mapping.

        Unknown keys are ignored. Nested ``widget_defaults`` and ``theme``
        mappings are merged over the defaults so a file only needs to name
        the values it changes.

        Raises:
            ConfigError: if a value has the wrong type or is out of range
        """
        known_fields = {
            "title",
            "refresh_interval",
            "reserved_rows",
            "log_buffer_size",
            "enable_colors",
            "enable_animations",
        }
        kwargs: dict[str, Any] = {k: v for k, v in data.items() if k in known_fields}

        widget_defaults = dict(DEFAULT_WIDGET_DEFAULTS)
        widget_defaults.update(data.get("widget_defaults") or {})
        theme = dict(DEFAULT_THEME)
        theme.update(data.get("theme") or {})

        try:
            config = cls(**kwargs, widget_defaults=widget_defaults, theme=theme)
            config.refresh_interval = float(config.refresh_interval)
            config.reserved_rows = int(config.reserved_rows)
            config.log_buffer_size = int(config.log_buffer_size)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config value: {e}") from e

        config.validate()
        return config

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: on the first out-of-range value
        """
        if self.refresh_interval <= 0:
            raise ConfigError(
                f"refresh_interval must be positive, got {self.refresh_interval}"
            )
        if self.reserved_rows < MIN_RESERVED_ROWS:
            raise ConfigError(
                f"reserved_rows must be at least {MIN_RESERVED_ROWS}, got {self.reserved_rows}"
            )
        if self.log_buffer_size < 1:
            raise ConfigError(
                f"log_buffer_size must be at least 1, got {self.log_buffer_size}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict for YAML serialization."""
        return asdict(self)

    def widget_default(self, key: str, fallback: Any = None) -> Any:
        return self.widget_defaults.get(key, fallback)

    def theme_color(self, name: str) -> str:
        """Map a theme role (success, error, ...) to a color name."""
        return self.theme.get(name, name)


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

def get_config_path() -> Path:
    """Get the config file path.

    Can be overridden via the LIVEDASH_CONFIG environment variable.
    """
    env_override = os.environ.get("LIVEDASH_CONFIG")
    if env_override:
        return Path(env_override)
    return Path.cwd() / CONFIG_FILE_NAME


def get_channel_dir() -> Path:
    """Get the well-known directory holding task channel files.

    Every process cooperating on the same task name must resolve the same
    directory, so this defaults to a fixed folder under the system temp dir.
    Can be overridden via the LIVEDASH_CHANNEL_DIR environment variable
    (used by tests).
    """
    env_override = os.environ.get("LIVEDASH_CHANNEL_DIR")
    if env_override:
        return Path(env_override)
    return Path(tempfile.gettempdir()) / "livedash"


def get_logs_dir() -> Path:
    """Get the directory for the livedash log file."""
    return Path.cwd() / ".livedash" / "logs"


# ---------------------------------------------------------------------------
# Loading / saving
# ---------------------------------------------------------------------------

def load_config(path: Path | str | None = None) -> DashboardConfig:
    """Load the dashboard config.

    Args:
        path: Config file (defaults to get_config_path())

    Returns:
        DashboardConfig (defaults if the file doesn't exist)

    Raises:
        ConfigError: if the file is not valid YAML or holds invalid values
    """
    config_path = Path(path) if path is not None else get_config_path()

    if not config_path.exists():
        return DashboardConfig()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    return DashboardConfig.from_dict(data)


def save_config(config: DashboardConfig, path: Path | str | None = None) -> Path:
    """Write the config as YAML.

    Returns:
        Path of the written file
    """
    config_path = Path(path) if path is not None else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    return config_path
