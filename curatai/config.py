"""Client configuration.

Configuration hierarchy (highest to lowest priority):
1. Environment variables
2. YAML config file passed to ``load_config``
3. Hardcoded defaults

Example:
    >>> from curatai.config import get_config
    >>> config = get_config()
    >>> config.backend_url
    'http://localhost:8000'
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = "http://localhost:8000"
DEFAULT_STORAGE_PATH = Path.home() / ".curatai" / "storage.json"

# Environment variable -> (field name, converter)
ENV_VARS = {
    "VITE_BACKEND_URL": ("backend_url", str),
    "VITE_GOOGLE_CLIENT_ID": ("google_client_id", str),
    "CURATAI_API_TIMEOUT_SEC": ("api_timeout_sec", int),
    "CURATAI_UPLOAD_TIMEOUT_SEC": ("upload_timeout_sec", int),
    "CURATAI_STORAGE_PATH": ("storage_path", Path),
    "CURATAI_LOG_LEVEL": ("log_level", str),
    "CURATAI_LOG_FILE": ("log_file", Path),
    "CURATAI_IMAGES_PER_ROW": ("images_per_row", int),
}


@dataclass
class AppConfig:
    """Configuration for the CuratAI client."""

    # Backend settings
    backend_url: str = DEFAULT_BACKEND_URL
    google_client_id: Optional[str] = None
    api_timeout_sec: int = 30
    upload_timeout_sec: int = 600

    # Session persistence
    storage_path: Path = DEFAULT_STORAGE_PATH

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # UI settings
    page_title: str = "CuratAI"
    page_icon: str = ":frame_with_picture:"
    layout: str = "wide"
    images_per_row: int = 4
    preview_count: int = 4

    @classmethod
    def from_env(cls, base: Optional["AppConfig"] = None) -> "AppConfig":
        """Create config from environment variables, layered over ``base``."""
        overrides: Dict[str, Any] = {}
        for env_name, (field_name, convert) in ENV_VARS.items():
            value = os.getenv(env_name)
            if value:
                overrides[field_name] = convert(value)
        return replace(base or cls(), **overrides)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "AppConfig":
        """Create config from a YAML file with a flat mapping of field names."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys in {path}: {sorted(unknown)}")

        values = {k: v for k, v in data.items() if k in known}
        for key in ("storage_path", "log_file"):
            if values.get(key):
                values[key] = Path(values[key]).expanduser()
        return cls(**values)

    @property
    def api_base_url(self) -> str:
        """Backend URL without a trailing slash."""
        return self.backend_url.rstrip("/")


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load config from an optional YAML file, then apply environment overrides."""
    base = None
    if path is not None:
        if Path(path).exists():
            base = AppConfig.from_yaml(path)
            logger.info(f"Loaded config from {path}")
        else:
            logger.warning(f"Config file not found: {path}, using defaults")
    return AppConfig.from_env(base)


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config(os.getenv("CURATAI_CONFIG"))
    return _config


def set_config(config: Optional[AppConfig]) -> None:
    """Set the global config instance."""
    global _config
    _config = config
