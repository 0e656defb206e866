"""
Core configuration management for NekoLink.

This module handles configuration loading and validation from built-in
defaults, an optional env file, and environment variables.
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional

DEFAULT_MTU = 1408
MIN_MTU = 1280
MAX_MTU = 1500

LINK_SCHEME = "nekoray://custom#"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class NekoLinkConfig:
    """Central configuration manager for NekoLink."""

    def __init__(self, env_file: Optional[str] = None):
        self.env_file = env_file or os.getenv("NEKOLINK_ENV_FILE", "nekolink.env")
        self._config: Dict[str, Any] = {}
        self._load_default_config()
        self._load_env_file()
        self._load_from_environment()

    def _load_default_config(self):
        """Load default configuration values."""
        self._config = {
            # Input / output paths
            "config_file": "wg-config.conf",
            "endpoints_file": "endpoints.txt",
            "output_file": "nekoray_links.txt",

            # Link generation
            "mtu": None,
            "name_prefix": "",

            # Front-end behaviour
            "show_progress": True,
            "pause_on_exit": False,
            "log_level": "INFO",
        }

    def _load_env_file(self):
        """Load KEY=value pairs from the env file into os.environ."""
        try:
            if not self.env_file or not os.path.exists(self.env_file):
                return

            with open(self.env_file, "r", encoding="utf-8") as f:
                for raw_line in f:
                    line = raw_line.strip()
                    if not line or line.startswith("#"):
                        continue

                    key = None
                    value = None

                    # PowerShell style: $env:NAME = value
                    if line.lower().startswith("$env:"):
                        m = re.match(r"^\$env:([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.+)$", line)
                        if m:
                            key = m.group(1).strip()
                            value = m.group(2).strip()
                    elif "=" in line:
                        left, right = line.split("=", 1)
                        key = left.strip()
                        value = right.strip()

                    if key and value is not None:
                        if value.startswith('"') and value.endswith('"') and len(value) >= 2:
                            value = value[1:-1]
                        elif value.startswith("'") and value.endswith("'") and len(value) >= 2:
                            value = value[1:-1]

                        os.environ.setdefault(key, value)
        except OSError as e:
            logging.getLogger(__name__).warning(f"Failed to load env file: {e}")

    def _load_from_environment(self):
        """Override configuration with environment variables."""
        env_mappings = {
            "NEKOLINK_CONFIG_FILE": ("config_file", str),
            "NEKOLINK_ENDPOINTS_FILE": ("endpoints_file", str),
            "NEKOLINK_OUTPUT_FILE": ("output_file", str),
            "NEKOLINK_MTU": ("mtu", int),
            "NEKOLINK_PREFIX": ("name_prefix", str.strip),
            "NEKOLINK_PROGRESS": ("show_progress", _to_bool),
            "NEKOLINK_PAUSE": ("pause_on_exit", _to_bool),
            "NEKOLINK_LOG_LEVEL": ("log_level", lambda x: x.strip().upper()),
        }

        for env_key, (config_key, converter) in env_mappings.items():
            if env_key in os.environ:
                try:
                    self._config[config_key] = converter(os.environ[env_key])
                except (ValueError, TypeError):
                    logging.getLogger(__name__).warning(
                        f"Invalid value for {env_key}: {os.environ[env_key]}"
                    )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set configuration value."""
        self._config[key] = value

    def update(self, config_dict: Dict[str, Any]):
        """Update multiple configuration values."""
        self._config.update(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Get configuration as dictionary."""
        return self._config.copy()

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        # An out-of-range MTU override is not an error: it is ignored when
        # the MTU is resolved.
        if self.get("log_level") not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")

        for field in ("config_file", "endpoints_file", "output_file"):
            if not self.get(field):
                errors.append(f"{field} must not be empty")

        return errors
