"""
ediroute Configuration

Loads configuration from a YAML file, then applies environment overrides.

Search order for the file (first existing wins):
    1. explicit path (--config)
    2. $EDIROUTE_CONFIG
    3. ~/.ediroute/config.yaml
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


logger = logging.getLogger(__name__)


CONFIG_SEARCH_PATHS = [
    Path.home() / ".ediroute" / "config.yaml",
]

DEFAULT_CONFIG: Dict[str, Any] = {
    "log_level": "WARNING",
    "log_format": "%(levelname)s %(name)s: %(message)s",
    # None -> compact JSON with (',', ':') separators
    "json_indent": None,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EdiRouteConfig:
    """Configuration for the ediroute command line."""

    def __init__(self, config_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None):
        self._config: Dict[str, Any] = dict(DEFAULT_CONFIG)
        self._config_path: Optional[Path] = None
        self._environ = os.environ if environ is None else environ

        self._load_config(config_path)
        self._apply_env_overrides()

    def _search_paths(self, explicit_path: Optional[Path]) -> List[Path]:
        if explicit_path:
            return [Path(explicit_path)]
        paths = []
        if self._environ.get("EDIROUTE_CONFIG"):
            paths.append(Path(self._environ["EDIROUTE_CONFIG"]))
        return paths + CONFIG_SEARCH_PATHS

    def _load_config(self, explicit_path: Optional[Path] = None) -> None:
        """Load configuration from the first YAML file found."""
        for config_path in self._search_paths(explicit_path):
            if not config_path.exists():
                continue
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    user_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Failed to load config from %s: %s", config_path, e)
                return
            if not isinstance(user_config, dict):
                logger.warning("Ignoring config %s: top level must be a mapping", config_path)
                return
            unknown = sorted(set(user_config) - set(DEFAULT_CONFIG))
            if unknown:
                logger.warning("Ignoring unknown config keys in %s: %s", config_path, ", ".join(unknown))
            self._config.update({k: v for k, v in user_config.items() if k in DEFAULT_CONFIG})
            self._config_path = config_path
            return

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        env_mappings = {
            "EDIROUTE_LOG_LEVEL": "log_level",
            "EDIROUTE_JSON_INDENT": "json_indent",
        }

        for env_var, config_key in env_mappings.items():
            if env_var in self._environ:
                self._config[config_key] = self._environ[env_var]

    @property
    def config_path(self) -> Optional[Path]:
        """Path to loaded config file, or None if using defaults."""
        return self._config_path

    @property
    def log_level(self) -> str:
        level = str(self._config["log_level"]).upper()
        if level not in LOG_LEVELS:
            logger.warning("Unknown log level %r, using WARNING", level)
            return "WARNING"
        return level

    @property
    def log_format(self) -> str:
        return str(self._config["log_format"])

    @property
    def json_indent(self) -> Optional[int]:
        value = self._config["json_indent"]
        if value is None or value == "":
            return None
        try:
            indent = int(value)
        except (TypeError, ValueError):
            logger.warning("Invalid json_indent %r, using compact output", value)
            return None
        return indent if indent >= 0 else None

    def to_dict(self) -> Dict[str, Any]:
        """Resolved configuration."""
        return {
            "log_level": self.log_level,
            "log_format": self.log_format,
            "json_indent": self.json_indent,
            "config_path": str(self._config_path) if self._config_path else None,
        }
