"""
Configuration module for frumle.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from frumle.core.file_scanner import (
    DEFAULT_EXTENSIONS,
    DEFAULT_IGNORE_DIRS,
    DEFAULT_IGNORE_FILES,
    ScanPolicy,
)

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section, {})
    return section_defaults.get(key, fallback)


@dataclass
class ApiConfig:
    """Configuration for the remote analysis API."""

    api_url: str = field(
        default_factory=lambda: _get_default(
            "api", "api_url", "https://dev-doc-726dc734499e.herokuapp.com"
        )
    )
    timeout: float = field(default_factory=lambda: _get_default("api", "timeout", 120.0))
    connect_timeout: float = field(
        default_factory=lambda: _get_default("api", "connect_timeout", 30.0)
    )
    max_redirects: int = field(default_factory=lambda: _get_default("api", "max_redirects", 3))
    dashboard_url: str = field(
        default_factory=lambda: _get_default(
            "api", "dashboard_url", "https://frumle.tellecata.com"
        )
    )


@dataclass
class ScanConfig:
    """Configuration for the file scan."""

    ignore_dirs: list[str] = field(
        default_factory=lambda: list(_get_default("scan", "ignore_dirs", DEFAULT_IGNORE_DIRS))
    )
    ignore_files: list[str] = field(
        default_factory=lambda: list(_get_default("scan", "ignore_files", DEFAULT_IGNORE_FILES))
    )
    file_extensions: list[str] = field(
        default_factory=lambda: list(
            _get_default("scan", "file_extensions", DEFAULT_EXTENSIONS)
        )
    )

    def to_policy(self, ignore_dirs: Optional[list[str]] = None) -> ScanPolicy:
        """
        Build the scan policy, letting ``ignore_dirs`` replace the configured list.
        """
        return ScanPolicy.from_overrides(
            ignore_dirs=ignore_dirs or self.ignore_dirs,
            ignore_files=self.ignore_files,
            extensions=self.file_extensions,
        )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default("logging", "format", "%(message)s")
    )


@dataclass
class FrumleSettings:
    """Main configuration class for frumle."""

    api: ApiConfig = field(default_factory=ApiConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "FrumleSettings":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            FrumleSettings instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported or its content is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            try:
                data = yaml.safe_load(content) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
        elif path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Any) -> "FrumleSettings":
        """Create FrumleSettings from a dictionary."""
        if not isinstance(data, dict):
            raise ValueError("Configuration file must contain a mapping")

        config = cls()
        sections = (("api", ApiConfig), ("scan", ScanConfig), ("logging", LoggingConfig))
        for name, section_cls in sections:
            if name not in data:
                continue
            values = data[name]
            if not isinstance(values, dict):
                raise ValueError(f"Configuration section '{name}' must be a mapping")
            try:
                setattr(config, name, section_cls(**values))
            except TypeError as e:
                raise ValueError(f"Invalid keys in configuration section '{name}': {e}") from e

        return config

    def apply_env_overrides(self) -> "FrumleSettings":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: FRUMLE_<SECTION>_<KEY>,
        except FRUMLE_API_URL which names the API base URL directly.

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            "FRUMLE_API_URL": ("api", "api_url", str),
            "FRUMLE_API_TIMEOUT": ("api", "timeout", float),
            "FRUMLE_API_CONNECT_TIMEOUT": ("api", "connect_timeout", float),
            "FRUMLE_API_DASHBOARD_URL": ("api", "dashboard_url", str),
            "FRUMLE_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                section_obj = getattr(self, section)
                setattr(section_obj, key, converter(value))

        return self


def load_config(
    config_path: Optional[Path | str] = None, apply_env: bool = True
) -> FrumleSettings:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        FrumleSettings instance
    """
    if config_path:
        config = FrumleSettings.from_file(config_path)
    else:
        config = FrumleSettings()

    if apply_env:
        config.apply_env_overrides()

    return config
