"""
User-level configuration for frumle.

Stores the API key in ``~/.frumle/config.json``. The legacy
``~/.dev-doc/config.json`` is still read when the current file is absent.

Override the location with FRUMLE_HOME (directory that will hold
config.json).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".frumle"
LEGACY_CONFIG_DIR_NAME = ".dev-doc"
CONFIG_FILE_NAME = "config.json"


class CredentialStoreError(RuntimeError):
    pass


def get_home_dir() -> Path:
    """
    Resolve the user's home directory.

    Checks HOME, then USERPROFILE, then the platform lookup, and finally
    the system temp directory.
    """
    for var in ("HOME", "USERPROFILE"):
        value = os.environ.get(var)
        if value:
            return Path(value)
    try:
        return Path.home()
    except RuntimeError:
        return Path(tempfile.gettempdir())


def get_global_config_dir() -> Path:
    """Directory holding frumle's user-level config.json."""
    override = os.environ.get("FRUMLE_HOME")
    if override:
        return Path(override).expanduser()
    return get_home_dir() / CONFIG_DIR_NAME


def get_legacy_config_file() -> Path:
    return get_home_dir() / LEGACY_CONFIG_DIR_NAME / CONFIG_FILE_NAME


class CredentialStore:
    """
    JSON-backed store for the user's API key and other global settings.

    Saving merges new values into whatever is already stored.
    """

    def __init__(
        self,
        config_dir: Path | str | None = None,
        legacy_config_file: Path | str | None = None,
    ):
        self._config_dir = Path(config_dir) if config_dir is not None else get_global_config_dir()
        self._legacy_config_file = (
            Path(legacy_config_file)
            if legacy_config_file is not None
            else get_legacy_config_file()
        )

    @property
    def config_file(self) -> Path:
        return self._config_dir / CONFIG_FILE_NAME

    def load(self) -> dict[str, Any]:
        for path in (self.config_file, self._legacy_config_file):
            if not path.is_file():
                continue
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable config {path}: {e}")
                continue
            if isinstance(data, dict):
                return data
        return {}

    def save(self, values: dict[str, Any]) -> None:
        """
        Merge ``values`` into the stored config.

        Raises:
            CredentialStoreError: If the config cannot be written
        """
        merged = {**self.load(), **values}
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                json.dumps(merged, indent=4, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as e:
            raise CredentialStoreError(f"Failed to save config to {self.config_file}: {e}") from e

    def get_api_key(self) -> Optional[str]:
        api_key = self.load().get("apiKey")
        return api_key if isinstance(api_key, str) and api_key else None

    def set_api_key(self, api_key: str) -> None:
        self.save({"apiKey": api_key})
