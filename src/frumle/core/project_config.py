"""
Per-project configuration for frumle.

Manages ``frumle.config.json`` in the project root. The file holds the
base URLs sent with every analysis; the local entry is refreshed on each
run and a production placeholder is created for the user to fill in.
``devdoc.config.json`` is read as a legacy fallback but never written.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from frumle.core.project_detector import detect_local_url

logger = logging.getLogger(__name__)

CONFIG_NAME = "frumle.config.json"
LEGACY_CONFIG_NAME = "devdoc.config.json"

LOCAL_ENVIRONMENT = "local"
PRODUCTION_ENVIRONMENT = "production"


class ProjectConfigError(RuntimeError):
    """Raised when the project config file cannot be written."""


@dataclass
class BaseUrlEntry:
    environment: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return {"environment": self.environment, "url": self.url}


def get_config_path(project_dir: Path | str) -> Path:
    return Path(project_dir) / CONFIG_NAME


def _load_json_object(path: Path) -> Optional[dict[str, Any]]:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return None
    return data if isinstance(data, dict) else None


class ProjectConfigStore:
    """
    Reads and writes the project-level ``frumle.config.json``.

    Example:
        >>> store = ProjectConfigStore(Path("."))
        >>> entries = store.initialize()
        >>> [e.environment for e in entries]
        ['local', 'production']
    """

    def __init__(
        self,
        project_dir: Path | str,
        url_detector: Callable[[Path], str] = detect_local_url,
    ):
        self._project_dir = Path(project_dir)
        self._url_detector = url_detector

    @property
    def config_path(self) -> Path:
        return get_config_path(self._project_dir)

    @property
    def legacy_config_path(self) -> Path:
        return self._project_dir / LEGACY_CONFIG_NAME

    def load(self) -> dict[str, Any]:
        """
        Load the current config, falling back to the legacy file.

        Missing, unreadable or non-object files count as absent.
        """
        for path in (self.config_path, self.legacy_config_path):
            data = _load_json_object(path)
            if data is not None:
                return data
        return {}

    def save(self, config: dict[str, Any]) -> None:
        """
        Write ``config`` pretty-printed to frumle.config.json.

        Raises:
            ProjectConfigError: If the file cannot be encoded or written
        """
        try:
            content = json.dumps(config, indent=4, ensure_ascii=False)
            self.config_path.write_text(content, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise ProjectConfigError(f"Failed to save {CONFIG_NAME}: {e}") from e

    def initialize(self) -> list[BaseUrlEntry]:
        """
        Ensure the config holds up-to-date base URLs and return them.

        The ``local`` entry is updated in place (or appended) with the
        detected URL. A ``production`` entry with an empty URL is appended
        only when none exists, so a user-provided one is never overwritten.

        Raises:
            ProjectConfigError: If the updated config cannot be written
        """
        existing = self.load()
        raw_entries = existing.get("baseUrls")
        base_urls: list[Any] = list(raw_entries) if isinstance(raw_entries, list) else []

        local_url = self._url_detector(self._project_dir)

        # Last occurrence wins when an environment appears more than once
        by_env: dict[str, int] = {}
        for i, entry in enumerate(base_urls):
            if isinstance(entry, dict) and isinstance(entry.get("environment"), str):
                by_env[entry["environment"]] = i

        if LOCAL_ENVIRONMENT in by_env:
            base_urls[by_env[LOCAL_ENVIRONMENT]]["url"] = local_url
        else:
            base_urls.append({"environment": LOCAL_ENVIRONMENT, "url": local_url})

        if PRODUCTION_ENVIRONMENT not in by_env:
            base_urls.append({"environment": PRODUCTION_ENVIRONMENT, "url": ""})

        # Keep unrelated keys of a current-format file; legacy files are not carried over
        config = _load_json_object(self.config_path) or {}
        config["baseUrls"] = base_urls
        self.save(config)

        logger.debug(f"Base URLs for {self._project_dir}: {base_urls}")
        return [
            BaseUrlEntry(environment=str(e["environment"]), url=str(e.get("url") or ""))
            for e in base_urls
            if isinstance(e, dict) and isinstance(e.get("environment"), str)
        ]


def initialize(project_dir: Path | str) -> list[BaseUrlEntry]:
    """Ensure ``frumle.config.json`` exists with base URLs; return them."""
    return ProjectConfigStore(project_dir).initialize()
