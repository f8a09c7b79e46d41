"""
Analysis service for frumle.

Scans a project, detects its name and base URLs, assembles the analysis
payload and submits it to the backend.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from frumle.core.config import ScanConfig
from frumle.core.file_scanner import FileScanner, ScanPolicy, ScanResult
from frumle.core.project_config import BaseUrlEntry, ProjectConfigStore
from frumle.core.project_detector import detect_project_name
from frumle.infrastructure import FrumleApiClient

logger = logging.getLogger(__name__)


@dataclass
class AnalysisRequest:
    """Everything sent to the backend for one analysis run."""

    directory: Path
    project_name: str
    scan: ScanResult
    ignore_dirs: list[str]
    file_extensions: list[str]
    base_urls: list[BaseUrlEntry] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.scan.files)

    def to_payload(self) -> dict[str, Any]:
        return {
            "files": [record.to_payload() for record in self.scan.files],
            "directory": str(self.directory),
            "projectName": self.project_name,
            "ignoreDirs": list(self.ignore_dirs),
            "fileExtensions": list(self.file_extensions),
            "baseUrls": [entry.to_dict() for entry in self.base_urls] or None,
        }


class AnalysisService:
    """
    Orchestrates a single analysis run.

    The steps are exposed separately so the CLI can report progress and stop
    early, e.g. when a scan finds nothing and the backend must not be called.
    """

    def __init__(
        self,
        api_client: FrumleApiClient,
        scan_config: Optional[ScanConfig] = None,
        config_store_factory: Callable[[Path], ProjectConfigStore] = ProjectConfigStore,
    ):
        self._api_client = api_client
        self._scan_config = scan_config or ScanConfig()
        self._config_store_factory = config_store_factory

    def scan(
        self, directory: Path | str, ignore_dirs: Optional[list[str]] = None
    ) -> tuple[ScanResult, ScanPolicy, list[str]]:
        """
        Scan ``directory``.

        Args:
            directory: Project root
            ignore_dirs: Directory names replacing the configured ignore list

        Returns:
            Tuple of (scan result, policy used, ignore list used)
        """
        effective_ignore = [d for d in (ignore_dirs or []) if d] or list(
            self._scan_config.ignore_dirs
        )
        policy = self._scan_config.to_policy(ignore_dirs=effective_ignore)
        result = FileScanner(policy).scan(directory)

        if result.skipped:
            logger.info(f"Skipped {len(result.skipped)} unreadable entries")
            for skipped in result.skipped:
                logger.debug(f"  {skipped.path}: {skipped.reason}")

        return result, policy, effective_ignore

    def prepare(
        self,
        directory: Path | str,
        scan_result: ScanResult,
        ignore_dirs: list[str],
        project_name: Optional[str] = None,
    ) -> AnalysisRequest:
        """
        Detect project metadata and build the request for ``scan_result``.

        Raises:
            ProjectConfigError: If frumle.config.json cannot be written
        """
        directory = Path(directory)
        name = detect_project_name(directory, override=project_name)
        base_urls = self._config_store_factory(directory).initialize()

        return AnalysisRequest(
            directory=directory,
            project_name=name,
            scan=scan_result,
            ignore_dirs=ignore_dirs,
            file_extensions=list(self._scan_config.file_extensions),
            base_urls=base_urls,
        )

    def submit(self, request: AnalysisRequest, api_key: str) -> dict[str, Any]:
        """
        Send the request to the backend.

        Raises:
            ValueError: If the request has no files
            ApiClientError: If the backend call fails
        """
        if request.file_count == 0:
            raise ValueError("No files found to analyze")

        logger.debug(
            f"Submitting {request.file_count} files for {request.project_name} to "
            f"{self._api_client.api_url}"
        )
        return self._api_client.analyze_codebase(request.to_payload(), api_key)
