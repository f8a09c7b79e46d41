"""
Abstract interfaces for file scanning operations.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .models import ScanResult


class FileScannerInterface(ABC):
    """
    Abstract interface for file scanning operations.

    Implementations walk a project directory and collect every file
    allowed by their scan policy.
    """

    @abstractmethod
    def scan(self, root_path: Path | str) -> ScanResult:
        """
        Recursively scan a directory.

        Args:
            root_path: Root directory to scan

        Returns:
            ScanResult with the matching files and skipped-path diagnostics

        Notes:
            - An unresolvable or non-directory root yields an empty result
            - Unreadable files and directories are skipped, never raised
        """
        pass
