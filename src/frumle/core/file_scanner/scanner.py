"""
FileScanner implementation for recursive directory scanning.
"""

import logging
from pathlib import Path
from typing import Optional

from .interfaces import FileScannerInterface
from .models import FileRecord, ScanPolicy, ScanResult, SkippedPath

logger = logging.getLogger(__name__)

# Hidden entries are skipped except environment files (.env, .env.local, ...)
_ENV_PREFIX = ".env"
_BLADE_SUFFIX = ".blade.php"


def get_extension(filename: str) -> str:
    """Return the lowercase text after the last dot, or '' if there is none."""
    _, dot, ext = filename.rpartition(".")
    return ext.lower() if dot else ""


def is_hidden(name: str) -> bool:
    """True for dot-entries other than environment files."""
    return name.startswith(".") and not name.startswith(_ENV_PREFIX)


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


class FileScanner(FileScannerInterface):
    """
    Concrete implementation of FileScannerInterface.

    Provides recursive directory scanning with:
    - Hidden entry filtering (environment files are let through)
    - Directory name ignore list applied at every depth
    - File name ignore list and extension allow-list
    - Compound ``.blade.php`` template support
    - Graceful skipping of unreadable files and directories
    """

    def __init__(self, policy: Optional[ScanPolicy] = None):
        """
        Initialize the FileScanner.

        Args:
            policy: Scan policy to apply. If None, the default policy is used.
        """
        self._policy = policy or ScanPolicy()

    @property
    def policy(self) -> ScanPolicy:
        return self._policy

    def set_policy(self, policy: ScanPolicy) -> None:
        """Replace the scan policy used by subsequent scans."""
        self._policy = policy

    def scan(self, root_path: Path | str) -> ScanResult:
        """
        Recursively scan a directory and collect matching files.

        Args:
            root_path: Root directory to scan

        Returns:
            ScanResult; empty when the root cannot be resolved or is not a
            directory
        """
        try:
            root = Path(root_path).resolve(strict=True)
        except (OSError, RuntimeError) as e:
            logger.debug(f"Cannot resolve scan root {root_path}: {e}")
            return ScanResult()

        if not root.is_dir():
            logger.debug(f"Scan root is not a directory: {root}")
            return ScanResult()

        result = ScanResult(root=root)
        self._scan_directory(root, root, set(), result)
        logger.debug(
            f"Scanned {root}: {len(result.files)} files, {len(result.skipped)} skipped"
        )
        return result

    def _scan_directory(
        self,
        current_path: Path,
        root: Path,
        visited: set[Path],
        result: ScanResult,
    ) -> None:
        """
        Recursively scan a directory.

        Args:
            current_path: Current directory being scanned
            root: Resolved scan root
            visited: Resolved directories on the current recursion stack
            result: Accumulator for records and diagnostics
        """
        try:
            # Resolve symlinks to check for cycles
            real_path = current_path.resolve()
            if real_path in visited:
                logger.debug(f"Skipping recursive cycle: {current_path} -> {real_path}")
                return

            entries = sorted(current_path.iterdir(), key=lambda p: (not _is_dir(p), p.name))
        except OSError as e:
            logger.debug(f"Cannot open directory {current_path}: {e}")
            result.skipped.append(SkippedPath(path=str(current_path), reason=str(e)))
            return

        visited.add(real_path)
        policy = self._policy

        for entry in entries:
            name = entry.name
            if is_hidden(name):
                continue

            if _is_dir(entry):
                if name not in policy.ignore_dir_names:
                    self._scan_directory(entry, root, visited, result)
                continue

            if name in policy.ignore_file_names:
                continue

            if not self._is_allowed_file(name):
                continue

            record = self._read_file(entry, root, result)
            if record is not None:
                result.files.append(record)

        # Remove when backtracking so sibling links to the same directory still scan
        visited.discard(real_path)

    def _is_allowed_file(self, name: str) -> bool:
        """Check the extension allow-list, including blade templates."""
        allowed = self._policy.allowed_extensions
        if get_extension(name) in allowed:
            return True
        return name.lower().endswith(_BLADE_SUFFIX) and "php" in allowed

    def _read_file(
        self, file_path: Path, root: Path, result: ScanResult
    ) -> Optional[FileRecord]:
        """
        Read a single file into a FileRecord.

        Returns:
            FileRecord, or None if the file couldn't be read
        """
        try:
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.debug(f"Failed to decode file as UTF-8: {file_path} - {e}")
            result.skipped.append(SkippedPath(path=str(file_path), reason="not valid UTF-8"))
            return None
        except OSError as e:
            logger.debug(f"Error reading file: {file_path} - {e}")
            result.skipped.append(SkippedPath(path=str(file_path), reason=str(e)))
            return None

        return FileRecord(
            absolute_path=str(file_path),
            relative_path=file_path.relative_to(root).as_posix(),
            content=content,
        )


def read_codebase(root_path: Path | str, policy: Optional[ScanPolicy] = None) -> list[FileRecord]:
    """
    Scan ``root_path`` and return only the file records.

    Callers must treat an empty list as "nothing to analyze"; inaccessible
    roots produce one rather than an exception.
    """
    return FileScanner(policy).scan(root_path).files
