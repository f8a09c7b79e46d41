"""
Data models and default policy constants for the file scanner module.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

# Dependency, build, VCS, cache and IDE directories never worth uploading
DEFAULT_IGNORE_DIRS: tuple[str, ...] = (
    "vendor",
    "node_modules",
    ".git",
    "storage",
    "cache",
    "var",
    "tmp",
    "temp",
    "logs",
    "log",
    "dist",
    "build",
    ".idea",
    ".vscode",
    "nbproject",
    "runtime",
    "assets",
)

# The tool's own config files, so a scan never ingests itself
DEFAULT_IGNORE_FILES: tuple[str, ...] = (
    "frumle.config.json",
    "devdoc.config.json",
)

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "php",
    "json",
    "yaml",
    "yml",
    "xml",
    "md",
    "env",
    "neon",
    "ini",
    "twig",
)


def normalize_extension(extension: str) -> str:
    """Lowercase an extension and strip any leading dots ('.PHP' -> 'php')."""
    return extension.strip().lower().lstrip(".")


@dataclass(frozen=True)
class ScanPolicy:
    """
    Which directory names, file names and extensions take part in a scan.

    Attributes:
        ignore_dir_names: Directory names never descended into, at any depth
        ignore_file_names: Exact file names never read
        allowed_extensions: Lowercase extensions without a leading dot
    """

    ignore_dir_names: frozenset[str] = frozenset(DEFAULT_IGNORE_DIRS)
    ignore_file_names: frozenset[str] = frozenset(DEFAULT_IGNORE_FILES)
    allowed_extensions: frozenset[str] = frozenset(DEFAULT_EXTENSIONS)

    @classmethod
    def from_overrides(
        cls,
        ignore_dirs: Optional[Iterable[str]] = None,
        ignore_files: Optional[Iterable[str]] = None,
        extensions: Optional[Iterable[str]] = None,
    ) -> "ScanPolicy":
        """
        Build a policy where each non-empty override replaces its default.

        Overrides are never merged with the defaults. An override that is
        None or empty (after dropping blank entries) falls back to the
        default set.
        """
        dirs = {d.strip() for d in ignore_dirs or () if d.strip()}
        files = {f.strip() for f in ignore_files or () if f.strip()}
        exts = {normalize_extension(e) for e in extensions or () if normalize_extension(e)}

        return cls(
            ignore_dir_names=frozenset(dirs or DEFAULT_IGNORE_DIRS),
            ignore_file_names=frozenset(files or DEFAULT_IGNORE_FILES),
            allowed_extensions=frozenset(exts or DEFAULT_EXTENSIONS),
        )


@dataclass(frozen=True)
class FileRecord:
    """
    A matched file read during a scan.

    Attributes:
        absolute_path: Absolute path of the file under the resolved scan root
        relative_path: Forward-slash path relative to the scan root
        content: File content decoded as UTF-8
    """

    absolute_path: str
    relative_path: str
    content: str

    def to_payload(self) -> dict[str, str]:
        """Wire shape expected by the analysis API."""
        return {
            "path": self.absolute_path,
            "relativePath": self.relative_path,
            "content": self.content,
        }


@dataclass(frozen=True)
class SkippedPath:
    """An entry left out of a scan because it could not be opened or read."""

    path: str
    reason: str


@dataclass
class ScanResult:
    """Records produced by a scan plus diagnostics for what was skipped."""

    root: Optional[Path] = None
    files: list[FileRecord] = field(default_factory=list)
    skipped: list[SkippedPath] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.files
