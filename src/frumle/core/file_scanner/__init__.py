"""
FileScanner module for frumle.

Provides recursive directory scanning with hidden-entry filtering,
directory/file ignore lists and extension filtering.
"""

from .interfaces import FileScannerInterface
from .models import (
    DEFAULT_EXTENSIONS,
    DEFAULT_IGNORE_DIRS,
    DEFAULT_IGNORE_FILES,
    FileRecord,
    ScanPolicy,
    ScanResult,
    SkippedPath,
    normalize_extension,
)
from .scanner import FileScanner, read_codebase

__all__ = [
    # Main classes
    "FileScanner",
    "FileScannerInterface",
    "read_codebase",
    # Models
    "FileRecord",
    "ScanPolicy",
    "ScanResult",
    "SkippedPath",
    "normalize_extension",
    # Constants
    "DEFAULT_EXTENSIONS",
    "DEFAULT_IGNORE_DIRS",
    "DEFAULT_IGNORE_FILES",
]
