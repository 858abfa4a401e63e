"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements file scanning for the symlink deduplicator.
Features:
- Recursively scans the root directory with os.walk, never following symlinks
- Matches file names against shell glob patterns (any pattern may match)
- Skips symbolic links, directories and other non-regular entries
- Returns root-relative handles in a deterministic (sorted) order
"""

import os
import stat
import time
import logging
from fnmatch import fnmatchcase
from typing import List, Optional

from linkdedupe.core.errors import GlobError
from linkdedupe.core.interfaces import FileScanner, ProgressCallback
from linkdedupe.core.models import FileHandle

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ["*"]


class FileScannerImpl(FileScanner):
    """
    Scans a directory tree and collects regular files whose name matches a glob.

    Attributes:
        root_dir: Root directory to scan, resolved to its real location
        patterns: Shell glob patterns matched against file names
        include_hidden: Also consider entries whose name starts with '.'
    """

    def __init__(
        self,
        root_dir: str,
        patterns: Optional[List[str]] = None,
        include_hidden: bool = False
    ):
        self.root_dir = os.path.realpath(root_dir)
        self.patterns = list(patterns) if patterns else list(DEFAULT_PATTERNS)
        self.include_hidden = include_hidden
        self._validate_patterns()

    def scan(self, progress_callback: Optional[ProgressCallback] = None) -> List[FileHandle]:
        """
        Walks the tree once and returns matching files in discovery order.
        """
        logger.debug("Starting scan operation")
        logger.debug(f"Root directory: {self.root_dir}")
        logger.debug(f"Patterns: {self.patterns}, include_hidden={self.include_hidden}")

        if not os.path.exists(self.root_dir):
            raise FileNotFoundError(f"Directory does not exist: {self.root_dir}")
        if not os.path.isdir(self.root_dir):
            raise NotADirectoryError(f"Not a directory: {self.root_dir}")

        found_files = []
        processed_files = 0
        progress_interval = 1000
        start_time = time.time()

        for root, dirs, files in os.walk(self.root_dir, onerror=self._on_walk_error, followlinks=False):
            # Sorted in place so os.walk descends in a stable order
            dirs[:] = sorted(d for d in dirs if self._is_visible(d))

            for filename in sorted(files):
                processed_files += 1
                handle = self._process_file(root, filename)
                if handle:
                    found_files.append(handle)

                if progress_callback and processed_files % progress_interval == 0:
                    progress_callback('scanning', processed_files, None)

        if progress_callback:
            progress_callback('scanning', processed_files, processed_files)

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Scan completed. Found {len(found_files)} matching files.")
        return found_files

    def matches(self, filename: str) -> bool:
        """True if `filename` satisfies at least one pattern."""
        if not self._is_visible(filename):
            # Hidden files match only patterns that start with a dot themselves
            return any(p.startswith('.') and fnmatchcase(filename, p) for p in self.patterns)
        return any(fnmatchcase(filename, p) for p in self.patterns)

    def _is_visible(self, name: str) -> bool:
        return self.include_hidden or not name.startswith('.')

    def _process_file(self, root: str, filename: str) -> Optional[FileHandle]:
        """
        Returns a FileHandle if the entry is a regular file matching a pattern.
        """
        if not self.matches(filename):
            return None

        full_path = os.path.join(root, filename)
        try:
            st = os.lstat(full_path)
        except FileNotFoundError:
            logger.warning(f"File disappeared during scan: {full_path}")
            return None

        if stat.S_ISLNK(st.st_mode):
            logger.debug(f"Skipping symbolic link: {full_path}")
            return None
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {full_path}")
            return None

        rel_path = os.path.relpath(full_path, self.root_dir).replace(os.sep, '/')
        logger.debug(f"Accepted file: {rel_path} ({st.st_size} bytes)")
        return FileHandle(root=self.root_dir, path=rel_path, size=st.st_size)

    def _validate_patterns(self) -> None:
        for pattern in self.patterns:
            if not pattern or not pattern.strip():
                raise GlobError("Empty glob pattern")
            if '/' in pattern or os.sep in pattern:
                raise GlobError(f"Pattern must match file names, not paths: '{pattern}'")

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.error(f"Cannot traverse {error.filename}: {error}")
        raise GlobError(f"Cannot traverse {error.filename}: {error.strerror or error}") from error
