"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deduplication system.
These protocols enforce structural typing using Python's `typing.Protocol` to ensure
consistency across modules while maintaining flexibility and modularity.

Key Components:
---------------
- HashAlgorithm: Standardized interface for incremental hash functions (xxHash, SHA-1).
- Hasher: Interface for turning a scanned file into a hashed file.
- FileScanner: Interface for scanning directories and returning file handles.
- DuplicateIndex: Interface for grouping hashed files by digest.
- LinkReplacer: Interface for replacing copies with symlinks (or reporting them).
"""

from typing import Protocol, List, Dict, Optional, Callable
from linkdedupe.core.models import (
    FileHandle,
    HashedFile,
    DuplicateGroup,
    LinkAction,
)

ProgressCallback = Callable[[str, int, Optional[int]], None]
ReportCallback = Callable[[LinkAction], None]


# ===== Interfaces =====

class HashState(Protocol):
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like SHA-1 or xxHash
    without affecting the rest of the deduplication logic.
    """

    @staticmethod
    def new() -> HashState:
        """Returns a fresh incremental hash state."""
        ...


class Hasher(Protocol):
    """Interface for computing the content digest of a file."""
    def compute_digest(self, handle: FileHandle) -> HashedFile: ...
    def hash_path(self, path: str) -> bytes: ...


class FileScanner(Protocol):
    """
    Interface for scanning file systems and collecting file handles.
    """
    def scan(
        self,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[FileHandle]:
        """
        Scan files from the configured directory.

        Args:
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            File handles in deterministic discovery order.
        """
        ...


class DuplicateIndex(Protocol):
    """
    Interface for grouping files by content digest.
    """
    def build(
        self,
        handles: List[FileHandle],
        progress_callback: Optional[ProgressCallback] = None
    ) -> Dict[bytes, DuplicateGroup]:
        """Hash every handle and return only the groups with 2+ files."""
        ...

    def groups(self) -> List[DuplicateGroup]:
        """Duplicate groups in first-encounter order."""
        ...


class LinkReplacer(Protocol):
    """
    Interface for the final stage: copies become relative symlinks to their source.
    """
    def plan(self, groups: List[DuplicateGroup]) -> List[LinkAction]:
        ...

    def apply(
        self,
        groups: List[DuplicateGroup],
        dry_run: bool = False,
        report_callback: Optional[ReportCallback] = None
    ) -> List[LinkAction]:
        """
        Replace (or, for a dry run, only report) every copy in every group.

        Returns:
            The actions that were performed or would be performed.
        """
        ...
