"""
Core deduplication engine: scanning, hashing, digest grouping and link replacement.

This package contains the foundation of linkdedupe:
- FileScannerImpl: recursive directory traversal with glob filters
- HasherImpl + XXHash128AlgorithmImpl / SHA1AlgorithmImpl: full content hashing
- DuplicateIndexImpl: concurrent digest grouping with duplicate filtering
- LinkReplacerImpl: dry-run reports or symlink replacement of copies
- Models: FileHandle, HashedFile, DuplicateGroup, LinkAction, and configuration objects

All components are pure Python and suitable for CLI and library usage.
"""

from .scanner import FileScannerImpl
from .hasher import HasherImpl, XXHash128AlgorithmImpl, SHA1AlgorithmImpl, get_algorithm
from .index import DuplicateIndexImpl
from .replacer import LinkReplacerImpl
from .errors import DedupeError, GlobError, ReplaceError, StaleDigestError
from .models import (
    FileHandle, HashedFile, DuplicateGroup, LinkAction, DedupeParams, DedupeStats,
    HashAlgorithmName, Stage)

__all__ = [
    "FileScannerImpl",
    "HasherImpl",
    "XXHash128AlgorithmImpl",
    "SHA1AlgorithmImpl",
    "get_algorithm",
    "DuplicateIndexImpl",
    "LinkReplacerImpl",
    "DedupeError",
    "GlobError",
    "ReplaceError",
    "StaleDigestError",
    "FileHandle",
    "HashedFile",
    "DuplicateGroup",
    "LinkAction",
    "DedupeParams",
    "DedupeStats",
    "HashAlgorithmName",
    "Stage",
]
