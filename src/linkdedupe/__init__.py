"""
linkdedupe: replace duplicate files with relative symlinks.

Core features:
- Glob-filtered recursive scan that never follows symlinks
- Full content hashing (xxHash3-128 or SHA-1) in a bounded thread pool
- The first file found with a given content is kept, copies become relative symlinks
- Dry run mode that lists planned links without touching the filesystem
- Atomic replacement (temporary link + rename) by default
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("linkdedupe")
except Exception:
    __version__ = "0.1.0"

# Public API: only what users should import directly
from linkdedupe.commands import DedupeCommand
from linkdedupe.core import (
    DedupeParams, DedupeStats, HashAlgorithmName, FileHandle, HashedFile, DuplicateGroup, LinkAction,
    DedupeError, GlobError, ReplaceError, StaleDigestError)
from linkdedupe.utils.convert_utils import ConvertUtils

__all__ = [
    "DedupeCommand",
    "DedupeParams",
    "DedupeStats",
    "HashAlgorithmName",
    "FileHandle",
    "HashedFile",
    "DuplicateGroup",
    "LinkAction",
    "DedupeError",
    "GlobError",
    "ReplaceError",
    "StaleDigestError",
    "ConvertUtils",
    "__version__",
]
