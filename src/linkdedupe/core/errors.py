"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exceptions raised by the scanning and link replacement stages.
Read errors while hashing are not wrapped and surface as OSError.
"""


class DedupeError(Exception):
    """Base class for all linkdedupe errors."""


class GlobError(DedupeError):
    """Invalid glob pattern, or the directory tree could not be traversed."""


class ReplaceError(DedupeError, OSError):
    """Replacing a copy with a symlink failed."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class StaleDigestError(ReplaceError):
    """A file changed between indexing and replacement."""
