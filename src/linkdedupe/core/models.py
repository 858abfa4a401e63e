"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for file scanning, digest grouping and symlink deduplication.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from linkdedupe.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class HashAlgorithmName(Enum):
    """
    Content hash used to compare files.
    """
    XXH128 = "xxh128"
    SHA1 = "sha1"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            HashAlgorithmName.XXH128: "xxHash3-128",
            HashAlgorithmName.SHA1: "SHA-1",
        }
        return mapping.get(self, self.value)


class Stage(str, Enum):
    SCAN = "scan"
    INDEX = "index"
    APPLY = "apply"

    @classmethod
    def get_all(cls):
        return [cls.SCAN, cls.INDEX, cls.APPLY]


DEFAULT_WORKERS = min(32, (os.cpu_count() or 1) + 4)


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileHandle:
    """
    A file found by the scanner, not hashed yet.
    `path` is relative to `root` and always uses '/' as separator.
    """
    root: str
    path: str
    size: int = 0

    @property
    def absolute_path(self) -> str:
        return os.path.join(self.root, *self.path.split("/"))

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def __repr__(self):
        return f"<FileHandle path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class HashedFile:
    """A FileHandle together with its content digest, computed once per run."""
    handle: FileHandle
    digest: bytes

    def __post_init__(self):
        if not isinstance(self.digest, bytes):
            raise ValueError("Digest must be bytes")

    @property
    def path(self) -> str:
        return self.handle.path

    @property
    def absolute_path(self) -> str:
        return self.handle.absolute_path

    @property
    def size(self) -> int:
        return self.handle.size

    def __repr__(self):
        return f"<HashedFile path={self.path}, digest={self.digest.hex()}>"


@dataclass
class DuplicateGroup:
    """
    Files sharing one digest, in discovery order.
    The first file is the source that is kept; every other file is a copy.
    """
    digest: bytes
    files: List[HashedFile] = field(default_factory=list)

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    @property
    def source(self) -> HashedFile:
        if not self.files:
            raise ValueError("Empty group has no source file")
        return self.files[0]

    @property
    def copies(self) -> List[HashedFile]:
        return self.files[1:]

    def add_file(self, file: HashedFile) -> None:
        if file.digest != self.digest:
            raise ValueError("Cannot add file with different digest to a group.")
        self.files.append(file)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<DuplicateGroup digest={self.digest.hex()}, count={len(self.files)}>"


@dataclass(frozen=True)
class LinkAction:
    """
    One planned replacement: `copy_path` becomes a symlink whose text is `target`.
    Both paths are root-relative; `target` is relative to the copy's directory.
    """
    copy_path: str
    source_path: str
    target: str

    @property
    def line(self) -> str:
        return f"{self.copy_path} -> {self.target}"


@dataclass
class DedupeStats:
    """
    Counters and timings collected during one run.
    """
    matched_files: int = 0
    unique_files: int = 0
    duplicate_sources: int = 0
    copies: int = 0
    reclaimable_bytes: int = 0
    stage_times: Dict[str, float] = field(default_factory=dict)
    total_time: float = 0.0
    algorithm: Optional[HashAlgorithmName] = None

    def update_stage(self, stage: Stage, duration: float) -> None:
        key = stage.value
        self.stage_times[key] = self.stage_times.get(key, 0.0) + duration

    def record_groups(self, unique_files: int, groups: List[DuplicateGroup]) -> None:
        self.unique_files = unique_files
        self.duplicate_sources = len(groups)
        self.copies = sum(len(g.copies) for g in groups)
        self.reclaimable_bytes = sum(f.size for g in groups for f in g.copies)

    def print_summary(self) -> str:
        lines = [
            "📊 Deduplication Statistics:",
            f"Total Execution Time: {ConvertUtils.seconds_to_human(self.total_time)}\n",
        ]
        if self.algorithm is not None:
            lines.append(f"Hash algorithm: {self.algorithm.display_name}")
        lines += [
            f"Matched files: {self.matched_files}",
            f"Unique files: {self.unique_files}",
            f"Files with copies: {self.duplicate_sources}",
            f"Copies: {self.copies}",
            f"Reclaimable space: {ConvertUtils.bytes_to_human(self.reclaimable_bytes)}",
        ]
        for stage in Stage.get_all():
            if stage.value in self.stage_times:
                lines.append(f"{stage.value.title()}: {ConvertUtils.seconds_to_human(self.stage_times[stage.value])}")

        return "\n".join(lines)


"""
DTO for deduplication parameters with built-in validation.
Interface-agnostic, used by the CLI and by library callers.
"""

@dataclass
class DedupeParams:
    """Parameters for one deduplication run with validation."""
    root_dir: str
    patterns: List[str] = field(default_factory=list)
    dry_run: bool = False
    workers: int = DEFAULT_WORKERS
    algorithm: HashAlgorithmName = HashAlgorithmName.XXH128
    include_hidden: bool = False
    atomic: bool = True
    verify: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")
        self.root_dir = os.path.expanduser(self.root_dir)

        if self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        normalized = [p.strip() for p in self.patterns if p and p.strip()]
        self.patterns = normalized or ["*"]

    @staticmethod
    def from_cli(
            root_dir: str,
            patterns: Optional[List[str]] = None,
            dry_run: bool = False,
            workers: Optional[int] = None,
            algorithm: str = HashAlgorithmName.XXH128.value,
            **kwargs,
    ) -> 'DedupeParams':
        """
        Factory method to create params from raw argparse values.
        """
        return DedupeParams(
            root_dir=root_dir,
            patterns=list(patterns or []),
            dry_run=dry_run,
            workers=DEFAULT_WORKERS if workers is None else workers,
            algorithm=HashAlgorithmName(algorithm),
            **kwargs,
        )
