"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/index.py
Groups scanned files by content digest.

Hashing runs in a bounded thread pool. Results are inserted in discovery order,
so the first discovered file of every group is always its source, whatever
order the worker threads finish in.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from linkdedupe.core.hasher import HasherImpl
from linkdedupe.core.interfaces import DuplicateIndex, Hasher, ProgressCallback
from linkdedupe.core.models import DEFAULT_WORKERS, DuplicateGroup, FileHandle, HashedFile

logger = logging.getLogger(__name__)


class DuplicateIndexImpl(DuplicateIndex):
    """
    Digest → DuplicateGroup index, built once per run.
    Uses an injected Hasher instance for flexibility and testability.
    """

    def __init__(self, hasher: Hasher = None, workers: int = DEFAULT_WORKERS):
        if workers < 1:
            raise ValueError("Worker count must be at least 1")
        self.hasher = hasher or HasherImpl()
        self.workers = workers
        self.unique_count = 0
        self._groups: Optional[Dict[bytes, DuplicateGroup]] = None
        self._lock = threading.Lock()

    def build(
        self,
        handles: List[FileHandle],
        progress_callback: Optional[ProgressCallback] = None
    ) -> Dict[bytes, DuplicateGroup]:
        """
        Hashes every handle, groups by digest and drops groups of one file.
        The first hashing error cancels the remaining work and is re-raised.
        """
        index: Dict[bytes, DuplicateGroup] = {}
        total = len(handles)
        logger.debug(f"Hashing {total} files with {self.workers} workers")

        executor = ThreadPoolExecutor(max_workers=self.workers)
        try:
            futures = [executor.submit(self.hasher.compute_digest, h) for h in handles]
            for done, future in enumerate(futures, 1):
                self._insert(index, future.result())
                if progress_callback:
                    progress_callback('hashing', done, total)
        except BaseException:
            executor.shutdown(wait=True, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

        self.unique_count = len(index)
        self._groups = self._remove_unique(index)
        logger.debug(
            f"Found {self.unique_count} unique files, {len(self._groups)} with copies")
        return self._groups

    def groups(self) -> List[DuplicateGroup]:
        if self._groups is None:
            raise RuntimeError("Index has not been built yet")
        return list(self._groups.values())

    def _insert(self, index: Dict[bytes, DuplicateGroup], file: HashedFile) -> None:
        with self._lock:
            group = index.get(file.digest)
            if group is None:
                group = DuplicateGroup(digest=file.digest)
                index[file.digest] = group
            group.add_file(file)

    @staticmethod
    def _remove_unique(index: Dict[bytes, DuplicateGroup]) -> Dict[bytes, DuplicateGroup]:
        for digest in [d for d, g in index.items() if not g.is_duplicate()]:
            del index[digest]
        return index
