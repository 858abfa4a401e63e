"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/replacer.py
Replaces duplicate copies with relative symbolic links to their group's source.

Two replacement strategies:
    - atomic (default): symlink at a temporary sibling name, then os.replace()
      over the copy. The copy path always holds either the file or the link.
    - non-atomic: unlink the copy, then symlink. If the symlink call fails the
      copy is gone and is not restored.

Groups are processed concurrently in a bounded thread pool; copies inside a
group are replaced one after another and reported as each one completes.
Completed replacements are never rolled back when another group fails.
"""

import os
import uuid
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

from linkdedupe.core.errors import ReplaceError, StaleDigestError
from linkdedupe.core.hasher import HasherImpl
from linkdedupe.core.interfaces import Hasher, LinkReplacer, ReportCallback
from linkdedupe.core.models import DEFAULT_WORKERS, DuplicateGroup, HashedFile, LinkAction

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".linkdedupe-tmp"


def relative_target(source: HashedFile, copy: HashedFile) -> str:
    """Link text that resolves to `source` when read from the copy's directory."""
    copy_dir = os.path.dirname(copy.absolute_path)
    return os.path.relpath(source.absolute_path, copy_dir)


class LinkReplacerImpl(LinkReplacer):
    """
    Turns every copy of every duplicate group into a relative symlink.

    Attributes:
        workers: Maximum number of groups processed at the same time
        atomic: Use symlink + rename instead of unlink + symlink
        verify: Re-hash source and copy right before replacing
    """

    def __init__(
        self,
        workers: int = DEFAULT_WORKERS,
        atomic: bool = True,
        verify: bool = False,
        hasher: Hasher = None
    ):
        if workers < 1:
            raise ValueError("Worker count must be at least 1")
        self.workers = workers
        self.atomic = atomic
        self.verify = verify
        self.hasher = hasher or HasherImpl()

    def plan(self, groups: List[DuplicateGroup]) -> List[LinkAction]:
        actions = []
        for group in groups:
            source = group.source
            for copy in group.copies:
                actions.append(LinkAction(
                    copy_path=copy.path,
                    source_path=source.path,
                    target=relative_target(source, copy),
                ))
        return actions

    def apply(
        self,
        groups: List[DuplicateGroup],
        dry_run: bool = False,
        report_callback: Optional[ReportCallback] = None
    ) -> List[LinkAction]:
        actions = self.plan(groups)

        if dry_run:
            logger.debug(f"Dry run: {len(actions)} copies would be replaced")
            if report_callback:
                for action in actions:
                    report_callback(action)
            return actions

        if not groups:
            logger.debug("No duplicate groups, nothing to replace")
            return []

        report_lock = threading.Lock()

        def report(action: LinkAction) -> None:
            if report_callback:
                with report_lock:
                    report_callback(action)

        executor = ThreadPoolExecutor(max_workers=self.workers)
        try:
            futures = [executor.submit(self._replace_group, group, report) for group in groups]
            for future in as_completed(futures):
                future.result()
        except BaseException:
            executor.shutdown(wait=True, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

        logger.debug(f"Replaced {len(actions)} copies in {len(groups)} groups")
        return actions

    def _replace_group(self, group: DuplicateGroup, report: ReportCallback) -> None:
        source = group.source
        if self.verify:
            self._check_unchanged(source, group.digest)

        for copy in group.copies:
            if self.verify:
                self._check_unchanged(copy, group.digest)
            target = relative_target(source, copy)
            if self.atomic:
                self._replace_atomic(copy.absolute_path, target)
            else:
                self._replace_in_place(copy.absolute_path, target)
            logger.debug(f"Linked {copy.path} -> {target}")
            report(LinkAction(copy_path=copy.path, source_path=source.path, target=target))

    def _check_unchanged(self, file: HashedFile, digest: bytes) -> None:
        try:
            current = self.hasher.hash_path(file.absolute_path)
        except OSError as e:
            raise StaleDigestError(file.absolute_path, f"Cannot re-read file ({e.strerror or e})") from e
        if current != digest:
            raise StaleDigestError(file.absolute_path, "File changed since it was indexed")

    @staticmethod
    def _replace_atomic(path: str, target: str) -> None:
        # Name length must not depend on the copy name, which may already be at NAME_MAX
        temp_path = os.path.join(os.path.dirname(path), f".{uuid.uuid4().hex}{TEMP_SUFFIX}")
        try:
            os.symlink(target, temp_path)
        except OSError as e:
            raise ReplaceError(path, f"Failed to create symlink ({e.strerror or e})") from e

        try:
            os.replace(temp_path, path)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                logger.warning(f"Could not remove temporary link {temp_path}")
            raise ReplaceError(path, f"Failed to replace file with symlink ({e.strerror or e})") from e

    @staticmethod
    def _replace_in_place(path: str, target: str) -> None:
        try:
            os.unlink(path)
        except OSError as e:
            raise ReplaceError(path, f"Failed to remove file ({e.strerror or e})") from e
        try:
            os.symlink(target, path)
        except OSError as e:
            logger.error(f"Copy removed but symlink creation failed, file is missing: {path}")
            raise ReplaceError(path, f"Failed to create symlink ({e.strerror or e})") from e
