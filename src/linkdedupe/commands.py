"""
Unified command orchestrator for symlink deduplication.
This is the SINGLE source of truth for the workflow, used by the CLI and library callers.
"""
import time
import logging
from typing import List, Optional, Tuple

from linkdedupe.core.hasher import HasherImpl, get_algorithm
from linkdedupe.core.index import DuplicateIndexImpl
from linkdedupe.core.interfaces import ProgressCallback, ReportCallback
from linkdedupe.core.models import DedupeParams, DedupeStats, DuplicateGroup, FileHandle, LinkAction, Stage
from linkdedupe.core.replacer import LinkReplacerImpl
from linkdedupe.core.scanner import FileScannerImpl

logger = logging.getLogger(__name__)


class DedupeCommand:
    """
    Orchestrates the entire deduplication workflow:
    1. Scan the root directory for files matching the patterns
    2. Hash every file and keep only digests shared by 2+ files
    3. Report (dry run) or replace every copy with a relative symlink

    Usage:
        params = DedupeParams(root_dir="~/photos", patterns=["*.jpg"], dry_run=True)
        command = DedupeCommand()
        actions, stats = command.execute(
            params,
            report_callback=lambda action: print(action.line)
        )

    Stage callbacks (`on_stage`) are invoked with a Stage and the stats gathered so
    far, once the stage has finished, so a front end can print progress lines.
    """

    def __init__(self, on_stage=None):
        self.on_stage = on_stage
        self._files: List[FileHandle] = []
        self._groups: List[DuplicateGroup] = []

    def execute(
            self,
            params: DedupeParams,
            progress_callback: Optional[ProgressCallback] = None,
            report_callback: Optional[ReportCallback] = None
    ) -> Tuple[List[LinkAction], DedupeStats]:
        """
        Execute deduplication with given parameters.

        Returns:
            Tuple of (performed or planned link actions, statistics)

        Raises:
            OSError: If the root is missing, a file cannot be read or a link cannot be created
            GlobError: If a pattern is invalid or traversal fails
        """
        stats = DedupeStats(algorithm=params.algorithm)
        total_start = time.time()
        hasher = HasherImpl(get_algorithm(params.algorithm))

        # Step 1: Scan
        start = time.time()
        scanner = FileScannerImpl(
            root_dir=params.root_dir,
            patterns=params.patterns,
            include_hidden=params.include_hidden,
        )
        self._files = scanner.scan(progress_callback=progress_callback)
        stats.matched_files = len(self._files)
        stats.update_stage(Stage.SCAN, time.time() - start)
        self._notify(Stage.SCAN, stats)

        # Step 2: Index by digest
        start = time.time()
        index = DuplicateIndexImpl(hasher=hasher, workers=params.workers)
        index.build(self._files, progress_callback=progress_callback)
        self._groups = index.groups()
        stats.record_groups(index.unique_count, self._groups)
        stats.update_stage(Stage.INDEX, time.time() - start)
        self._notify(Stage.INDEX, stats)

        # Step 3: Report or replace
        start = time.time()
        replacer = LinkReplacerImpl(
            workers=params.workers,
            atomic=params.atomic,
            verify=params.verify,
            hasher=hasher,
        )
        actions = replacer.apply(
            self._groups,
            dry_run=params.dry_run,
            report_callback=report_callback,
        )
        stats.update_stage(Stage.APPLY, time.time() - start)

        stats.total_time = time.time() - total_start
        logger.debug(f"Run finished: {stats.copies} copies, dry_run={params.dry_run}")
        return actions, stats

    def get_files(self) -> List[FileHandle]:
        """Get scanned files after execution."""
        return self._files.copy()

    def get_groups(self) -> List[DuplicateGroup]:
        """Get duplicate groups after execution."""
        return self._groups.copy()

    def _notify(self, stage: Stage, stats: DedupeStats) -> None:
        if self.on_stage:
            self.on_stage(stage, stats)
