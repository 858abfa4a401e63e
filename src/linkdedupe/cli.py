#!/usr/bin/env python3
"""
linkdedupe CLI: replace duplicate files with relative symlinks.
Uses the same core engine as library callers, with console progress output.
Run with --dry-run first: it lists every planned link and touches nothing.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
import logging
from typing import List, Optional, NoReturn

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from linkdedupe import __version__
from linkdedupe.commands import DedupeCommand
from linkdedupe.core.models import DedupeParams, DedupeStats, LinkAction, Stage
from linkdedupe.aliases import (
    ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    NOTHING_TO_DEDUPE, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.dry_run: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse and validate command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="linkdedupe",
            description="Deduplicate files by creating symlinks",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "dir",
            type=str,
            help="Directory to deduplicate"
        )

        parser.add_argument(
            "--version", "-V",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        # Filtering options
        parser.add_argument(
            "--pattern", "-e",
            action="append",
            default=[],
            type=str,
            metavar='GLOB',
            dest="patterns",
            help="Filename patterns to deduplicate (can be passed multiple times). Default: *"
        )
        parser.add_argument(
            "--hidden",
            action="store_true",
            help="Also deduplicate hidden files and look inside hidden directories"
        )

        # Actions
        parser.add_argument(
            "--dry-run", "-n",
            action="store_true",
            dest="dry_run",
            help="Dry run, only print found duplicates"
        )
        parser.add_argument(
            "--no-atomic",
            action="store_false",
            dest="atomic",
            help="Unlink each copy before creating its symlink instead of renaming\n"
                 "a temporary link over it. A failure in between loses the copy."
        )
        parser.add_argument(
            "--verify",
            action="store_true",
            help="Re-hash every file right before replacing it and abort if it changed"
        )

        # Engine options
        parser.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default="xxh128",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--workers", "-j",
            default=None,
            type=int,
            metavar='N',
            help="Number of worker threads for hashing and linking"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

        if not os.path.exists(args.dir):
            self.error_exit(f"Directory not found: {args.dir}")
        if not os.path.isdir(args.dir):
            self.error_exit(f"Path is not a directory: {args.dir}")

        if args.workers is not None and args.workers < 1:
            self.error_exit("--workers must be at least 1")

        if args.verify and args.dry_run:
            self.warning("--verify has no effect with --dry-run")

    def create_params(self, args: argparse.Namespace) -> DedupeParams:
        """Create DedupeParams from CLI arguments."""
        try:
            return DedupeParams.from_cli(
                root_dir=args.dir,
                patterns=args.patterns,
                dry_run=args.dry_run,
                workers=args.workers,
                algorithm=ALGORITHM_ALIASES[args.algorithm].value,
                include_hidden=args.hidden,
                atomic=args.atomic,
                verify=args.verify,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def info(self, message: str) -> None:
        """Print a progress line unless --quiet."""
        if not self.quiet:
            print(message)

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(code)

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        if total is not None and current >= total:
            sys.stderr.write("\n")
        sys.stderr.flush()

    def report_callback(self, action: LinkAction) -> None:
        """Dry-run lines are the result itself, so --quiet does not hide them."""
        if self.dry_run:
            print(action.line)
        elif self.verbose:
            print(f"  linked {action.line}")

    def on_stage(self, stage: Stage, stats: DedupeStats) -> None:
        """Prints the summary lines that follow each finished stage."""
        if stage == Stage.SCAN:
            self.info(f"Matched {stats.matched_files} files")
            self.info("Looking for duplicates...")
        elif stage == Stage.INDEX:
            self.info(f"Found {stats.unique_files} unique files")
            self.info(f"Found {stats.duplicate_sources} files with {stats.copies} copies")
            if not self.dry_run:
                if stats.duplicate_sources == 0:
                    self.info(NOTHING_TO_DEDUPE)
                else:
                    self.info("Creating symlinks...")

    def run_deduplication(self, params: DedupeParams) -> DedupeStats:
        """Execute deduplication workflow."""
        command = DedupeCommand(on_stage=self.on_stage)
        self.info("Scanning...")

        _, stats = command.execute(
            params,
            progress_callback=self.progress_callback if self.verbose else None,
            report_callback=self.report_callback
        )

        if not params.dry_run and stats.duplicate_sources > 0:
            self.info("Deduplication finished")

        if self.verbose:
            print("\n" + stats.print_summary())
        return stats

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.dry_run = args.dry_run

        if self.verbose:
            logging.getLogger("linkdedupe").setLevel(logging.DEBUG)

        self.validate_args(args)
        params = self.create_params(args)
        self.run_deduplication(params)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main(argv: Optional[List[str]] = None) -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run(argv)
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        CLIApplication.error_exit(str(e))


if __name__ == "__main__":
    main()
