#!/usr/bin/env python3
"""
dedup CLI — command line interface for duplicate detection and ranking.
Finds files with identical content under --base and asks, group by group,
what to do with them. Checksums are cached under the base directory so the
next run only hashes new or modified files.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install -e .", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dedup.core.models import DedupParams, DuplicateGroup, RankReport, DEFAULT_RANK_TOP
from dedup.core.exceptions import FatalConfigError
from dedup.core.interfaces import LineReader
from dedup.core.resolver import ConsoleLineReader
from dedup.commands import DedupCommand
from dedup.utils.convert_utils import ConvertUtils
from dedup.aliases import ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT, EPILOG_TEXT


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self, reader: Optional[LineReader] = None):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.reader: LineReader = reader or ConsoleLineReader()

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            description="dedup — find and resolve files with identical content",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Required arguments
        parser.add_argument(
            "--base", "-b",
            required=True,
            type=str,
            help="Directory which will be operated on"
        )

        # Features
        parser.add_argument(
            "--dedup",
            action=argparse.BooleanOptionalAction,
            default=False,
            help="Find duplicate files under the base directory and prompt for\n"
                 "how to handle each set of duplicates"
        )
        parser.add_argument(
            "--dedup-cache",
            action=argparse.BooleanOptionalAction,
            default=True,
            dest="dedup_cache",
            help="Keep checksums in a hidden cache directory under the base\n"
                 "directory to speed up future runs. Default: on"
        )
        parser.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default="md5",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--trash",
            action="store_true",
            help="Move deleted files to the system trash instead of unlinking them"
        )

        parser.add_argument(
            "--rank",
            action=argparse.BooleanOptionalAction,
            default=False,
            help="Rank files by date modified and size; older and larger rank higher"
        )
        parser.add_argument(
            "--rank-weight-age",
            default=1.0,
            type=float,
            metavar='X',
            help="Weight of a file's last modified date in its rank. Default: 1.0"
        )
        parser.add_argument(
            "--rank-weight-size",
            default=1.0,
            type=float,
            metavar='X',
            help="Weight of a file's size in its rank. Default: 1.0\n"
                 "Weights are proportional: age=1.0 and size=2.0 give 33%% / 67%%"
        )
        parser.add_argument(
            "--rank-top",
            default=DEFAULT_RANK_TOP,
            type=int,
            metavar='N',
            help=f"Number of ranked files to show. Default: {DEFAULT_RANK_TOP}"
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
            help="Show progress and statistics"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if not args.base:
            self.error_exit("Missing required arg --base")
        if not os.path.isdir(args.base):
            self.error_exit(f"Invalid base dir: {args.base}")
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose are mutually exclusive")

    def create_params(self, args: argparse.Namespace) -> DedupParams:
        """Create DedupParams from CLI arguments."""
        try:
            return DedupParams(
                base_dir=args.base,
                dedup=args.dedup,
                use_cache=args.dedup_cache,
                rank=args.rank,
                rank_weight_age=args.rank_weight_age,
                rank_weight_size=args.rank_weight_size,
                rank_top=args.rank_top,
                algorithm=ALGORITHM_ALIASES[args.algorithm],
                use_trash=args.trash,
            )
        except FatalConfigError as e:
            self.error_exit(str(e))

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def run_dedup(self, params: DedupParams, command: DedupCommand) -> List[DuplicateGroup]:
        """Scan for duplicates, then resolve each group interactively."""
        if self.verbose:
            print(f"Algorithm: {params.algorithm.display_name}")
        if not self.quiet:
            print("Reading cache" if params.use_cache else "Checksum cache disabled")
            print("Traversing tree")

        groups, stats = command.scan(
            params,
            progress_callback=self.progress_callback if self.verbose else None
        )

        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary())

        if not self.quiet:
            print("done\n")

        if not groups:
            if not self.quiet:
                print("No duplicate files found.")
            return groups

        if not self.quiet:
            total_files = sum(g.duplicate_count for g in groups)
            print(f"Found {len(groups)} sets of duplicates ({total_files} files)\n")

        command.resolve(groups, self.reader, use_trash=params.use_trash)
        return groups

    def run_rank(self, params: DedupParams, command: DedupCommand) -> RankReport:
        """Rank files by age and size and print the top of the list."""
        report = command.rank(params)
        print(f"Weights: age={report.weight_age:0.3f}, size={report.weight_size:0.3f}")

        if not report.files:
            print("No files to rank.")
            return report

        size_min, size_max = report.size_range
        age_min, age_max = report.age_range
        print(f"Total est size: {ConvertUtils.bytes_to_human(report.total_size)}")
        print(f"Size range: {ConvertUtils.bytes_to_human(size_min)} - {ConvertUtils.bytes_to_human(size_max)}")
        print(f"Age range: {ConvertUtils.timestamp_to_human(age_min)} - {ConvertUtils.timestamp_to_human(age_max)}")

        print(f"\nTop {len(report.files)}:")
        for ranked in report.files:
            print(f"{ConvertUtils.bytes_to_human(ranked.size):>10} "
                  f"{ConvertUtils.timestamp_to_human(ranked.mtime)} {ranked.path}")
        return report

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger("dedup").setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        if not params.has_work:
            self.warning("Neither --rank nor --dedup selected. Nothing to do.")
            return

        command = DedupCommand()
        if params.dedup:
            self.run_dedup(params, command)
        if params.rank:
            self.run_rank(params, command)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
