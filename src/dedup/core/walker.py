"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/walker.py
Implements lazy, depth-first directory traversal.
Features:
- Uses os.scandir for path-based enumeration (no glob patterns, no escaping)
- Yields all files of a directory before descending into its subdirectories
- Explicit stack instead of recursion, so deep trees cannot hit the recursion limit
- Excluded directories (the checksum cache) are never entered
"""

import os
import logging
from typing import Callable, Iterator, Optional

logger = logging.getLogger(__name__)


def exclude_paths(*paths: str) -> Callable[[str], bool]:
    """Builds an exclusion predicate matching exactly the given directories."""
    excluded = {os.path.normpath(p) for p in paths}

    def _is_excluded(path: str) -> bool:
        return os.path.normpath(path) in excluded

    return _is_excluded


class DirectoryWalker:
    """
    Enumerates files under `root_dir`.

    Attributes:
        root_dir: Directory to start from
        exclude: Predicate on a directory path; matching directories are not descended
        files_only: Yield only regular files (default). When False every
            non-directory entry is yielded, including dangling symlinks.
        on_error: Called with the OSError of an unreadable directory; the walk then
            continues. Without it the error propagates to the caller.
    """

    def __init__(
        self,
        root_dir: str,
        exclude: Optional[Callable[[str], bool]] = None,
        files_only: bool = True,
        on_error: Optional[Callable[[OSError], None]] = None
    ):
        self.root_dir = root_dir
        self.exclude = exclude
        self.files_only = files_only
        self.on_error = on_error

    def __iter__(self) -> Iterator[str]:
        return self.walk()

    def walk(self) -> Iterator[str]:
        pending = [self.root_dir]

        while pending:
            current = pending.pop()
            logger.debug(f"Checking dir: {current}")

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                if self.on_error is None:
                    raise
                self.on_error(e)
                continue

            subdirs = []
            count_files = 0
            for entry in entries:
                if entry.name in ('.', '..'):
                    continue

                if self._is_dir(entry):
                    if self.exclude and self.exclude(entry.path):
                        logger.debug(f"Skipping excluded directory: {entry.path}")
                    else:
                        subdirs.append(entry.path)
                    continue

                if self.files_only and not self._is_regular_file(entry):
                    logger.debug(f"Skipping non-regular file: {entry.path}")
                    continue

                count_files += 1
                yield entry.path

            logger.debug(f"{count_files} files in {current}")

            # Reversed so the first subdirectory enumerated is the next one popped
            pending.extend(reversed(subdirs))

    @staticmethod
    def _is_dir(entry: os.DirEntry) -> bool:
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError:
            return False

    @staticmethod
    def _is_regular_file(entry: os.DirEntry) -> bool:
        try:
            return entry.is_file(follow_symlinks=False)
        except OSError as e:
            logger.debug(f"Could not stat {entry.path}: {e}")
            return False
