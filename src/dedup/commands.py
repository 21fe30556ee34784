"""
Unified command orchestrator for duplicate detection, resolution and ranking.
This is the SINGLE source of truth for the run workflow; the CLI only parses
arguments and prints.
"""
import os
import time
import logging
from typing import Callable, List, Optional, Tuple

from dedup.core.cache import ChecksumCache
from dedup.core.grouper import DuplicateIndex
from dedup.core.hasher import ContentHasher, get_algorithm
from dedup.core.interfaces import LineReader
from dedup.core.models import (
    DedupParams, DuplicateGroup, FileRecord, RankReport, ScanStats, PROGRESS_INTERVAL)
from dedup.core.ranker import FileRanker
from dedup.core.resolver import ActionResolver
from dedup.core.walker import DirectoryWalker, exclude_paths

logger = logging.getLogger(__name__)


class DedupCommand:
    """
    Orchestrates the deduplication workflow:
    1. Load the checksum cache (purging stale markers)
    2. Walk the tree, skipping the cache root and every path the cache already covers
    3. Hash the remaining files, caching each new digest
    4. Group by digest and hand each duplicate group to the resolver

    Usage:
        params = DedupParams(base_dir="photos", dedup=True)
        command = DedupCommand()
        groups, stats = command.scan(params, progress_callback=cli_progress_printer)
        command.resolve(groups, ConsoleLineReader(), use_trash=params.use_trash)
    """

    def __init__(self):
        self._cache: Optional[ChecksumCache] = None

    @property
    def cache(self) -> Optional[ChecksumCache]:
        """Cache used by the last scan (None when caching was disabled)."""
        return self._cache

    def scan(
            self,
            params: DedupParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[List[DuplicateGroup], ScanStats]:
        """
        Builds the duplicate groups for `params.base_dir`.

        Returns:
            Tuple of (duplicate_groups, statistics)
        """
        start_time = time.time()
        stats = ScanStats()
        algorithm = get_algorithm(params.algorithm)
        hasher = ContentHasher(algorithm)
        index = DuplicateIndex()
        self._cache = self._open_cache(params, algorithm)

        cached_paths = set()
        if self._cache is not None:
            snapshot = self._cache.load()
            for record in snapshot.records:
                index.add(record)
            cached_paths = snapshot.valid_paths
            stats.cache_hits = len(snapshot.records)
            stats.cache_purged = snapshot.purged
            stats.cache_corrupt = snapshot.corrupt
            if progress_callback:
                progress_callback('cache', stats.cache_hits, None)

        def on_walk_error(error: OSError) -> None:
            stats.walk_errors += 1
            logger.warning(f"Cannot read directory: {error}")

        walker = DirectoryWalker(
            params.base_dir,
            exclude=exclude_paths(params.cache_root),
            on_error=on_walk_error
        )

        for path in walker:
            stats.files_seen += 1
            if progress_callback and stats.files_seen % PROGRESS_INTERVAL == 0:
                progress_callback('scanning', stats.files_seen, None)

            rel_path = os.path.relpath(path, params.base_dir)
            if rel_path in cached_paths:
                continue

            try:
                file_stat = os.stat(path)
                digest = hasher.hash(path)
            except OSError as e:
                stats.hash_errors += 1
                logger.warning(f"Cannot hash {path}: {e}")
                continue

            stats.hashed += 1
            index.add(FileRecord(
                path=path,
                rel_path=rel_path,
                size=file_stat.st_size,
                mtime=file_stat.st_mtime,
                digest=digest
            ))
            if self._cache is not None:
                self._cache.store(rel_path, digest)

        if progress_callback:
            progress_callback('scanning', stats.files_seen, None)

        groups = list(index.groups())
        stats.groups = len(groups)
        stats.total_time = time.time() - start_time
        logger.info(f"Scan completed: {stats.files_seen} files, {stats.groups} duplicate groups")
        return groups, stats

    def resolve(self, groups: List[DuplicateGroup], reader: LineReader, use_trash: bool = False) -> None:
        """Runs the interactive resolver over every duplicate group of the last scan."""
        resolver = ActionResolver(reader, cache=self._cache, use_trash=use_trash)
        resolver.resolve_all(groups)

    def rank(self, params: DedupParams) -> RankReport:
        """Ranks every file under the base directory by age and size."""
        files = []
        walker = DirectoryWalker(
            params.base_dir,
            exclude=exclude_paths(params.cache_root),
            on_error=lambda e: logger.warning(f"Cannot read directory: {e}")
        )
        for path in walker:
            try:
                file_stat = os.stat(path)
            except OSError as e:
                logger.warning(f"Cannot stat {path}: {e}")
                continue
            files.append(FileRecord(
                path=path,
                rel_path=os.path.relpath(path, params.base_dir),
                size=file_stat.st_size,
                mtime=file_stat.st_mtime
            ))

        ranker = FileRanker(params.rank_weight_age, params.rank_weight_size)
        return ranker.rank(files, top=params.rank_top)

    @staticmethod
    def _open_cache(params: DedupParams, algorithm) -> Optional[ChecksumCache]:
        if not params.use_cache:
            return None
        cache = ChecksumCache(params.base_dir, algorithm)
        try:
            cache.ensure_root()
        except OSError as e:
            logger.warning(f"Cannot create checksum cache {cache.cache_root}: {e}")
            return None
        return cache
