"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/cache.py
Persistent checksum cache stored as a mirror of the source tree.

Every hashed file `<base>/<rel>` gets a marker at `<base>/._dedup_checksum_cache/<rel>`.
The marker is a symbolic link whose target string is the file's hex digest, so
reading a cached digest is a single readlink() and never touches file content.
There is no separate index: the relative path is the key.

A marker is trusted only while its source is still a regular file that has not
been modified after the marker was written. Anything else is purged on load.
"""

import os
import stat
import logging
import tempfile
from typing import Optional

from dedup.core.exceptions import CacheCorruptionError
from dedup.core.hasher import MD5AlgorithmImpl, is_hex_digest
from dedup.core.interfaces import HashAlgorithm
from dedup.core.models import CACHE_DIR_NAME, CacheSnapshot, FileRecord
from dedup.core.walker import DirectoryWalker

logger = logging.getLogger(__name__)

_TEMP_SUFFIX = ".tmp"
_TEMP_ATTEMPTS = 10


class ChecksumCache:
    """
    Reader/writer of checksum markers under `<base_dir>/<cache_dir_name>`.

    Attributes:
        base_dir: Root of the source tree
        algorithm: Algorithm whose digests are stored; markers of another length are corrupt
        check_mtime: Treat markers older than their source's mtime as stale
    """

    def __init__(
        self,
        base_dir: str,
        algorithm: Optional[HashAlgorithm] = None,
        cache_dir_name: str = CACHE_DIR_NAME,
        check_mtime: bool = True
    ):
        self.base_dir = base_dir
        self.algorithm = algorithm or MD5AlgorithmImpl()
        self.cache_root = os.path.join(base_dir, cache_dir_name)
        self.check_mtime = check_mtime

    def ensure_root(self) -> None:
        os.makedirs(self.cache_root, exist_ok=True)

    def marker_path(self, rel_path: str) -> str:
        return os.path.join(self.cache_root, rel_path)

    def read_marker(self, marker_path: str) -> str:
        """
        Returns the digest stored in a marker.

        Raises:
            CacheCorruptionError: the marker is not a symlink or its payload is not a digest.
        """
        if not os.path.islink(marker_path):
            raise CacheCorruptionError(marker_path, "not a checksum marker")
        try:
            digest = os.readlink(marker_path)
        except OSError as e:
            raise CacheCorruptionError(marker_path, f"unreadable ({e})") from e
        if not is_hex_digest(digest, self.algorithm.hex_length):
            raise CacheCorruptionError(marker_path, f"malformed {self.algorithm.name} digest '{digest}'")
        return digest

    def load(self) -> CacheSnapshot:
        """
        Reads every marker under the cache root and validates it against the source tree.
        Stale and corrupt markers are deleted as they are found.
        """
        snapshot = CacheSnapshot()
        if not os.path.isdir(self.cache_root):
            logger.debug(f"No checksum cache at {self.cache_root}")
            return snapshot

        walker = DirectoryWalker(self.cache_root, files_only=False, on_error=self._warn_unreadable)
        for marker in walker:
            rel_path = os.path.relpath(marker, self.cache_root)

            try:
                digest = self.read_marker(marker)
            except CacheCorruptionError as e:
                logger.warning(str(e))
                self._remove_marker(marker)
                snapshot.corrupt += 1
                continue

            source = os.path.join(self.base_dir, rel_path)
            source_stat = self._stat_regular_file(source)
            if source_stat is None:
                logger.debug(f"Purging cache entry for vanished file: {source}")
                self._remove_marker(marker)
                snapshot.purged += 1
                continue

            if self.check_mtime and self._is_outdated(marker, source_stat):
                logger.debug(f"Purging cache entry for modified file: {source}")
                self._remove_marker(marker)
                snapshot.purged += 1
                continue

            snapshot.digest_by_path[rel_path] = digest
            snapshot.valid_paths.add(rel_path)
            snapshot.records.append(FileRecord(
                path=source,
                rel_path=rel_path,
                size=source_stat.st_size,
                mtime=source_stat.st_mtime,
                digest=digest
            ))

        logger.debug(
            f"Cache loaded: {len(snapshot.valid_paths)} valid, "
            f"{snapshot.purged} stale, {snapshot.corrupt} corrupt"
        )
        return snapshot

    def store(self, rel_path: str, digest: str) -> bool:
        """
        Writes (or replaces) the marker for `rel_path`.
        Returns False and logs a warning if the marker could not be written.
        """
        marker = self.marker_path(rel_path)
        try:
            os.makedirs(os.path.dirname(marker), exist_ok=True)
            # Written under a temporary name and renamed, so a reader never sees a partial marker
            tmp_marker = self._create_temp_marker(marker, digest)
        except OSError as e:
            logger.warning(f"Failed to cache checksum for {rel_path}: {e}")
            return False

        try:
            self._not_older_than_source(tmp_marker, os.path.join(self.base_dir, rel_path))
            os.replace(tmp_marker, marker)
        except OSError as e:
            logger.warning(f"Failed to cache checksum for {rel_path}: {e}")
            self._discard(tmp_marker)
            return False
        return True

    def evict(self, rel_path: str) -> bool:
        """
        Deletes the marker for `rel_path`. Deleting a missing marker is not an error.
        Returns True if a marker was removed.
        """
        return self._remove_marker(self.marker_path(rel_path))

    @staticmethod
    def _create_temp_marker(marker: str, digest: str) -> str:
        """Creates a symlink carrying `digest` under an unused name next to `marker`."""
        directory, name = os.path.split(marker)
        for _ in range(_TEMP_ATTEMPTS):
            candidate = tempfile.mktemp(prefix=f".{name}.", suffix=_TEMP_SUFFIX, dir=directory)
            try:
                os.symlink(digest, candidate)
            except FileExistsError:
                continue
            return candidate
        raise FileExistsError(f"No free temporary name for {marker}")

    @staticmethod
    def _not_older_than_source(marker: str, source: str) -> None:
        """
        Moves the marker's mtime up to the source's when the source is dated
        in the future, so the freshly written marker is not stale on the next load.
        """
        try:
            source_mtime_ns = os.lstat(source).st_mtime_ns
        except OSError:
            return
        marker_stat = os.lstat(marker)
        if marker_stat.st_mtime_ns < source_mtime_ns and os.utime in os.supports_follow_symlinks:
            os.utime(marker, ns=(marker_stat.st_atime_ns, source_mtime_ns), follow_symlinks=False)

    @staticmethod
    def _stat_regular_file(path: str) -> Optional[os.stat_result]:
        try:
            st = os.lstat(path)
        except OSError:
            return None
        return st if stat.S_ISREG(st.st_mode) else None

    @staticmethod
    def _is_outdated(marker: str, source_stat: os.stat_result) -> bool:
        try:
            marker_stat = os.lstat(marker)
        except OSError:
            return True
        return marker_stat.st_mtime_ns < source_stat.st_mtime_ns

    @staticmethod
    def _remove_marker(marker: str) -> bool:
        try:
            os.unlink(marker)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Failed to delete cache entry {marker}: {e}")
            return False
        return True

    @staticmethod
    def _discard(path: str) -> None:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug(f"Could not remove temporary marker {path}: {e}")

    @staticmethod
    def _warn_unreadable(error: OSError) -> None:
        logger.warning(f"Cannot read cache directory: {error}")
