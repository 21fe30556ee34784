"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and run configuration for duplicate detection and resolution.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Set
import os
from enum import Enum

from dedup.core.exceptions import FatalConfigError


CACHE_DIR_NAME = "._dedup_checksum_cache"
HASH_CHUNK_SIZE = 1024 * 1024  # 1 MiB
PROGRESS_INTERVAL = 100
DEFAULT_RANK_TOP = 25


# =============================
# Enums
# =============================

class HashAlgorithmName(Enum):
    """Digest algorithm used for content identity."""
    MD5 = "md5"
    XXHASH = "xxhash"

    @property
    def display_name(self) -> str:
        """Human-readable name for help text."""
        mapping = {
            HashAlgorithmName.MD5: "MD5",
            HashAlgorithmName.XXHASH: "xxHash64",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Action(Enum):
    """Mutations an operator can apply to a duplicate group."""
    DELETE = "delete"
    LINK = "link"
    MOVE = "move"
    EVICT_CACHE = "evict-cache"


# ======================
#  Core Data Models
# ======================

@dataclass
class FileRecord:
    """
    A single file observed during one run.
    The digest is filled from the checksum cache or by hashing the file.
    """
    path: str
    rel_path: str
    size: int = 0
    mtime: float = 0.0
    digest: Optional[str] = None
    directory: Optional[str] = None
    filename: Optional[str] = None

    def __post_init__(self):
        """Derive directory and filename from path if not provided."""
        if self.directory is None:
            self.directory = os.path.dirname(self.path)
        if self.filename is None:
            self.filename = os.path.basename(self.path)

    def __repr__(self):
        return f"<FileRecord path={self.path}, digest={self.digest}>"


@dataclass
class DuplicateGroup:
    """
    Files sharing one digest, in first-seen order.
    The position of a file in `files` is the index shown to the operator.
    """
    digest: str
    files: List[FileRecord] = field(default_factory=list)

    @property
    def duplicate_count(self) -> int:
        return len(self.files)

    def __repr__(self):
        return f"<DuplicateGroup digest={self.digest}, count={len(self.files)}>"


@dataclass
class CacheSnapshot:
    """Result of loading the checksum cache: what can be trusted without rehashing."""
    digest_by_path: Dict[str, str] = field(default_factory=dict)
    valid_paths: Set[str] = field(default_factory=set)
    records: List[FileRecord] = field(default_factory=list)
    purged: int = 0
    corrupt: int = 0


@dataclass
class ScanStats:
    """Counters collected while building the duplicate index."""
    files_seen: int = 0
    cache_hits: int = 0
    hashed: int = 0
    hash_errors: int = 0
    walk_errors: int = 0
    cache_purged: int = 0
    cache_corrupt: int = 0
    groups: int = 0
    total_time: float = 0.0

    def print_summary(self) -> str:
        lines = [
            "📊 Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"Files seen: {self.files_seen}",
            f"Loaded from cache: {self.cache_hits}",
            f"Hashed: {self.hashed}",
        ]
        if self.hash_errors or self.walk_errors:
            lines.append(f"Errors: {self.hash_errors} unreadable files / {self.walk_errors} unreadable dirs")
        if self.cache_purged or self.cache_corrupt:
            lines.append(f"Cache entries dropped: {self.cache_purged} stale / {self.cache_corrupt} corrupt")
        lines.append(f"Duplicate groups: {self.groups}")
        return "\n".join(lines)


@dataclass
class RankedFile:
    path: str
    size: int
    mtime: float
    score: float


@dataclass
class RankReport:
    """Top-ranked files plus the ranges the scores were normalised against."""
    files: List[RankedFile]
    total_size: int = 0
    size_range: tuple = (0, 0)
    age_range: tuple = (0.0, 0.0)
    weight_age: float = 0.0
    weight_size: float = 0.0


"""
DTO for run parameters with built-in validation.
"""

@dataclass
class DedupParams:
    """Parameters for one invocation, validated on creation."""
    base_dir: str
    dedup: bool = False
    use_cache: bool = True
    rank: bool = False
    rank_weight_age: float = 1.0
    rank_weight_size: float = 1.0
    rank_top: int = DEFAULT_RANK_TOP
    algorithm: HashAlgorithmName = HashAlgorithmName.MD5
    use_trash: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.base_dir:
            raise FatalConfigError("Missing required base directory")

        if not os.path.isdir(self.base_dir):
            raise FatalConfigError(f"Invalid base dir: {self.base_dir}")

        if abs(self.rank_weight_age) + abs(self.rank_weight_size) == 0:
            raise FatalConfigError("Rank weights cannot both be zero")

        if self.rank_top <= 0:
            raise FatalConfigError("Number of ranked files must be positive")

        if isinstance(self.algorithm, str):
            try:
                self.algorithm = HashAlgorithmName(self.algorithm)
            except ValueError:
                raise FatalConfigError(f"Unknown hash algorithm: {self.algorithm}")

    @property
    def cache_root(self) -> str:
        return os.path.join(self.base_dir, CACHE_DIR_NAME)

    @property
    def has_work(self) -> bool:
        return self.dedup or self.rank
