"""
Core deduplication engine — walker, hasher, checksum cache, grouper, resolver.

This package contains the foundation of dedup:
- DirectoryWalker: lazy depth-first traversal that skips the checksum cache
- ContentHasher + MD5AlgorithmImpl / XXHashAlgorithmImpl: streaming whole-file digests
- ChecksumCache: persistent path → digest markers mirroring the source tree
- DuplicateIndex: grouping of files by digest
- ActionResolver: interactive delete / link / move / evict per duplicate group
- FileRanker: weighted age and size ranking
- Models: FileRecord, DuplicateGroup, DedupParams and statistics
"""

from .models import (
    FileRecord, DuplicateGroup, CacheSnapshot, ScanStats, DedupParams,
    HashAlgorithmName, Action, RankedFile, RankReport, CACHE_DIR_NAME)
from .exceptions import (
    DedupError, FatalConfigError, CacheCorruptionError, MutationError, InputError)
from .walker import DirectoryWalker, exclude_paths
from .hasher import ContentHasher, MD5AlgorithmImpl, XXHashAlgorithmImpl, get_algorithm
from .cache import ChecksumCache
from .grouper import DuplicateIndex
from .ranker import FileRanker
from .resolver import ActionResolver, ConsoleLineReader, Command, parse_command

__all__ = [
    "FileRecord",
    "DuplicateGroup",
    "CacheSnapshot",
    "ScanStats",
    "DedupParams",
    "HashAlgorithmName",
    "Action",
    "RankedFile",
    "RankReport",
    "CACHE_DIR_NAME",
    "DedupError",
    "FatalConfigError",
    "CacheCorruptionError",
    "MutationError",
    "InputError",
    "DirectoryWalker",
    "exclude_paths",
    "ContentHasher",
    "MD5AlgorithmImpl",
    "XXHashAlgorithmImpl",
    "get_algorithm",
    "ChecksumCache",
    "DuplicateIndex",
    "FileRanker",
    "ActionResolver",
    "ConsoleLineReader",
    "Command",
    "parse_command",
]
