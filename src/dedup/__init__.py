"""
dedup — find files with identical content and resolve them interactively.

Core features:
- Whole-file content hashing (MD5 by default, xxHash64 optional)
- Persistent checksum cache mirroring the tree, so unchanged files are not re-hashed
- Interactive per-group actions: delete, hard-link, move, clear cache
- Ranking of files by age and size
"""

# Get version
from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("dedup")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Public API: only what users should import directly
from dedup.core import (
    DedupParams, HashAlgorithmName, Action, FileRecord, DuplicateGroup, ScanStats,
    ChecksumCache, ContentHasher, DirectoryWalker, DuplicateIndex, ActionResolver, FileRanker)
from dedup.commands import DedupCommand
from dedup.services.file_service import FileService

__all__ = [
    "DedupCommand",
    "DedupParams",
    "HashAlgorithmName",
    "Action",
    "FileRecord",
    "DuplicateGroup",
    "ScanStats",
    "ChecksumCache",
    "ContentHasher",
    "DirectoryWalker",
    "DuplicateIndex",
    "ActionResolver",
    "FileRanker",
    "FileService",
    "__version__",
]
