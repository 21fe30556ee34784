"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups file records by content digest.
"""

from collections import defaultdict
from typing import Dict, Iterator, List

from dedup.core.models import DuplicateGroup, FileRecord


class DuplicateIndex:
    """
    Aggregates records by digest, preserving first-seen order both across
    digests and within each group.
    """

    def __init__(self):
        self._by_digest: Dict[str, List[FileRecord]] = defaultdict(list)

    def add(self, record: FileRecord) -> None:
        if not record.digest:
            raise ValueError(f"Cannot index a file without a digest: {record.path}")
        self._by_digest[record.digest].append(record)

    def groups(self) -> Iterator[DuplicateGroup]:
        """Yields only groups with 2+ files."""
        for digest, files in self._by_digest.items():
            if len(files) >= 2:  # Avoid groups with less than 2 files
                yield DuplicateGroup(digest=digest, files=list(files))
