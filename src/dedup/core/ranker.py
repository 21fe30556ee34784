"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/ranker.py
Pure ranking logic, zero dependencies outside core.
Scores files by size and age so the largest and oldest files come first.
"""
from typing import List

from dedup.core.models import FileRecord, RankedFile, RankReport, DEFAULT_RANK_TOP


class FileRanker:
    """
    Ranks files by a weighted sum of normalised size and normalised age.

    Weights are taken in proportion to each other: age=1.0 and size=2.0
    give age 33% and size 67% of the score. Both criteria are scaled to
    [0, 1] over the observed range, larger and older scoring higher.
    """

    def __init__(self, weight_age: float = 1.0, weight_size: float = 1.0):
        weight_sum = abs(weight_age) + abs(weight_size)
        if weight_sum == 0:
            raise ValueError("Rank weights cannot both be zero")
        self.weight_age = weight_age / weight_sum
        self.weight_size = weight_size / weight_sum

    def rank(self, files: List[FileRecord], top: int = DEFAULT_RANK_TOP) -> RankReport:
        if not files:
            return RankReport(files=[], weight_age=self.weight_age, weight_size=self.weight_size)

        sizes = [f.size for f in files]
        mtimes = [f.mtime for f in files]
        size_min, size_max = min(sizes), max(sizes)
        age_min, age_max = min(mtimes), max(mtimes)

        ranked = [
            RankedFile(
                path=f.path,
                size=f.size,
                mtime=f.mtime,
                score=self._score(f, size_min, size_max, age_min, age_max)
            )
            for f in files
        ]
        ranked.sort(key=lambda r: (-r.score, r.path))

        return RankReport(
            files=ranked[:top],
            total_size=sum(sizes),
            size_range=(size_min, size_max),
            age_range=(age_min, age_max),
            weight_age=self.weight_age,
            weight_size=self.weight_size,
        )

    def _score(self, file: FileRecord, size_min: int, size_max: int, age_min: float, age_max: float) -> float:
        size_span = size_max - size_min
        age_span = age_max - age_min
        norm_size = (file.size - size_min) / size_span if size_span else 0.0
        # Older files (smaller mtime) score higher
        norm_age = 1 - (file.mtime - age_min) / age_span if age_span else 0.0
        return norm_size * self.weight_size + norm_age * self.weight_age
