"""
Unit tests for FileRanker.
Larger and older files must come first; weights are proportional.
"""
import pytest

from dedup.core import FileRanker, FileRecord


def record(path: str, size: int, mtime: float) -> FileRecord:
    return FileRecord(path=path, rel_path=path, size=size, mtime=mtime)


class TestFileRanker:
    def test_weights_are_normalised(self):
        ranker = FileRanker(weight_age=1.0, weight_size=3.0)

        assert ranker.weight_age == pytest.approx(0.25)
        assert ranker.weight_size == pytest.approx(0.75)

    def test_zero_weights_rejected(self):
        with pytest.raises(ValueError):
            FileRanker(0.0, 0.0)

    def test_size_only_ranks_largest_first(self):
        files = [record("small", 10, 100), record("big", 1000, 300), record("mid", 500, 200)]

        report = FileRanker(weight_age=0.0, weight_size=1.0).rank(files)

        assert [r.path for r in report.files] == ["big", "mid", "small"]
        assert report.files[0].score == pytest.approx(1.0)
        assert report.files[-1].score == pytest.approx(0.0)

    def test_age_only_ranks_oldest_first(self):
        files = [record("new", 10, 300), record("old", 10, 100), record("middle", 10, 200)]

        report = FileRanker(weight_age=1.0, weight_size=0.0).rank(files)

        assert [r.path for r in report.files] == ["old", "middle", "new"]
        assert report.files[1].score == pytest.approx(0.5)

    def test_mixed_weights(self):
        """Old-and-small vs new-and-big: the heavier criterion wins."""
        files = [record("old_small", 0, 0), record("new_big", 100, 100)]

        by_size = FileRanker(weight_age=1.0, weight_size=2.0).rank(files)
        by_age = FileRanker(weight_age=2.0, weight_size=1.0).rank(files)

        assert by_size.files[0].path == "new_big"
        assert by_size.files[0].score == pytest.approx(2 / 3)
        assert by_age.files[0].path == "old_small"

    def test_identical_files_tie_broken_by_path(self):
        files = [record("b", 5, 1), record("a", 5, 1)]

        report = FileRanker().rank(files)

        assert [r.path for r in report.files] == ["a", "b"]
        assert all(r.score == 0.0 for r in report.files)

    def test_top_limits_output_but_not_totals(self):
        files = [record(f"f{i}", i, i) for i in range(10)]

        report = FileRanker().rank(files, top=3)

        assert len(report.files) == 3
        assert report.total_size == sum(range(10))
        assert report.size_range == (0, 9)
        assert report.age_range == (0, 9)

    def test_empty_input(self):
        report = FileRanker().rank([])

        assert report.files == []
        assert report.total_size == 0
