"""
Shared fixtures for dedup tests.
Creates isolated temporary directory trees with controlled file contents.
"""
import os
import pytest
import tempfile
from pathlib import Path
from typing import Dict, List

from dedup.core.models import CACHE_DIR_NAME

HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"


class ScriptedReader:
    """LineReader replaying canned operator answers; EOF once they run out."""

    def __init__(self, answers: List[str]):
        self.answers = list(answers)
        self.prompts: List[str] = []

    def readline(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def hello_tree(temp_dir) -> Dict[str, Path]:
    """
    Two files containing "hello" plus one unique file:
    - a.txt          "hello"
    - b/copy.txt     "hello"
    - b/other.txt    "world!"
    """
    files = {}
    files["a"] = temp_dir / "a.txt"
    files["a"].write_bytes(b"hello")
    (temp_dir / "b").mkdir()
    files["copy"] = temp_dir / "b" / "copy.txt"
    files["copy"].write_bytes(b"hello")
    files["other"] = temp_dir / "b" / "other.txt"
    files["other"].write_bytes(b"world!")
    return files


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for deduplication scenarios:
    - 3 identical files of 1KB 'A' (two at the top, one in a subdirectory)
    - 2 identical files of 2KB 'B'
    - 2 unique files
    - 2 empty files (identical content too)
    """
    files = {}

    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    files["empty1"] = temp_dir / "empty1.txt"
    files["empty1"].write_bytes(b"")
    files["empty2"] = temp_dir / "empty2.txt"
    files["empty2"].write_bytes(b"")

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    return files


def cache_root(base: Path) -> Path:
    return base / CACHE_DIR_NAME


def marker_digest(base: Path, rel_path: str) -> str:
    """Reads the digest stored in the cache marker for `rel_path`."""
    return os.readlink(cache_root(base) / rel_path)
