"""
CLI tests: argument handling, exit codes and complete interactive runs.
"""
import os
import sys
from unittest import mock
import pytest

from dedup.cli import CLIApplication, main
from dedup.core import HashAlgorithmName
from dedup.services.file_service import FileService

from conftest import HELLO_MD5, ScriptedReader, cache_root, marker_digest


class TestArgumentParsing:
    def test_defaults(self):
        args = CLIApplication.parse_args(["--base", "photos"])

        assert args.base == "photos"
        assert args.dedup is False
        assert args.dedup_cache is True
        assert args.rank is False
        assert args.rank_top == 25
        assert args.algorithm == "md5"
        assert args.trash is False

    def test_negated_flags(self):
        args = CLIApplication.parse_args(["-b", "x", "--dedup", "--no-dedup-cache", "--rank"])

        assert args.dedup is True
        assert args.dedup_cache is False
        assert args.rank is True

    def test_base_is_required(self):
        with pytest.raises(SystemExit) as exc:
            CLIApplication.parse_args(["--dedup"])
        assert exc.value.code == 2

    def test_unknown_algorithm_rejected(self):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args(["-b", "x", "--algorithm", "sha1"])

    def test_params_from_args(self, temp_dir):
        app = CLIApplication()
        args = app.parse_args([
            "-b", str(temp_dir), "--rank", "--rank-weight-size", "2", "--rank-top", "5",
            "--algorithm", "xxhash", "--trash"])

        params = app.create_params(args)

        assert params.rank is True
        assert params.rank_weight_size == 2.0
        assert params.rank_top == 5
        assert params.algorithm is HashAlgorithmName.XXHASH
        assert params.use_trash is True


class TestValidation:
    def test_invalid_base_exits_with_1(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as exc:
            CLIApplication().run(["--base", str(temp_dir / "missing"), "--dedup"])

        assert exc.value.code == 1
        assert "Invalid base dir" in capsys.readouterr().err

    def test_base_must_be_a_directory(self, temp_dir):
        path = temp_dir / "file.txt"
        path.write_text("x")

        with pytest.raises(SystemExit) as exc:
            CLIApplication().run(["--base", str(path), "--rank"])
        assert exc.value.code == 1

    def test_zero_weights_exit_with_1(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as exc:
            CLIApplication().run(["-b", str(temp_dir), "--rank",
                                  "--rank-weight-age", "0", "--rank-weight-size", "0"])

        assert exc.value.code == 1
        assert "Rank weights" in capsys.readouterr().err

    def test_quiet_and_verbose_conflict(self, temp_dir):
        with pytest.raises(SystemExit) as exc:
            CLIApplication().run(["-b", str(temp_dir), "--dedup", "-q", "-v"])
        assert exc.value.code == 1

    def test_nothing_to_do(self, hello_tree, temp_dir, capsys):
        """Without --dedup and --rank the run warns and touches nothing."""
        CLIApplication().run(["--base", str(temp_dir)])

        assert "Nothing to do" in capsys.readouterr().err
        assert not cache_root(temp_dir).exists()


class TestDedupRun:
    def test_hello_scenario(self, hello_tree, temp_dir, capsys):
        """Two 'hello' files are offered as one group; deleting entry 1 keeps a.txt."""
        reader = ScriptedReader(["d 1", ""])

        CLIApplication(reader=reader).run(["--base", str(temp_dir), "--dedup"])

        out = capsys.readouterr().out
        assert "Reading cache" in out
        assert "Traversing tree" in out
        assert f"\t0: {hello_tree['a']}" in out
        assert f"\t1: {hello_tree['copy']}" in out
        assert f"unlink {hello_tree['copy']}" in out
        assert hello_tree["a"].exists()
        assert not hello_tree["copy"].exists()
        assert hello_tree["other"].exists()
        assert marker_digest(temp_dir, "a.txt") == HELLO_MD5

    def test_no_duplicates(self, temp_dir, capsys):
        (temp_dir / "one.txt").write_text("1")
        (temp_dir / "two.txt").write_text("2")
        reader = ScriptedReader([])

        CLIApplication(reader=reader).run(["--base", str(temp_dir), "--dedup"])

        assert "No duplicate files found." in capsys.readouterr().out
        assert reader.prompts == []

    def test_no_cache_flag(self, hello_tree, temp_dir, capsys):
        CLIApplication(reader=ScriptedReader([])).run(
            ["--base", str(temp_dir), "--dedup", "--no-dedup-cache"])

        assert "Checksum cache disabled" in capsys.readouterr().out
        assert not cache_root(temp_dir).exists()

    def test_trash_flag_uses_trash(self, hello_tree, temp_dir):
        with mock.patch.object(FileService, "move_to_trash") as mock_trash:
            CLIApplication(reader=ScriptedReader(["d 0", ""])).run(
                ["--base", str(temp_dir), "--dedup", "--trash"])

        mock_trash.assert_called_once_with(str(hello_tree["a"]))

    def test_verbose_prints_statistics(self, hello_tree, temp_dir, capsys):
        CLIApplication(reader=ScriptedReader([])).run(["-b", str(temp_dir), "--dedup", "-v"])

        captured = capsys.readouterr()
        assert "Algorithm: MD5" in captured.out
        assert "Hashed: 3" in captured.out
        assert "[scanning]" in captured.err

    def test_argv_from_command_line(self, hello_tree, temp_dir, capsys):
        with mock.patch.object(sys, "argv", ["dedup", "--base", str(temp_dir), "--dedup", "-q"]):
            CLIApplication(reader=ScriptedReader([])).run()

        assert "Traversing tree" not in capsys.readouterr().out
        assert os.path.islink(cache_root(temp_dir) / "a.txt")


class TestRankRun:
    def test_rank_output(self, test_files, temp_dir, capsys):
        CLIApplication().run(["-b", str(temp_dir), "--rank", "--rank-weight-age", "0", "--rank-top", "1"])

        out = capsys.readouterr().out
        assert "Weights: age=0.000, size=1.000" in out
        assert "Top 1:" in out
        assert str(test_files["unique2"]) in out
        assert str(test_files["unique1"]) not in out

    def test_rank_empty_tree(self, temp_dir, capsys):
        CLIApplication().run(["-b", str(temp_dir), "--rank"])

        assert "No files to rank." in capsys.readouterr().out


class TestMain:
    def test_keyboard_interrupt_exits_130(self):
        with mock.patch.object(CLIApplication, "run", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc:
                main()
        assert exc.value.code == 130

    def test_unexpected_error_exits_1(self, monkeypatch, capsys):
        monkeypatch.delenv("DEBUG", raising=False)
        with mock.patch.object(CLIApplication, "run", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as exc:
                main()

        assert exc.value.code == 1
        assert "boom" in capsys.readouterr().err

    def test_debug_reraises(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "1")
        with mock.patch.object(CLIApplication, "run", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                main()
