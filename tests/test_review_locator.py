"""Tests for diffcritic.review.locator."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from diffcritic.exceptions import NoRepositoryError
from diffcritic.review.locator import (
    find_repository_root,
    is_repository_root,
    resolve_repository_root,
)

RUN = "diffcritic.review.locator.subprocess.run"


def _ok(*args, **kwargs):
    return subprocess.CompletedProcess(args[0], 0, stdout=".git\n", stderr="")


def _not_a_repo(*args, **kwargs):
    raise subprocess.CalledProcessError(128, "git", stderr="fatal: not a git repository")


class TestIsRepositoryRoot:
    def test_query_and_marker(self, repo: Path):
        with patch(RUN, side_effect=_ok) as mock_run:
            assert is_repository_root(repo)
        cmd = mock_run.call_args[0][0]
        assert cmd == ["git", "rev-parse", "--git-dir"]
        assert mock_run.call_args[1]["cwd"] == repo

    def test_query_succeeds_without_marker(self, repo: Path):
        with patch(RUN, side_effect=_ok):
            assert not is_repository_root(repo / "src")

    def test_gitfile_marker(self, tmp_path: Path):
        worktree = tmp_path / "wt"
        worktree.mkdir()
        (worktree / ".git").write_text("gitdir: /elsewhere/.git/worktrees/wt\n")
        with patch(RUN, side_effect=_ok):
            assert is_repository_root(worktree)

    def test_query_fails(self, repo: Path):
        with patch(RUN, side_effect=_not_a_repo):
            assert not is_repository_root(repo)

    def test_git_missing(self, repo: Path, caplog: pytest.LogCaptureFixture):
        with patch(RUN, side_effect=FileNotFoundError):
            with pytest.raises(NoRepositoryError, match="git not found"):
                is_repository_root(repo)
        assert any(r.levelname == "WARNING" and "git not found" in r.message for r in caplog.records)

    def test_timeout(self, repo: Path):
        with patch(RUN, side_effect=subprocess.TimeoutExpired("git", 30)):
            assert not is_repository_root(repo)


class TestFindRepositoryRoot:
    def test_git_missing_stops_walk(self, repo: Path):
        start = repo / "src"
        with patch(RUN, side_effect=FileNotFoundError) as mock_run:
            with pytest.raises(NoRepositoryError, match="Ensure git is installed"):
                find_repository_root(start)
        assert mock_run.call_count == 1

    def test_start_is_root(self, repo: Path):
        with patch(RUN, side_effect=_ok) as mock_run:
            assert find_repository_root(repo) == repo
        assert mock_run.call_count == 1

    @pytest.mark.parametrize("depth", [1, 2, 4])
    def test_nested_below_root(self, repo: Path, depth: int):
        start = repo.joinpath(*[f"d{i}" for i in range(depth)])
        start.mkdir(parents=True)
        with patch(RUN, side_effect=_ok) as mock_run:
            assert find_repository_root(start) == repo
        assert mock_run.call_count == depth + 1

    def test_stops_at_nearest_repository(self, repo: Path):
        inner = repo / "vendor" / "lib"
        (inner / ".git").mkdir(parents=True)
        start = inner / "pkg"
        start.mkdir()
        with patch(RUN, side_effect=_ok):
            assert find_repository_root(start) == inner

    def test_no_repository_anywhere(self, tmp_path: Path):
        start = tmp_path / "a" / "b"
        start.mkdir(parents=True)
        with patch(RUN, side_effect=_not_a_repo) as mock_run:
            assert find_repository_root(start) is None
        # walked all the way up to the filesystem root
        checked = [c[1]["cwd"] for c in mock_run.call_args_list]
        assert checked[0] == start
        assert checked[-1] == Path(checked[-1].anchor)


class TestResolveRepositoryRoot:
    def test_first_anchor_wins(self, repo: Path, tmp_path: Path):
        with patch(
            "diffcritic.review.locator.find_repository_root", side_effect=[repo]
        ) as mock_find:
            assert resolve_repository_root([repo / "src", tmp_path]) == repo
        assert mock_find.call_count == 1

    def test_falls_back_to_workspace(self, repo: Path, tmp_path: Path):
        with patch(
            "diffcritic.review.locator.find_repository_root", side_effect=[None, repo]
        ) as mock_find:
            assert resolve_repository_root([tmp_path / "outside", repo]) == repo
        assert mock_find.call_count == 2

    def test_all_anchors_exhausted(self, tmp_path: Path):
        with patch("diffcritic.review.locator.find_repository_root", return_value=None):
            with pytest.raises(NoRepositoryError, match="No git repository"):
                resolve_repository_root([tmp_path / "a", tmp_path / "b"])
