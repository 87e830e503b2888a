"""Unit tests for version-control setup (nativeforge.builder.repo).

Tests cover:
- _run_git success, non-zero exit and missing git
- RepoInitializer runs git init once and writes .gitignore
- Idempotence on an existing repository
- Error handling when git fails
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from nativeforge.builder.repo import RepoInitializer, _run_git
from nativeforge.errors import VCSError
from nativeforge.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# _run_git
# ---------------------------------------------------------------------------

class TestRunGit:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success_returns_stdout_stderr(self, mock_subprocess):
        proc = mock_subprocess(stdout="Initialized empty Git repository", returncode=0)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)) as exec_mock:
            stdout, stderr = await _run_git("init", cwd="/tmp")
        assert stdout == "Initialized empty Git repository"
        assert stderr == ""
        assert exec_mock.call_args.args[:2] == ("git", "init")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_nonzero_exit_raises_vcs_error(self, mock_subprocess):
        proc = mock_subprocess(stderr="fatal: cannot mkdir", returncode=128)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            with pytest.raises(VCSError, match="Git command failed") as exc_info:
                await _run_git("init")
        assert exc_info.value.command == "git init"
        assert exc_info.value.stderr == "fatal: cannot mkdir"
        assert exc_info.value.exit_code == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_git_raises_vcs_error(self):
        with patch(
            "asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("git")),
        ):
            with pytest.raises(VCSError, match="Cannot run git init"):
                await _run_git("init")


# ---------------------------------------------------------------------------
# RepoInitializer
# ---------------------------------------------------------------------------

class TestRepoInitializer:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_runs_git_init_and_writes_gitignore(self, tmp_path: Path):
        with patch(
            "nativeforge.builder.repo._run_git", AsyncMock(return_value=("", ""))
        ) as git_mock:
            initialized = await RepoInitializer().init_repo(tmp_path)

        assert initialized is True
        git_mock.assert_awaited_once_with("init", cwd=tmp_path)
        gitignore = (tmp_path / ".gitignore").read_text(encoding="utf-8")
        assert gitignore == TemplateRenderer().read_static("gitignore")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_gitignore_covers_build_outputs(self, tmp_path: Path):
        with patch("nativeforge.builder.repo._run_git", AsyncMock(return_value=("", ""))):
            await RepoInitializer().init_repo(tmp_path)
        lines = (tmp_path / ".gitignore").read_text(encoding="utf-8").splitlines()
        for entry in ("out/", "build/", "CMakeFiles/", "CMakeCache.txt", "cmake_install.cmake"):
            assert entry in lines

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_existing_repository_is_not_reinitialized(self, tmp_path: Path):
        (tmp_path / ".git").mkdir()
        with patch("nativeforge.builder.repo._run_git", AsyncMock()) as git_mock:
            initialized = await RepoInitializer().init_repo(tmp_path)

        assert initialized is False
        git_mock.assert_not_awaited()
        assert (tmp_path / ".gitignore").is_file()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_git_failure_propagates(self, tmp_path: Path):
        failing = AsyncMock(side_effect=VCSError("Git command failed (exit 1): git init"))
        with patch("nativeforge.builder.repo._run_git", failing):
            with pytest.raises(VCSError):
                await RepoInitializer().init_repo(tmp_path)
        assert not (tmp_path / ".gitignore").exists()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unwritable_gitignore_is_vcs_error(self, tmp_path: Path):
        project = tmp_path / "project"
        (project / ".git").mkdir(parents=True)
        (project / ".gitignore").mkdir()
        with pytest.raises(VCSError, match="Cannot write"):
            await RepoInitializer().init_repo(project)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_staged_through_scratch(self, tmp_path: Path):
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        project = tmp_path / "project"
        (project / ".git").mkdir(parents=True)
        await RepoInitializer(scratch_dir=scratch).init_repo(project)
        assert (project / ".gitignore").is_file()
        assert list(scratch.iterdir()) == []


@pytest.mark.integration
@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestRepoInitializerWithGit:
    @pytest.mark.asyncio
    async def test_real_git_init_is_idempotent(self, tmp_path: Path):
        initializer = RepoInitializer()
        assert await initializer.init_repo(tmp_path) is True
        assert (tmp_path / ".git").is_dir()
        assert await initializer.init_repo(tmp_path) is False

        status = subprocess.run(
            ["git", "status", "--porcelain", "--ignored"],
            cwd=tmp_path, check=True, capture_output=True, text=True,
        )
        assert ".gitignore" in status.stdout
