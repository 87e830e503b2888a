"""Shared pytest fixtures for the nativeforge test suite.

Provides reusable fixtures for:
- Temporary output directories
- ProjectSpec / ForgeConfig factories
- A fake ``shutil.which`` for toolchain checks
- Mock subprocess helpers
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from nativeforge.config import ForgeConfig, Language, ProjectSpec


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Empty directory that projects are created in (auto-cleanup)."""
    output_dir = tmp_path / "workspace"
    output_dir.mkdir()
    yield output_dir


# ---------------------------------------------------------------------------
# Config & spec factories
# ---------------------------------------------------------------------------

@pytest.fixture
def forge_config(tmp_output_dir: Path) -> ForgeConfig:
    """ForgeConfig pointing at the temporary output directory."""
    return ForgeConfig(output_dir=tmp_output_dir, jobs=2)


@pytest.fixture
def make_spec(tmp_output_dir: Path) -> Callable[..., ProjectSpec]:
    """Factory for ProjectSpec instances rooted in the output directory.

    Usage:
        def test_x(make_spec):
            spec = make_spec("demo", "cpp")
    """
    def factory(
        name: str = "demo",
        language: str | Language = Language.C,
        auto_confirm: bool = True,
    ) -> ProjectSpec:
        return ProjectSpec(
            name=name,
            language=Language(language),
            auto_confirm=auto_confirm,
            root=tmp_output_dir / name,
        )

    return factory


@pytest.fixture
def scaffolded_root(make_spec) -> Callable[..., ProjectSpec]:
    """Factory that also creates the project root and its src/ directory."""
    def factory(name: str = "demo", language: str | Language = Language.C) -> ProjectSpec:
        spec = make_spec(name, language)
        (spec.root / "src").mkdir(parents=True)
        return spec

    return factory


# ---------------------------------------------------------------------------
# Toolchain
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_which():
    """Factory for ``shutil.which`` replacements.

    Usage:
        which = fake_which(missing={"nasm"})
        ToolchainValidator(which=which)
    """
    def factory(missing: set[str] | frozenset[str] = frozenset()) -> Callable[[str], str | None]:
        def which(tool: str) -> str | None:
            if tool in missing:
                return None
            return f"/usr/bin/{tool}"

        return which

    return factory


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
