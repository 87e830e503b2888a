"""Version-control setup for a freshly scaffolded project."""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from nativeforge.errors import VCSError
from nativeforge.scaffolder.templates import TemplateRenderer
from nativeforge.utils import run_command, write_staged

console = Console()

GITIGNORE_ASSET = "gitignore"


async def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    timeout: int = 60,
) -> tuple[str, str]:
    """Run a git command and return (stdout, stderr).

    Raises VCSError if the command exits with a non-zero code.
    """
    cmd = ["git", *args]
    cmd_str = " ".join(cmd)

    try:
        returncode, stdout, stderr = await run_command(cmd, cwd=cwd, timeout=timeout)
    except OSError as exc:
        raise VCSError(f"Cannot run {cmd_str}: {exc}", command=cmd_str) from exc

    if returncode != 0:
        raise VCSError(
            f"Git command failed (exit {returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
        )

    return stdout, stderr


class RepoInitializer:
    """Initializes a git repository and writes its ``.gitignore``."""

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        scratch_dir: str | Path | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.scratch_dir = scratch_dir

    async def init_repo(self, directory: str | Path) -> bool:
        """Make *directory* a git repository with the standard ignore list.

        Running it on an existing repository is not an error.

        Returns:
            ``True`` if ``git init`` ran, ``False`` if ``.git`` was already there.

        Raises:
            VCSError: If git fails or the ignore file cannot be written.
        """
        repo_path = Path(directory)
        initialized = False

        if (repo_path / ".git").exists():
            console.print(f"  [dim]{escape(str(repo_path))} is already a git repository[/dim]")
        else:
            await _run_git("init", cwd=repo_path)
            initialized = True
            console.print("  [green]+[/green] Initialized git repository")

        await self._write_gitignore(repo_path)
        console.print("  [green]+[/green] Wrote .gitignore")
        return initialized

    async def _write_gitignore(self, repo_path: Path) -> Path:
        content = self.renderer.read_static(GITIGNORE_ASSET)
        destination = repo_path / ".gitignore"
        try:
            return await asyncio.to_thread(
                write_staged, self.scratch_dir, destination, content
            )
        except OSError as exc:
            raise VCSError(f"Cannot write {destination}: {exc}") from exc
