"""Initial build of a scaffolded project.

Writes ``build.sh`` (configure into ``out/`` then build in parallel) and runs
it exactly once.  A failed build is fatal: there is no retry and no fallback
toolchain, and nothing already on disk is removed.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from nativeforge.config import ForgeConfig, ProjectSpec
from nativeforge.errors import BuildError, ScaffoldError
from nativeforge.scaffolder.templates import TemplateRenderer
from nativeforge.utils import detect_cpu_count, run_command, tail_lines, write_staged

console = Console()

BUILD_SCRIPT_TEMPLATE = "build.sh.j2"
BUILD_SCRIPT_FILENAME = "build.sh"
BUILD_SCRIPT_MODE = 0o755


class BuildInvoker:
    """Generates the build wrapper script and runs it."""

    def __init__(
        self,
        config: ForgeConfig | None = None,
        renderer: TemplateRenderer | None = None,
        scratch_dir: str | Path | None = None,
    ) -> None:
        self.config = config or ForgeConfig()
        self.renderer = renderer or TemplateRenderer()
        self.scratch_dir = scratch_dir

    # -- Script generation -------------------------------------------------

    def jobs(self) -> int:
        """Build parallelism: the configured value or one job per logical CPU."""
        return self.config.jobs or detect_cpu_count()

    def render_script(self, spec: ProjectSpec) -> str:
        return self.renderer.render(
            BUILD_SCRIPT_TEMPLATE,
            {
                "project_name": spec.name,
                "build_type": self.config.build_type,
                "jobs": self.jobs(),
            },
        )

    async def write_script(self, spec: ProjectSpec) -> Path:
        """Write the executable ``<root>/build.sh``.

        Raises:
            ScaffoldError: If the script cannot be written.
        """
        content = self.render_script(spec)
        destination = spec.root / BUILD_SCRIPT_FILENAME
        try:
            return await asyncio.to_thread(
                write_staged,
                self.scratch_dir,
                destination,
                content,
                mode=BUILD_SCRIPT_MODE,
            )
        except OSError as exc:
            raise ScaffoldError(f"Cannot write {destination}: {exc}") from exc

    # -- Build -------------------------------------------------------------

    async def invoke_build(self, spec: ProjectSpec) -> Path:
        """Write the wrapper and run it once.

        Returns:
            Path to the produced executable.

        Raises:
            BuildError: If the wrapper exits with a non-zero status.
        """
        script = await self.write_script(spec)
        console.print(
            f"  [cyan]Building[/cyan] [bold]{spec.name}[/bold] "
            f"({self.config.build_type}, {self.jobs()} jobs)..."
        )

        try:
            returncode, stdout, stderr = await run_command(
                [str(script)],
                cwd=spec.root,
                timeout=self.config.build_timeout,
            )
        except OSError as exc:
            raise BuildError(127, str(exc)) from exc

        output = "\n".join(part for part in (stdout, stderr) if part)
        if returncode != 0:
            # stderr carries the compiler diagnostics; only the progress log is cut.
            shown = "\n".join(part for part in (tail_lines(stdout), stderr) if part)
            console.print(
                Panel(
                    escape(shown) or "(no output)",
                    title=f"Build output (exit {returncode})",
                    border_style="red",
                )
            )
            raise BuildError(returncode, output)

        console.print("  [green]+[/green] Build succeeded")
        return spec.binary_path
