"""Project skeleton creation.

Creates the directory tree of a new native project and drops the
language's sample program into ``src/``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from nativeforge.config import ProjectSpec
from nativeforge.errors import ScaffoldError
from nativeforge.utils import write_staged

from .templates import TemplateRenderer

# Created in this order below the project root.
PROJECT_DIRECTORIES: tuple[str, ...] = ("src", "include", "out")


class ProjectScaffolder:
    """Creates ``src/``, ``include/`` and ``out/`` plus ``src/main.<ext>``.

    The project root must not exist yet.  Collisions are rejected by the
    option resolver; if the root appears anyway the scaffolder refuses to
    merge into it.
    """

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        scratch_dir: str | Path | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.scratch_dir = scratch_dir

    # -- Public API --------------------------------------------------------

    async def scaffold(self, spec: ProjectSpec) -> list[Path]:
        """Create the skeleton for *spec*.

        Returns:
            Every created path, in creation order: the three directories
            followed by the sample source file.

        Raises:
            ScaffoldError: If the project root already exists or the OS
                refuses to create a directory or file.
        """
        return await asyncio.to_thread(self._scaffold, spec)

    # -- Internals ---------------------------------------------------------

    def _scaffold(self, spec: ProjectSpec) -> list[Path]:
        try:
            spec.root.mkdir(parents=False, exist_ok=False)
        except FileExistsError as exc:
            raise ScaffoldError(
                f"Refusing to scaffold into existing path: {spec.root}"
            ) from exc
        except OSError as exc:
            raise ScaffoldError(f"Cannot create {spec.root}: {exc}") from exc

        created: list[Path] = []
        try:
            for name in PROJECT_DIRECTORIES:
                directory = spec.root / name
                directory.mkdir(exist_ok=False)
                created.append(directory)

            source = self.sample_source(spec)
            created.append(write_staged(self.scratch_dir, spec.source_path, source))
        except OSError as exc:
            raise ScaffoldError(f"Cannot scaffold {spec.root}: {exc}") from exc

        return created

    def sample_source(self, spec: ProjectSpec) -> str:
        """Return the verbatim hello-world program for the project's language."""
        return self.renderer.read_static(f"sources/{spec.profile.sample_source}")
