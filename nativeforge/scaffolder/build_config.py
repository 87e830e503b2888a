"""CMake build configuration rendering."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from jinja2 import TemplateError

from nativeforge.config import ProjectSpec
from nativeforge.errors import ScaffoldError
from nativeforge.utils import write_staged

from .templates import TemplateRenderer

BUILD_CONFIG_TEMPLATE = "CMakeLists.txt.j2"
BUILD_CONFIG_FILENAME = "CMakeLists.txt"


class BuildConfigRenderer:
    """Renders ``CMakeLists.txt`` for a project in a single template pass."""

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        scratch_dir: str | Path | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.scratch_dir = scratch_dir

    @staticmethod
    def context(spec: ProjectSpec) -> dict[str, Any]:
        """The placeholder values substituted into the template."""
        profile = spec.profile
        return {
            "project_name": spec.name,
            "languages": profile.cmake_languages,
            "extension": profile.extension,
            "standard_block": profile.standard_block,
            "linker_language": profile.linker_language,
        }

    def render(self, spec: ProjectSpec) -> str:
        """Return the build configuration text for *spec*."""
        return self.renderer.render(BUILD_CONFIG_TEMPLATE, self.context(spec))

    async def write(self, spec: ProjectSpec) -> Path:
        """Render and write ``<root>/CMakeLists.txt``.

        Raises:
            ScaffoldError: If rendering or writing fails.
        """
        try:
            content = self.render(spec)
        except TemplateError as exc:
            raise ScaffoldError(f"Cannot render {BUILD_CONFIG_FILENAME}: {exc}") from exc

        destination = spec.root / BUILD_CONFIG_FILENAME
        try:
            return await asyncio.to_thread(
                write_staged, self.scratch_dir, destination, content
            )
        except OSError as exc:
            raise ScaffoldError(f"Cannot write {destination}: {exc}") from exc
