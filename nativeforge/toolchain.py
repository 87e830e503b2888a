"""External toolchain checks.

Verifies that every executable a run will shell out to is on ``PATH`` before
the pipeline touches the filesystem.
"""

from __future__ import annotations

import shutil
from typing import Callable

from nativeforge.config import LANGUAGES, Language
from nativeforge.errors import MissingToolError

# Needed by every project: the build wrapper drives cmake and the repo
# initializer drives git.
BASE_TOOLS: tuple[str, ...] = ("cmake", "git")


class ToolchainValidator:
    """Checks tool presence using the OS executable lookup."""

    def __init__(self, which: Callable[[str], str | None] = shutil.which) -> None:
        self._which = which

    def required_tools(self, language: Language) -> list[str]:
        tools = list(BASE_TOOLS)
        extra = LANGUAGES[language].required_tool
        if extra:
            tools.append(extra)
        return tools

    def validate(self, language: Language) -> dict[str, str]:
        """Resolve every required tool for *language*.

        Returns:
            Mapping of tool name to its resolved executable path.

        Raises:
            MissingToolError: For the first tool that cannot be found.
        """
        resolved: dict[str, str] = {}
        for tool in self.required_tools(language):
            path = self._which(tool)
            if path is None:
                raise MissingToolError(tool, language.value)
            resolved[tool] = path
        return resolved
